from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(REPO_ROOT / '.env'), env_file_encoding='utf-8', extra='ignore')

    app_name: str = 'JourneyScope'
    environment: str = 'dev'
    log_level: str = 'INFO'

    database_url: str = 'sqlite:///./backend/data/app.db'

    reporting_timezone: str = 'UTC'
    timeline_periods: int = 12
    segment_lookback_days: int = 365

    super_admin_accounts_csv: str = ''
    feature_positive_values_csv: str = 'yes'

    frontend_origin: str = 'http://localhost:3000'
    frontend_origins_csv: str = 'http://localhost:3000,http://127.0.0.1:3000'

    @property
    def repo_root(self) -> Path:
        return Path(__file__).resolve().parents[3]

    @property
    def backend_root(self) -> Path:
        return Path(__file__).resolve().parents[2]

    @property
    def data_dir(self) -> Path:
        return self.backend_root / 'data'

    @property
    def resolved_database_url(self) -> str:
        if self.database_url.startswith('sqlite:///./'):
            rel_path = self.database_url.removeprefix('sqlite:///./')
            absolute_path = (self.repo_root / rel_path).resolve()
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{absolute_path.as_posix()}"
        return self.database_url

    @property
    def super_admin_accounts(self) -> set[str]:
        return {s.strip() for s in self.super_admin_accounts_csv.split(',') if s.strip()}

    @property
    def feature_positive_values(self) -> frozenset[str]:
        return frozenset(s.strip().lower() for s in self.feature_positive_values_csv.split(',') if s.strip())

    @property
    def frontend_origins(self) -> list[str]:
        raw = [s.strip() for s in self.frontend_origins_csv.split(',') if s.strip()]
        if self.frontend_origin and self.frontend_origin not in raw:
            raw.append(self.frontend_origin)
        seen: set[str] = set()
        out: list[str] = []
        for origin in raw:
            if origin in seen:
                continue
            seen.add(origin)
            out.append(origin)
        return out

    def is_super_admin(self, account_id: str | None) -> bool:
        return bool(account_id) and account_id in self.super_admin_accounts


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
