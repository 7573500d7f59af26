from __future__ import annotations

from functools import lru_cache
from typing import Generator

from sqlalchemy.orm import Session

from journeyscope.db.session import SessionLocal
from journeyscope.services.wizard_service import WizardService


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache(maxsize=1)
def get_wizard_service() -> WizardService:
    return WizardService()
