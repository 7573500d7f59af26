from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from journeyscope.core.config import get_settings

settings = get_settings()
database_url = settings.resolved_database_url
is_sqlite = database_url.startswith('sqlite')

if database_url.startswith('sqlite:///'):
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)

engine = create_engine(
    database_url,
    connect_args={'check_same_thread': False} if is_sqlite else {},
)

if is_sqlite:
    # products, competitors, ICPs and personas rely on ON DELETE CASCADE
    @event.listens_for(engine, 'connect')
    def _enable_foreign_keys(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
