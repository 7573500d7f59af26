from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

import journeyscope.models  # noqa: F401
from journeyscope.db.base import Base
from journeyscope.db.session import engine as default_engine

LOGGER = logging.getLogger(__name__)


def init_db(bind: Engine | None = None) -> None:
    """Create any missing tables. Alembic owns schema changes after the first deploy."""
    target = bind or default_engine
    Base.metadata.create_all(bind=target)
    LOGGER.info(
        'Database ready (%d tables) at %s',
        len(Base.metadata.tables),
        target.url.render_as_string(hide_password=True),
    )


if __name__ == '__main__':
    init_db()
