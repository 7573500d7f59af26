from __future__ import annotations

import logging

from journeyscope.core.config import get_settings

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure_logging(level: str | None = None) -> None:
    resolved = (level or get_settings().log_level or 'INFO').upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger('journeyscope').setLevel(resolved)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
