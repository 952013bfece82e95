from __future__ import annotations

import logging

from pathfinder.config import get_settings
from pathfinder.db.base import Base
from pathfinder.db.session import engine
from pathfinder.db import models  # noqa: F401

logger = logging.getLogger(__name__)


def ensure_data_directories() -> None:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def init_database() -> list[str]:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
    tables = sorted(Base.metadata.tables)
    logger.info("Database ready at %s (%s)", get_settings().database_url, ", ".join(tables))
    return tables
