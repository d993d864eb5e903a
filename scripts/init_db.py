"""Create all tables directly from the models.

Meant for local SQLite databases and throwaway environments; production
schemas are managed with ``alembic upgrade head``.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from sqlalchemy import inspect

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in os.sys.path:
    os.sys.path.insert(0, str(ROOT_DIR))

from playlist_manager.core import db  # noqa: E402
from playlist_manager.models import Base  # noqa: E402

logger = logging.getLogger("init_db")


def main() -> int:
    if db.engine is None:
        logger.error("DATABASE_URL not configured")
        return 1
    Base.metadata.create_all(bind=db.engine)
    tables = sorted(inspect(db.engine).get_table_names())
    logger.info("Tables ready: %s", ", ".join(tables))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
