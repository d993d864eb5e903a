import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from playlist_manager.core import config

logger = logging.getLogger(__name__)

_DRIVER_PREFIXES = (
    ("postgres://", "postgresql+psycopg2://"),
    ("postgresql://", "postgresql+psycopg2://"),
)


def get_database_url() -> str | None:
    """DATABASE_URL with bare postgres schemes pinned to the psycopg2 driver."""
    database_url = config.DATABASE_URL
    if not database_url:
        return None
    for prefix, replacement in _DRIVER_PREFIXES:
        if database_url.startswith(prefix):
            return replacement + database_url[len(prefix):]
    return database_url


def _connect_args(backend: str) -> dict:
    if backend == "postgresql":
        return {"application_name": "playlist-manager-api"}
    if backend == "sqlite":
        # Request handlers run in a threadpool; the connection may hop threads.
        return {"check_same_thread": False}
    return {}


def _create_engine():
    database_url = get_database_url()
    if not database_url:
        logger.warning("DATABASE_URL not configured; database routes will fail")
        return None
    url = make_url(database_url)
    backend = url.get_backend_name()
    logger.info("Database engine configured backend=%s host=%s", backend, url.host)
    return create_engine(url, pool_pre_ping=True, connect_args=_connect_args(backend))


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine else None


def get_db():
    if SessionLocal is None:
        raise RuntimeError("DATABASE_URL not configured")
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
