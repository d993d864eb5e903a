import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from playlist_manager.core import itunes
from playlist_manager.models import Base, User


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db):
    counter = {"value": 0}

    def _make_user(name: str | None = None) -> User:
        counter["value"] += 1
        index = counter["value"]
        user = User(
            name=name or f"Listener {index}",
            email=f"listener{index}@example.com",
            password_hash="not-a-real-hash",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture(autouse=True)
def no_catalog_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(itunes.random, "uniform", lambda *_args, **_kwargs: 0)
