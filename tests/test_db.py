import pytest

from playlist_manager.core import config, db


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@host/db", "postgresql+psycopg2://u:p@host/db"),
        ("postgresql://u:p@host/db", "postgresql+psycopg2://u:p@host/db"),
        ("postgresql+psycopg2://u:p@host/db", "postgresql+psycopg2://u:p@host/db"),
        ("sqlite:///local.db", "sqlite:///local.db"),
        (None, None),
    ],
)
def test_database_url_pins_psycopg2_driver(monkeypatch: pytest.MonkeyPatch, raw, expected) -> None:
    monkeypatch.setattr(config, "DATABASE_URL", raw)

    assert db.get_database_url() == expected


def test_get_db_requires_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(db, "SessionLocal", None)

    with pytest.raises(RuntimeError):
        next(db.get_db())
