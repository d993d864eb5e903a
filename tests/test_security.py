import pytest

from playlist_manager.core import security
from playlist_manager.core.errors import AuthenticationError


def test_password_hash_round_trip() -> None:
    hashed = security.hash_password("hunter22")

    assert hashed != "hunter22"
    assert security.verify_password("hunter22", hashed)
    assert not security.verify_password("hunter23", hashed)
    assert not security.verify_password("hunter22", "not-a-bcrypt-hash")


def test_access_token_carries_user_id() -> None:
    token = security.create_access_token(user_id=42, email="a@example.com", name="A")

    assert security.decode_access_token(token) == 42


def test_expired_token_is_rejected() -> None:
    token = security.create_access_token(user_id=42, email="a@example.com", name="A", expires_minutes=-1)

    with pytest.raises(AuthenticationError, match="expired"):
        security.decode_access_token(token)


def test_tampered_token_is_rejected() -> None:
    token = security.create_access_token(user_id=42, email="a@example.com", name="A")

    with pytest.raises(AuthenticationError):
        security.decode_access_token(token[:-2] + "xx")


def test_default_signing_key_logs_warning(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(security, "JWT_SECRET", security.DEFAULT_JWT_SECRET)

    with caplog.at_level("WARNING", logger="playlist_manager.core.security"):
        assert security.check_signing_key() is False

    assert "JWT_SECRET is not set" in caplog.text


def test_configured_signing_key_is_quiet(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(security, "JWT_SECRET", "a-real-deployment-secret")

    with caplog.at_level("WARNING", logger="playlist_manager.core.security"):
        assert security.check_signing_key() is True

    assert caplog.records == []
