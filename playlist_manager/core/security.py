import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from playlist_manager.core.config import DEFAULT_JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRES_MINUTES, JWT_SECRET
from playlist_manager.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


def check_signing_key() -> bool:
    """Warn when tokens are signed with the built-in development key."""
    if JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; bearer tokens are signed with the default development key")
        return False
    return True


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(*, user_id: int, email: str, name: str, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes if expires_minutes is not None else JWT_EXPIRES_MINUTES)
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id asserted by a bearer token."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired. Please login again.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token. Please login again.") from exc
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token. Please login again.") from exc
