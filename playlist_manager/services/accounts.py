import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playlist_manager.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from playlist_manager.core.security import create_access_token, hash_password, verify_password
from playlist_manager.models.user import User
from playlist_manager.repositories import library as library_repo
from playlist_manager.repositories.playlists import count_playlists_for_owner
from playlist_manager.repositories.users import create_user, get_user_by_email, get_user_by_id

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def issue_token(user: User) -> str:
    return create_access_token(user_id=user.id, email=user.email, name=user.name)


def register_user(db: Session, name: str | None, email: str | None, password: str | None) -> User:
    name = (name or "").strip()
    email = (email or "").strip().lower()
    if not name or not email or not password:
        raise ValidationError("All fields are required (name, email, password).")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    if get_user_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists.")

    try:
        user = create_user(db, name=name, email=email, password_hash=hash_password(password))
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("User with this email already exists.") from exc
    logger.info("User registered user_id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str | None, password: str | None) -> User:
    if not email or not password:
        raise ValidationError("Email and password are required.")
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password.")
    return user


def get_profile(db: Session, user_id: int) -> dict:
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at,
        "stats": {
            "playlist_count": count_playlists_for_owner(db, user_id),
            "favorites_count": library_repo.count_favorites(db, user_id),
        },
    }
