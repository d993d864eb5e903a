from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from playlist_manager.core.errors import AuthenticationError
from playlist_manager.core.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int | None:
    """Caller id for routes that also serve anonymous callers.

    A missing or unusable token makes the caller anonymous instead of failing.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except AuthenticationError:
        return None


def require_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.")
    return decode_access_token(credentials.credentials)
