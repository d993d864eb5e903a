import os

APP_NAME = "Music Playlist Manager API"
APP_VERSION = os.getenv("APP_VERSION", "2.0.0")

# First non-empty wins; hosting platforms disagree on the variable name.
_COMMIT_ENV_KEYS = ("GIT_SHA", "COMMIT_SHA", "SOURCE_VERSION")


def _first_env(keys: tuple[str, ...]) -> str | None:
    return next((os.environ[key] for key in keys if os.getenv(key)), None)


def build_info() -> dict[str, str | None]:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "git_sha": _first_env(_COMMIT_ENV_KEYS),
        "build_time": os.getenv("BUILD_TIME") or None,
    }
