import os

DATABASE_URL = os.getenv("DATABASE_URL")

DEFAULT_JWT_SECRET = "change-me"
JWT_SECRET = os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(7 * 24 * 60)))

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"
ITUNES_TOP_SONGS_URL = "https://itunes.apple.com/us/rss/topsongs/limit={}/json"

ITUNES_CONNECT_TIMEOUT = int(os.getenv("ITUNES_CONNECT_TIMEOUT", "5"))
ITUNES_READ_TIMEOUT = int(os.getenv("ITUNES_READ_TIMEOUT", "15"))
ITUNES_REQUEST_TIMEOUT = (ITUNES_CONNECT_TIMEOUT, ITUNES_READ_TIMEOUT)
ITUNES_MAX_CONCURRENCY = int(os.getenv("ITUNES_MAX_CONCURRENCY", "4"))
ITUNES_MAX_RETRY_AFTER = int(os.getenv("ITUNES_MAX_RETRY_AFTER", "30"))

SEARCH_DEFAULT_LIMIT = 25
SEARCH_MAX_LIMIT = 200
TRENDING_DEFAULT_LIMIT = 12
TRENDING_MAX_LIMIT = 50

PUBLIC_SEARCH_DEFAULT_LIMIT = 20
PUBLIC_SEARCH_MAX_LIMIT = 100

HISTORY_DEFAULT_LIMIT = 50
RECENTLY_PLAYED_DEFAULT_LIMIT = 10

SHARE_TOKEN_BYTES = 16
