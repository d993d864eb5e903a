import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from playlist_manager.api import (
    auth_router,
    favorites_router,
    history_router,
    playlists_router,
    shared_router,
    songs_router,
    user_router,
)
from playlist_manager.api.routes.songs import search as search_songs_route
from playlist_manager.core import db as db_module
from playlist_manager.core.config import FRONTEND_URL
from playlist_manager.core.errors import AuthenticationError, ServiceError
from playlist_manager.core.security import check_signing_key
from playlist_manager.core.version import APP_VERSION, build_info
from playlist_manager.schemas.track import CatalogSearchOut

app = FastAPI(title="Music Playlist Manager", version=APP_VERSION)

logger = logging.getLogger(__name__)

check_signing_key()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


@app.middleware("http")
async def request_tracing_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    method = request.method
    path = request.url.path
    logger.info("REQ_START %s %s %s", request_id, method, path)
    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as err:
        logger.error("REQ_ERR %s %s %s %s", request_id, method, path, err)
        raise
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "REQ_END %s %s %s %s %.2fms",
        request_id,
        method,
        path,
        response.status_code,
        elapsed_ms,
    )
    return response


app.include_router(auth_router, prefix="/api/auth")
app.include_router(playlists_router, prefix="/api/playlists")
app.include_router(shared_router, prefix="/api/shared")
app.include_router(songs_router, prefix="/api/songs")
app.include_router(favorites_router, prefix="/api/favorites")
app.include_router(history_router, prefix="/api/history")
app.include_router(user_router, prefix="/api/user")
# Older clients still call the catalog search here.
app.add_api_route(
    "/api/search",
    search_songs_route,
    methods=["GET"],
    response_model=CatalogSearchOut,
    tags=["songs"],
)


@app.get("/")
def root():
    return build_info()


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/health")
def database_health():
    if db_module.SessionLocal is None:
        return JSONResponse(status_code=503, content={"ok": False, "database": "not_configured"})
    db = db_module.SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        return JSONResponse(status_code=503, content={"ok": False, "database": "disconnected"})
    finally:
        db.close()
    return {"ok": True, "database": "connected"}
