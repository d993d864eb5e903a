from playlist_manager.api.routes.auth import router as auth_router
from playlist_manager.api.routes.favorites import router as favorites_router
from playlist_manager.api.routes.history import router as history_router
from playlist_manager.api.routes.playlists import router as playlists_router
from playlist_manager.api.routes.shared import router as shared_router
from playlist_manager.api.routes.songs import router as songs_router
from playlist_manager.api.routes.user import router as user_router

__all__ = [
    "auth_router",
    "favorites_router",
    "history_router",
    "playlists_router",
    "shared_router",
    "songs_router",
    "user_router",
]
