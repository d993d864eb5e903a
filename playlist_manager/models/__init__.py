from playlist_manager.models.base import Base
from playlist_manager.models.library import Favorite, ListeningHistory
from playlist_manager.models.playlist import Playlist, PlaylistEntry
from playlist_manager.models.user import User

__all__ = [
    "Base",
    "Favorite",
    "ListeningHistory",
    "Playlist",
    "PlaylistEntry",
    "User",
]
