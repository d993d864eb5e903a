import logging
from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playlist_manager.core.config import HISTORY_DEFAULT_LIMIT, RECENTLY_PLAYED_DEFAULT_LIMIT
from playlist_manager.core.errors import ConflictError, NotFoundError
from playlist_manager.models.library import Favorite, ListeningHistory
from playlist_manager.repositories import library as library_repo
from playlist_manager.repositories.playlists import count_playlists_for_owner
from playlist_manager.schemas.track import TrackIn
from playlist_manager.services.tracks import normalize_track

logger = logging.getLogger(__name__)


def _non_negative(value: int | None, default: int) -> int:
    if value is None or value < 0:
        return default
    return value


def add_favorite(db: Session, user_id: int, track: TrackIn | Mapping) -> Favorite:
    values = normalize_track(track)
    if library_repo.find_favorite(db, user_id, values["track_id"]) is not None:
        raise ConflictError("Song already in favorites.")
    try:
        return library_repo.create_favorite(db, user_id, **values)
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Song already in favorites.") from exc


def remove_favorite(db: Session, user_id: int, track_id: str) -> None:
    if not library_repo.delete_favorite(db, user_id, str(track_id)):
        raise NotFoundError("Song not found in favorites.")


def is_favorite(db: Session, user_id: int, track_id: str) -> bool:
    return library_repo.find_favorite(db, user_id, str(track_id)) is not None


def record_play(db: Session, user_id: int, track: TrackIn | Mapping) -> ListeningHistory:
    values = normalize_track(track)
    return library_repo.create_history_item(db, user_id, **values)


def get_history_page(db: Session, user_id: int, limit: int | None = None, offset: int | None = None) -> dict:
    resolved_limit = _non_negative(limit, HISTORY_DEFAULT_LIMIT) or HISTORY_DEFAULT_LIMIT
    resolved_offset = _non_negative(offset, 0)
    return {
        "history": library_repo.list_history(db, user_id, limit=resolved_limit, offset=resolved_offset),
        "total": library_repo.count_history(db, user_id),
        "limit": resolved_limit,
        "offset": resolved_offset,
    }


def get_recently_played(db: Session, user_id: int, limit: int | None = None) -> list[dict]:
    resolved_limit = _non_negative(limit, RECENTLY_PLAYED_DEFAULT_LIMIT) or RECENTLY_PLAYED_DEFAULT_LIMIT
    recent = []
    for track_id, _last_played_at in library_repo.list_recently_played(db, user_id, limit=resolved_limit):
        latest = library_repo.get_latest_play(db, user_id, track_id)
        if latest is None:
            continue
        recent.append(
            {
                "track_id": latest.track_id,
                "track_name": latest.track_name,
                "artist_name": latest.artist_name,
                "artwork_url": latest.artwork_url,
                "preview_url": latest.preview_url,
                "last_played": latest.played_at,
            }
        )
    return recent


def clear_history(db: Session, user_id: int) -> int:
    removed = library_repo.clear_history(db, user_id)
    logger.info("Listening history cleared user_id=%s rows=%s", user_id, removed)
    return removed


def build_dashboard(db: Session, user_id: int) -> dict:
    most_played = [
        {
            "track_id": row.track_id,
            "track_name": row.track_name,
            "artist_name": row.artist_name,
            "artwork_url": row.artwork_url,
            "preview_url": row.preview_url,
            "play_count": int(row.play_count),
        }
        for row in library_repo.list_most_played(db, user_id, limit=5)
    ]
    return {
        "stats": {
            "total_playlists": count_playlists_for_owner(db, user_id),
            "total_favorites": library_repo.count_favorites(db, user_id),
            "total_plays": library_repo.count_history(db, user_id),
            "unique_songs_played": library_repo.count_unique_tracks_played(db, user_id),
        },
        "most_played": most_played,
        "recent_activity": library_repo.list_history(db, user_id, limit=10),
    }
