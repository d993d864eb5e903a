from collections.abc import Mapping

from playlist_manager.core.errors import ValidationError
from playlist_manager.schemas.track import TrackIn

_REQUIRED_FIELDS = ("track_id", "track_name", "artist_name")


def normalize_track(track: TrackIn | Mapping) -> dict[str, str | None]:
    """Return the stored column values for a track, or raise ValidationError."""
    if isinstance(track, Mapping):
        track = TrackIn.model_validate(dict(track))
    values = {
        "track_id": (track.track_id or "").strip(),
        "track_name": (track.track_name or "").strip(),
        "artist_name": (track.artist_name or "").strip(),
        "artwork_url": (track.artwork_url or "").strip() or None,
        "preview_url": (track.preview_url or "").strip() or None,
    }
    if any(not values[field] for field in _REQUIRED_FIELDS):
        raise ValidationError("Song details are required (track_id, track_name, artist_name).")
    return values
