from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class TrackIn(BaseModel):
    """Track metadata as the client received it from the catalog search."""

    track_id: str | None = Field(default=None, examples=["1440857781"])
    track_name: str | None = None
    artist_name: str | None = None
    artwork_url: str | None = None
    preview_url: str | None = None

    @field_validator("track_id", mode="before")
    @classmethod
    def _coerce_track_id(cls, value):
        if value is None:
            return None
        return str(value)


class TrackOut(BaseModel):
    track_id: str
    track_name: str
    artist_name: str
    artwork_url: str | None = None
    preview_url: str | None = None

    class Config:
        from_attributes = True


class PlaylistEntryOut(TrackOut):
    added_at: datetime


class FavoriteOut(TrackOut):
    id: int
    added_at: datetime


class HistoryItemOut(TrackOut):
    id: int
    played_at: datetime


class HistoryPageOut(BaseModel):
    history: list[HistoryItemOut]
    total: int
    limit: int
    offset: int


class RecentlyPlayedOut(TrackOut):
    last_played: datetime


class FavoriteStatusOut(BaseModel):
    is_favorite: bool


class CatalogSongOut(BaseModel):
    track_id: str
    track_name: str | None = None
    artist_name: str | None = None
    collection_name: str | None = None
    artwork_url: str | None = None
    artwork_url_60: str | None = None
    preview_url: str | None = None
    track_time_millis: int | None = None
    release_date: str | None = None
    primary_genre_name: str | None = None


class CatalogSearchOut(BaseModel):
    songs: list[CatalogSongOut]
    count: int
