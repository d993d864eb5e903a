from datetime import datetime

from pydantic import BaseModel, Field

from playlist_manager.schemas.track import PlaylistEntryOut


class PlaylistCreate(BaseModel):
    name: str | None = Field(default=None, examples=["Late night jazz"])
    description: str | None = None
    is_public: bool = False


class PlaylistUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    is_public: bool | None = None


class PlaylistVisibilityUpdate(BaseModel):
    is_public: bool


class PlaylistOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_public: bool
    share_token: str | None = None
    song_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PlaylistVisibilityOut(BaseModel):
    id: int
    is_public: bool
    share_token: str | None = None


class PlaylistDetailOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_public: bool
    share_token: str | None = None
    owner_name: str
    is_owner: bool
    songs: list[PlaylistEntryOut]
    created_at: datetime
    updated_at: datetime


class SharedPlaylistOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    owner_name: str
    songs: list[PlaylistEntryOut]
    created_at: datetime


class PublicPlaylistOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    share_token: str
    owner_name: str
    song_count: int
    created_at: datetime
