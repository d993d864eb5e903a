from datetime import datetime

from pydantic import BaseModel, Field

from playlist_manager.schemas.track import TrackOut


class RegisterIn(BaseModel):
    name: str | None = None
    email: str | None = Field(default=None, examples=["listener@example.com"])
    password: str | None = None


class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class AuthOut(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"


class ProfileStats(BaseModel):
    playlist_count: int
    favorites_count: int


class ProfileOut(UserOut):
    stats: ProfileStats


class DashboardStats(BaseModel):
    total_playlists: int
    total_favorites: int
    total_plays: int
    unique_songs_played: int


class MostPlayedOut(TrackOut):
    play_count: int


class RecentActivityOut(TrackOut):
    played_at: datetime


class DashboardOut(BaseModel):
    stats: DashboardStats
    most_played: list[MostPlayedOut]
    recent_activity: list[RecentActivityOut]
