from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from playlist_manager.api.deps import get_optional_user_id, require_user_id
from playlist_manager.core.db import get_db
from playlist_manager.models.playlist import Playlist
from playlist_manager.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetailOut,
    PlaylistOut,
    PlaylistUpdate,
    PlaylistVisibilityOut,
    PlaylistVisibilityUpdate,
    PublicPlaylistOut,
)
from playlist_manager.schemas.track import PlaylistEntryOut, TrackIn
from playlist_manager.services import playlist_sharing

router = APIRouter(tags=["playlists"])


def _playlist_out(playlist: Playlist, song_count: int) -> PlaylistOut:
    return PlaylistOut(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        is_public=playlist.is_public,
        share_token=playlist.share_token,
        song_count=song_count,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


@router.get("", response_model=list[PlaylistOut])
def list_playlists(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    return [
        _playlist_out(playlist, song_count)
        for playlist, song_count in playlist_sharing.list_owned_playlists(db, user_id)
    ]


@router.post("", response_model=PlaylistOut, status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    playlist = playlist_sharing.create_playlist(
        db,
        user_id,
        payload.name,
        payload.description,
        payload.is_public,
    )
    return _playlist_out(playlist, 0)


@router.get("/public/search", response_model=list[PublicPlaylistOut])
def search_public_playlists(
    term: str | None = None,
    limit: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return playlist_sharing.search_public(db, term, limit)


@router.get("/{playlist_id}", response_model=PlaylistDetailOut)
def get_playlist(
    playlist_id: int,
    user_id: int | None = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    view = playlist_sharing.get_playlist_detail(db, playlist_id, user_id)
    playlist = view.playlist
    return PlaylistDetailOut(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        is_public=playlist.is_public,
        share_token=playlist.share_token,
        owner_name=view.owner_name,
        is_owner=view.is_owner,
        songs=[PlaylistEntryOut.model_validate(entry) for entry in view.entries],
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


@router.put("/{playlist_id}", response_model=PlaylistOut)
def update_playlist(
    playlist_id: int,
    payload: PlaylistUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    playlist = playlist_sharing.update_playlist(
        db,
        playlist_id,
        user_id,
        name=payload.name,
        description=payload.description,
        is_public=payload.is_public,
    )
    return _playlist_out(playlist, len(playlist.entries))


@router.put("/{playlist_id}/visibility", response_model=PlaylistVisibilityOut)
def set_playlist_visibility(
    playlist_id: int,
    payload: PlaylistVisibilityUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    visibility = playlist_sharing.set_visibility(db, playlist_id, user_id, payload.is_public)
    return PlaylistVisibilityOut(
        id=visibility.playlist_id,
        is_public=visibility.is_public,
        share_token=visibility.share_token,
    )


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: int,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    playlist_sharing.delete_playlist(db, playlist_id, user_id)
    return {"ok": True}


@router.post(
    "/{playlist_id}/songs",
    response_model=PlaylistEntryOut,
    status_code=status.HTTP_201_CREATED,
)
def add_song(
    playlist_id: int,
    payload: TrackIn,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return playlist_sharing.add_entry(db, playlist_id, user_id, payload)


@router.delete("/{playlist_id}/songs/{track_id}")
def remove_song(
    playlist_id: int,
    track_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    playlist_sharing.remove_entry(db, playlist_id, user_id, track_id)
    return {"ok": True}
