from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from playlist_manager.core.db import get_db
from playlist_manager.schemas.playlist import SharedPlaylistOut
from playlist_manager.schemas.track import PlaylistEntryOut
from playlist_manager.services.playlist_sharing import resolve_by_share_token

router = APIRouter(tags=["shared"])


@router.get("/{token}", response_model=SharedPlaylistOut)
def get_shared_playlist(token: str, db: Session = Depends(get_db)):
    view = resolve_by_share_token(db, token)
    return SharedPlaylistOut(
        id=view.id,
        name=view.name,
        description=view.description,
        owner_name=view.owner_name,
        songs=[PlaylistEntryOut.model_validate(entry) for entry in view.entries],
        created_at=view.created_at,
    )
