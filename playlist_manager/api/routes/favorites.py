from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from playlist_manager.api.deps import require_user_id
from playlist_manager.core.db import get_db
from playlist_manager.repositories.library import list_favorites
from playlist_manager.schemas.track import FavoriteOut, FavoriteStatusOut, TrackIn
from playlist_manager.services.library import add_favorite, is_favorite, remove_favorite

router = APIRouter(tags=["favorites"])


@router.get("", response_model=list[FavoriteOut])
def get_favorites(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    return list_favorites(db, user_id)


@router.post("", response_model=FavoriteOut, status_code=status.HTTP_201_CREATED)
def create_favorite(
    payload: TrackIn,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return add_favorite(db, user_id, payload)


@router.get("/check/{track_id}", response_model=FavoriteStatusOut)
def check_favorite(
    track_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return {"is_favorite": is_favorite(db, user_id, track_id)}


@router.delete("/{track_id}")
def delete_favorite(
    track_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    remove_favorite(db, user_id, track_id)
    return {"ok": True}
