from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from playlist_manager.api.deps import require_user_id
from playlist_manager.core.db import get_db
from playlist_manager.schemas.track import HistoryItemOut, HistoryPageOut, RecentlyPlayedOut, TrackIn
from playlist_manager.services.library import (
    clear_history,
    get_history_page,
    get_recently_played,
    record_play,
)

router = APIRouter(tags=["history"])


@router.get("", response_model=HistoryPageOut)
def get_history(
    limit: int | None = None,
    offset: int | None = None,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return get_history_page(db, user_id, limit, offset)


@router.post("", response_model=HistoryItemOut, status_code=status.HTTP_201_CREATED)
def add_to_history(
    payload: TrackIn,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return record_play(db, user_id, payload)


@router.get("/recent", response_model=list[RecentlyPlayedOut])
def recently_played(
    limit: int | None = None,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    return get_recently_played(db, user_id, limit)


@router.delete("")
def delete_history(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    removed = clear_history(db, user_id)
    return {"ok": True, "removed": removed}
