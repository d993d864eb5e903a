from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from playlist_manager.api.deps import require_user_id
from playlist_manager.core.db import get_db
from playlist_manager.schemas.user import DashboardOut, ProfileOut
from playlist_manager.services.accounts import get_profile
from playlist_manager.services.library import build_dashboard

router = APIRouter(tags=["user"])


@router.get("/profile", response_model=ProfileOut)
def profile(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    return get_profile(db, user_id)


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    return build_dashboard(db, user_id)
