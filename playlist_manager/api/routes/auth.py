from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from playlist_manager.core.db import get_db
from playlist_manager.schemas.user import AuthOut, LoginIn, RegisterIn
from playlist_manager.services.accounts import authenticate_user, issue_token, register_user

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(db, payload.name, payload.email, payload.password)
    return {"user": user, "token": issue_token(user)}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    return {"user": user, "token": issue_token(user)}
