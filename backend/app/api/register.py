"""Handles account signup for Invoice Studio."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.api.login import start_session
from backend.app.core.security import get_password_hash
from backend.app.crud.base import commit_or_raise
from backend.app.crud.crud_team_member import email_taken
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal
from backend.app.models.user import User
from backend.app.schemas.user import SignupRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(user_in: SignupRequest, response: Response, db: Session = Depends(get_db)):
    if email_taken(db, user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if db.query(User).filter(User.username == user_in.username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
    hashed_password = get_password_hash(user_in.password)  # Hash password before storing
    user = User(username=user_in.username, email=user_in.email, hashed_password=hashed_password)
    db.add(user)
    commit_or_raise(db, conflict_detail="Email or username already registered")
    db.refresh(user)
    return start_session(response, Principal(account=user))
