"""Account owner profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.settings import get_settings
from backend.app.crud.base import commit_or_raise
from backend.app.crud.crud_team_member import email_taken
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.user import ProfileUpdate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["profile"])


@router.put("/profile", response_model=UserRead)
def update_my_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if profile.email and profile.email != current_user.email and email_taken(db, profile.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if profile.username and profile.username != current_user.username:
        if db.query(User).filter(User.username == profile.username).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
    for field, value in profile.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(current_user, field, value)
    commit_or_raise(db, conflict_detail="Email or username already registered")
    db.refresh(current_user)
    return current_user


@router.delete("/account")
def delete_my_account(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    db.delete(current_user)
    commit_or_raise(db)
    response.delete_cookie(get_settings().session_cookie_name)
    logger.info("Deleted account %s", user_id)
    return {"success": True}
