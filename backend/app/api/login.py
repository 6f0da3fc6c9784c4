"""Login, logout and session lookup for account owners and team members."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.security import MEMBER_SUBJECT, USER_SUBJECT, create_access_token, verify_password
from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, describe_principal, get_current_principal
from backend.app.models.team_member import CAPABILITY_FLAGS, TeamMember
from backend.app.models.user import User
from backend.app.schemas.user import LoginRequest, MessageResponse, PrincipalRead, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def start_session(response: Response, principal: Principal) -> TokenResponse:
    """Issue a token for ``principal`` and set it as the httpOnly session cookie."""
    settings = get_settings()
    if principal.member is not None:
        subject = f"{MEMBER_SUBJECT}:{principal.member.id}"
    else:
        subject = f"{USER_SUBJECT}:{principal.account.id}"
    token = create_access_token(subject)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return TokenResponse(access_token=token, principal=describe_principal(principal))


def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if user is not None:
        if not verify_password(credentials.password, user.hashed_password):
            raise _invalid_credentials()
        logger.info("Owner %s logged in", user.id)
        return start_session(response, Principal(account=user))

    member = db.query(TeamMember).filter(TeamMember.email == credentials.email).first()
    if member is None or not verify_password(credentials.password, member.hashed_password):
        raise _invalid_credentials()
    if not member.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")
    capabilities = {flag: bool(getattr(member, flag)) for flag in CAPABILITY_FLAGS}
    logger.info("Team member %s logged in for owner %s", member.id, member.admin_id)
    return start_session(response, Principal(account=member.admin, member=member, capabilities=capabilities))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=PrincipalRead)
def read_me(principal: Principal = Depends(get_current_principal)):
    return describe_principal(principal)
