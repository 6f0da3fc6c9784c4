"""Authentication dependencies: resolve the request principal and check capabilities."""

from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.app.core.errors import PermissionDeniedError
from backend.app.core.security import MEMBER_SUBJECT, USER_SUBJECT, decode_access_token, parse_subject
from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.models.team_member import CAPABILITY_FLAGS, TeamMember
from backend.app.models.user import User
from backend.app.schemas.team_member import Capabilities
from backend.app.schemas.user import PrincipalRead, UserRead

OWNER_CAPABILITIES = {flag: flag != "can_view_only_assigned_invoices" for flag in CAPABILITY_FLAGS}


@dataclass
class Principal:
    """The authenticated actor: an account owner, or a team member acting on an owner's data."""

    account: User
    member: Optional[TeamMember] = None
    capabilities: dict[str, bool] = field(default_factory=lambda: dict(OWNER_CAPABILITIES))

    @property
    def owner_id(self) -> int:
        return self.account.id

    @property
    def member_id(self) -> Optional[int]:
        return self.member.id if self.member is not None else None

    @property
    def role(self) -> str:
        return self.member.role if self.member is not None else "Owner"

    @property
    def assigned_only(self) -> Optional[int]:
        """Team member id to restrict invoice access to, or None for full access."""
        if self.member is not None and self.capabilities.get("can_view_only_assigned_invoices"):
            return self.member.id
        return None

    def can(self, capability: str) -> bool:
        return bool(self.capabilities.get(capability))

    def require(self, capability: str) -> None:
        if not self.can(capability):
            raise PermissionDeniedError(f"Missing permission: {capability}")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token(request: Request, authorization: str | None) -> str | None:
    # Expect Authorization: Bearer <token>, falling back to the session cookie
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1]
    return request.cookies.get(get_settings().session_cookie_name)


def get_current_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
) -> Principal:
    token = _extract_token(request, authorization)
    if not token:
        raise _unauthorized()
    try:
        payload = decode_access_token(token)
        kind, subject_id = parse_subject(payload.get("sub"))
    except ValueError:
        raise _unauthorized()

    if kind == USER_SUBJECT:
        user = db.query(User).filter(User.id == subject_id).first()
        if user is None:
            raise _unauthorized()
        return Principal(account=user)

    if kind == MEMBER_SUBJECT:
        member = db.query(TeamMember).filter(TeamMember.id == subject_id).first()
        if member is None or not member.is_active:
            raise _unauthorized()
        capabilities = {flag: bool(getattr(member, flag)) for flag in CAPABILITY_FLAGS}
        return Principal(account=member.admin, member=member, capabilities=capabilities)

    raise _unauthorized()


def get_current_user(principal: Principal = Depends(get_current_principal)) -> User:
    """Account-level actions (profile, password, deletion) are for the owner only."""
    if principal.member is not None:
        raise PermissionDeniedError("Account settings are only available to the account owner")
    return principal.account


def require_capability(capability: str) -> Callable[..., Principal]:
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        principal.require(capability)
        return principal

    return dependency


def describe_principal(principal: Principal) -> PrincipalRead:
    return PrincipalRead(
        account=UserRead.model_validate(principal.account),
        team_member_id=principal.member_id,
        role=principal.role,
        capabilities=Capabilities(**principal.capabilities),
    )
