"""Security utilities: password hashing and JWT session tokens.

Tokens carry a ``sub`` claim of the form ``user:<id>`` or ``member:<id>`` so a
single token format covers account owners and team members.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from backend.app.core.settings import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

USER_SUBJECT = "user"
MEMBER_SUBJECT = "member"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    expire = datetime.now(timezone.utc) + expire_delta
    payload = {"sub": subject, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def parse_subject(subject: str | None) -> tuple[str, int]:
    """Split a ``kind:id`` subject claim; raise ValueError when malformed."""
    if not subject or ":" not in subject:
        raise ValueError("Invalid subject")
    kind, _, raw_id = subject.partition(":")
    if kind not in (USER_SUBJECT, MEMBER_SUBJECT):
        raise ValueError("Invalid subject")
    return kind, int(raw_id)
