"""Runtime database configuration endpoints."""

import logging

from fastapi import APIRouter, Depends

from backend.app.core.errors import PermissionDeniedError
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import DatabaseConfig, database
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.config import DatabaseConfigRequest, DatabaseConfigResponse, DatabaseStatusRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/config", tags=["config"])


def require_database_admin(current_user: User = Depends(get_current_user)) -> User:
    settings = get_settings()
    if not settings.database_config_enabled:
        raise PermissionDeniedError("Database configuration is disabled")
    if settings.database_admin_emails and current_user.email.lower() not in settings.database_admin_emails:
        logger.warning("User %s tried to reconfigure the database", current_user.id)
        raise PermissionDeniedError("Database configuration is restricted to administrators")
    return current_user


@router.post("/database", response_model=DatabaseConfigResponse)
def configure_database(request: DatabaseConfigRequest, current_user: User = Depends(require_database_admin)):
    status = database.reconfigure(DatabaseConfig(url=request.connection_string.strip()))
    Base.metadata.create_all(bind=database.engine)
    return DatabaseConfigResponse(
        success=True,
        message="Database connected successfully",
        connected=status.connected,
        has_url=status.has_url,
        provider=status.provider,
    )


@router.get("/database/status", response_model=DatabaseStatusRead)
def database_status():
    status = database.status()
    return DatabaseStatusRead(connected=status.connected, has_url=status.has_url, provider=status.provider)
