import logging
import os

from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.models.user import User
from backend.app.services.presets import builtin_templates

logger = logging.getLogger(__name__)

DEFAULT_DEV_PASSWORD = "Secret123!"
DEFAULT_DEV_USERNAME = "owner"
DEFAULT_DEV_EMAIL = "owner@example.com"


def ensure_default_dev_owner(db: Session) -> None:
    """
    Create a default owner with the built-in templates for local development.
    Skips execution outside development and under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST") or os.getenv("ENVIRONMENT", "development") != "development":
        return

    if db.query(User).filter(User.email == DEFAULT_DEV_EMAIL).first():
        return

    user = User(
        username=DEFAULT_DEV_USERNAME,
        email=DEFAULT_DEV_EMAIL,
        hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    for index, template_in in enumerate(builtin_templates()):
        template_in.is_default = index == 0
        invoice_template_crud.create(db, obj_in=template_in, owner_id=user.id)
    logger.info("Seeded development owner %s", DEFAULT_DEV_EMAIL)
