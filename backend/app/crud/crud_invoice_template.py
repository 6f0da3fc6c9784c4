"""CRUD operations for invoice templates."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from backend.app.crud.base import CRUDBase, commit_or_raise
from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.schemas.invoice_template import InvoiceTemplateCreate, InvoiceTemplateUpdate

logger = logging.getLogger(__name__)


class CRUDInvoiceTemplate(CRUDBase[InvoiceTemplate, InvoiceTemplateCreate, InvoiceTemplateUpdate]):
    not_found_detail = "Template not found"

    def _clear_defaults(self, db: Session, *, owner_id: int) -> None:
        (
            db.query(InvoiceTemplate)
            .filter(InvoiceTemplate.owner_id == owner_id, InvoiceTemplate.is_default.is_(True))
            .update({InvoiceTemplate.is_default: False}, synchronize_session="fetch")
        )

    def create(self, db: Session, *, obj_in: InvoiceTemplateCreate, owner_id: int) -> InvoiceTemplate:
        if obj_in.is_default:
            self._clear_defaults(db, owner_id=owner_id)
        obj = InvoiceTemplate(owner_id=owner_id, **obj_in.model_dump())
        db.add(obj)
        commit_or_raise(db)
        db.refresh(obj)
        return obj

    def update(self, db: Session, *, db_obj: InvoiceTemplate, obj_in: InvoiceTemplateUpdate) -> InvoiceTemplate:
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("is_default"):
            self._clear_defaults(db, owner_id=db_obj.owner_id)
        elif update_data.get("is_default") is None:
            update_data.pop("is_default", None)
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def set_default(self, db: Session, *, template_id: int, owner_id: int) -> InvoiceTemplate:
        """Make one template the owner's default in a single transaction."""
        template = self.get_or_404(db, obj_id=template_id, owner_id=owner_id)
        self._clear_defaults(db, owner_id=owner_id)
        db.flush()
        template.is_default = True
        commit_or_raise(db)
        db.refresh(template)
        logger.info("Owner %s default template set to %s", owner_id, template.id)
        return template

    def get_default(self, db: Session, *, owner_id: int) -> Optional[InvoiceTemplate]:
        """Return the flagged default, falling back to the oldest template."""
        template = (
            db.query(InvoiceTemplate)
            .filter(InvoiceTemplate.owner_id == owner_id, InvoiceTemplate.is_default.is_(True))
            .first()
        )
        if template is not None:
            return template
        return (
            db.query(InvoiceTemplate)
            .filter(InvoiceTemplate.owner_id == owner_id)
            .order_by(InvoiceTemplate.created_at.asc(), InvoiceTemplate.id.asc())
            .first()
        )


invoice_template_crud = CRUDInvoiceTemplate(InvoiceTemplate)
