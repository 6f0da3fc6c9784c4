"""Invoice template endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.schemas.invoice_template import (
    InvoiceTemplateCreate,
    InvoiceTemplateRead,
    InvoiceTemplateUpdate,
)
from backend.app.services.presets import builtin_templates

router = APIRouter(prefix="/templates", tags=["invoice_templates"])


@router.get("/presets", response_model=list[InvoiceTemplateCreate])
def list_template_presets():
    return builtin_templates()


@router.post("", response_model=InvoiceTemplateRead, status_code=status.HTTP_201_CREATED)
def create_invoice_template(
    template_in: InvoiceTemplateCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_templates")),
):
    return invoice_template_crud.create(db, obj_in=template_in, owner_id=principal.owner_id)


@router.get("", response_model=list[InvoiceTemplateRead])
def list_invoice_templates(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return invoice_template_crud.get_multi(db, owner_id=principal.owner_id)


@router.get("/{template_id}", response_model=InvoiceTemplateRead)
def get_invoice_template(
    template_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)
):
    return invoice_template_crud.get_or_404(db, obj_id=template_id, owner_id=principal.owner_id)


@router.put("/{template_id}", response_model=InvoiceTemplateRead)
def update_invoice_template(
    template_id: int,
    template_in: InvoiceTemplateUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_templates")),
):
    template = invoice_template_crud.get_or_404(db, obj_id=template_id, owner_id=principal.owner_id)
    return invoice_template_crud.update(db, db_obj=template, obj_in=template_in)


@router.post("/{template_id}/set-default", response_model=InvoiceTemplateRead)
def set_default_invoice_template(
    template_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_templates")),
):
    return invoice_template_crud.set_default(db, template_id=template_id, owner_id=principal.owner_id)


@router.delete("/{template_id}")
def delete_invoice_template(
    template_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_manage_templates")),
):
    if not invoice_template_crud.delete(db, obj_id=template_id, owner_id=principal.owner_id):
        raise NotFoundError("Template not found")
    return {"success": True}
