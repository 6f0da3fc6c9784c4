"""Invoice routes: compose, list, render and export."""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.app.core.errors import DuplicateInvoiceNumberError, NotFoundError
from backend.app.crud.crud_company_profile import company_profile_crud
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.crud.crud_payment_method import payment_method_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import Principal, get_current_principal, require_capability
from backend.app.models.invoice import Invoice
from backend.app.schemas.document import RenderedDocument
from backend.app.schemas.invoice import InvoiceCreate, InvoiceListFilter, InvoiceRead, InvoiceUpdate
from backend.app.services.invoice_composer import composer_from_payload, overwrite_invoice, payload_parts
from backend.app.services.invoice_export import export_invoice_pdf
from backend.app.services.invoice_renderer import render_invoice
from backend.app.services.presets import builtin_templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])

MAX_NUMBER_ATTEMPTS = 3


def _render(db: Session, invoice: Invoice, owner_id: int) -> RenderedDocument:
    """Resolve the template and references, then render.

    Template: the invoice's own, else the owner's default, else the first
    built-in. Deleted profile or payment method references render as missing.
    """
    template = None
    if invoice.template_id is not None:
        template = invoice_template_crud.get(db, obj_id=invoice.template_id, owner_id=owner_id)
    template = template or invoice_template_crud.get_default(db, owner_id=owner_id) or builtin_templates()[0]
    company_profile = None
    if invoice.company_profile_id is not None:
        company_profile = company_profile_crud.get(db, obj_id=invoice.company_profile_id, owner_id=owner_id)
    payment_method = None
    if invoice.payment_method_id is not None:
        payment_method = payment_method_crud.get(db, obj_id=invoice.payment_method_id, owner_id=owner_id)
    return render_invoice(invoice, template, company_profile, payment_method)


@router.get("", response_model=List[InvoiceRead])
def list_invoices(
    filters: InvoiceListFilter = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return invoice_crud.get_multi(db, owner_id=principal.owner_id, filters=filters, assigned_to=principal.assigned_only)


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_create_invoices")),
):
    composer = composer_from_payload(db, payload, principal.owner_id)
    client, modifiers, details = payload_parts(db, payload, principal.owner_id)
    # A caller-chosen number is never replaced; generated numbers get a few tries
    attempts = 1 if payload.invoice_number else MAX_NUMBER_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            return composer.finalize(
                db,
                owner_id=principal.owner_id,
                client=client,
                modifiers=modifiers,
                details=details,
                created_by=principal.member_id,
                invoice_number=payload.invoice_number,
                status=payload.status,
            )
        except DuplicateInvoiceNumberError:
            if attempt == attempts:
                raise
            logger.info("Generated invoice number collided, retrying (%d/%d)", attempt, attempts)


@router.post("/preview", response_model=RenderedDocument)
def preview_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    composer = composer_from_payload(db, payload, principal.owner_id, number_factory=lambda: "")
    client, modifiers, details = payload_parts(db, payload, principal.owner_id)
    invoice = composer.build(
        owner_id=principal.owner_id,
        client=client,
        modifiers=modifiers,
        details=details,
        created_by=principal.member_id,
        invoice_number=payload.invoice_number,
        status=payload.status,
    )
    invoice.created_at = datetime.now(timezone.utc)
    return _render(db, invoice, principal.owner_id)


@router.get("/{invoice_id}", response_model=InvoiceRead)
def get_invoice(invoice_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return invoice_crud.get_or_404(
        db, invoice_id=invoice_id, owner_id=principal.owner_id, assigned_to=principal.assigned_only
    )


@router.put("/{invoice_id}", response_model=InvoiceRead)
def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_create_invoices")),
):
    invoice = invoice_crud.get_or_404(
        db, invoice_id=invoice_id, owner_id=principal.owner_id, assigned_to=principal.assigned_only
    )
    return overwrite_invoice(db, invoice, payload)


@router.delete("/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_capability("can_delete_invoices")),
):
    deleted = invoice_crud.delete(
        db, invoice_id=invoice_id, owner_id=principal.owner_id, assigned_to=principal.assigned_only
    )
    if not deleted:
        raise NotFoundError("Invoice not found")
    return {"success": True}


@router.get("/{invoice_id}/document", response_model=RenderedDocument)
def get_invoice_document(
    invoice_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)
):
    invoice = invoice_crud.get_or_404(
        db, invoice_id=invoice_id, owner_id=principal.owner_id, assigned_to=principal.assigned_only
    )
    return _render(db, invoice, principal.owner_id)


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(
    invoice_id: int, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)
):
    invoice = invoice_crud.get_or_404(
        db, invoice_id=invoice_id, owner_id=principal.owner_id, assigned_to=principal.assigned_only
    )
    exported = export_invoice_pdf(_render(db, invoice, principal.owner_id))
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
