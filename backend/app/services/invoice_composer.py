"""Invoice composition: snapshot catalog entries into priced lines and finalize invoices.

A composer is one in-progress cart. Lines copy the catalog name and price at
the moment they are added; later catalog edits never reach them. ``finalize``
validates the cart and writes the invoice in a single store call.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import DuplicateInvoiceNumberError, NotFoundError, ValidationError
from backend.app.crud.crud_company_profile import company_profile_crud
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.crud.crud_package import package_crud
from backend.app.crud.crud_payment_method import payment_method_crud
from backend.app.crud.crud_service import service_crud
from backend.app.models.enums import InvoiceStatus, LineItemType
from backend.app.models.invoice import Invoice
from backend.app.schemas.invoice import InvoiceCreate, InvoiceTotals
from backend.app.schemas.invoice_item import LineItem, LineItemInput
from backend.app.schemas.package import PackageServiceEntry
from backend.app.services.billing import (
    PriceModifiers,
    calculate_line_total,
    compute_modifier_totals,
    round_money,
    to_decimal,
)

logger = logging.getLogger(__name__)

EDITABLE_LINE_FIELDS = ("quantity", "time_period")


def generate_invoice_number() -> str:
    """``INV-`` plus the last six digits of the millisecond clock."""
    return f"INV-{str(time.time_ns() // 1_000_000)[-6:]}"


@dataclass
class ClientInfo:
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    custom_fields: List[dict] = field(default_factory=list)


@dataclass
class InvoiceDetails:
    platform: Optional[str] = None
    company_profile_id: Optional[int] = None
    payment_method_id: Optional[int] = None
    payment_received_by: Optional[str] = None
    template_id: Optional[int] = None
    notes: Optional[str] = None
    terms: Optional[str] = None


def _positive_int(value, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field_name} must be a whole number of at least 1")
    return value


def _line_id(line_type: str) -> str:
    return f"{line_type}_{uuid.uuid4().hex[:12]}"


class InvoiceComposer:
    def __init__(self, lines: Iterable[LineItem] | None = None, number_factory=None):
        self._lines: List[LineItem] = list(lines or [])
        self._number_factory = number_factory or generate_invoice_number

    @property
    def lines(self) -> List[LineItem]:
        return list(self._lines)

    def _append(
        self,
        *,
        line_type: str,
        name: str,
        unit_price,
        quantity: int,
        time_period: int,
        package_services: Iterable = (),
        line_id: Optional[str] = None,
    ) -> LineItem:
        if not name or not name.strip():
            raise ValidationError("Line item name is required")
        price = to_decimal(unit_price, "unit_price")
        if price <= 0:
            raise ValidationError("Unit price must be greater than zero")
        quantity = _positive_int(quantity, "quantity")
        time_period = _positive_int(time_period, "time_period")
        line = LineItem(
            id=line_id or _line_id(line_type),
            type=line_type,
            name=name,
            unit_price=price,
            quantity=quantity,
            time_period=time_period,
            total=calculate_line_total(price, quantity, time_period),
            package_services=[PackageServiceEntry.model_validate(entry) for entry in package_services],
        )
        self._lines.append(line)
        return line

    def add_service_line(self, service, quantity: int = 1, time_period: int = 1) -> LineItem:
        return self._append(
            line_type=LineItemType.SERVICE.value,
            name=service.name,
            unit_price=service.unit_price,
            quantity=quantity,
            time_period=time_period,
        )

    def add_package_line(self, package, quantity: int = 1, time_period: int = 1) -> LineItem:
        # Bundle descriptions are display-only; the package price alone is billed
        return self._append(
            line_type=LineItemType.PACKAGE.value,
            name=package.name,
            unit_price=package.price,
            quantity=quantity,
            time_period=time_period,
            package_services=list(package.services or []),
        )

    def add_snapshot_line(self, item: LineItemInput) -> LineItem:
        """Re-add a line that was snapshotted earlier (e.g. by a client cart)."""
        if item.name is None or item.unit_price is None:
            raise ValidationError("Line items need a catalog_id or a name and unit_price")
        return self._append(
            line_type=item.type,
            name=item.name,
            unit_price=item.unit_price,
            quantity=item.quantity,
            time_period=item.time_period,
            package_services=item.package_services,
            line_id=item.id,
        )

    def _index(self, line_id: str) -> int:
        for index, line in enumerate(self._lines):
            if line.id == line_id:
                return index
        raise NotFoundError(f"Line item {line_id} not found")

    def update_line(self, line_id: str, field_name: str, value: int) -> LineItem:
        if field_name not in EDITABLE_LINE_FIELDS:
            raise ValidationError(f"Cannot update line field: {field_name}")
        value = _positive_int(value, field_name)
        index = self._index(line_id)
        updated = self._lines[index].model_copy(update={field_name: value})
        updated.total = calculate_line_total(updated.unit_price, updated.quantity, updated.time_period)
        self._lines[index] = updated
        return updated

    def remove_line(self, line_id: str) -> None:
        del self._lines[self._index(line_id)]

    def totals(self, modifiers: PriceModifiers) -> InvoiceTotals:
        return compute_modifier_totals((line.total for line in self._lines), modifiers)

    def build(
        self,
        *,
        owner_id: int,
        client: ClientInfo,
        modifiers: PriceModifiers,
        details: InvoiceDetails,
        created_by: Optional[int] = None,
        invoice_number: Optional[str] = None,
        status: str = InvoiceStatus.DRAFT.value,
    ) -> Invoice:
        """Validate the cart and return an unsaved Invoice row."""
        if not client.name or not client.name.strip():
            raise ValidationError("Client name is required")
        if not self._lines:
            raise ValidationError("Add at least one item to the invoice")
        totals = self.totals(modifiers)
        return Invoice(
            owner_id=owner_id,
            created_by=created_by,
            invoice_number=(invoice_number or "").strip() or self._number_factory(),
            client_name=client.name.strip(),
            client_phone=client.phone,
            client_address=client.address,
            client_email=client.email,
            client_custom_fields=list(client.custom_fields),
            items=[line.model_dump(mode="json") for line in self._lines],
            tax_percentage=round_money(to_decimal(modifiers.tax_percentage, "tax_percentage")),
            discount_type=modifiers.discount_type,
            discount_value=round_money(to_decimal(modifiers.discount_value, "discount_value")),
            platform=details.platform,
            company_profile_id=details.company_profile_id,
            payment_method_id=details.payment_method_id,
            payment_received_by=details.payment_received_by,
            template_id=details.template_id,
            notes=details.notes,
            terms=details.terms,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            discount_amount=totals.discount_amount,
            total=totals.total,
            status=status,
        )

    def finalize(
        self,
        db: Session,
        *,
        owner_id: int,
        client: ClientInfo,
        modifiers: PriceModifiers,
        details: InvoiceDetails,
        created_by: Optional[int] = None,
        invoice_number: Optional[str] = None,
        status: str = InvoiceStatus.DRAFT.value,
    ) -> Invoice:
        """Persist the cart as an invoice, all or nothing.

        Raises ValidationError before any write, and DuplicateInvoiceNumberError
        when the store rejects the number; callers decide whether to retry.
        """
        invoice = self.build(
            owner_id=owner_id,
            client=client,
            modifiers=modifiers,
            details=details,
            created_by=created_by,
            invoice_number=invoice_number,
            status=status,
        )
        try:
            invoice = invoice_crud.create(db, invoice=invoice)
        except DuplicateInvoiceNumberError:
            logger.warning("Invoice number %s already taken", invoice.invoice_number)
            raise
        logger.info("Finalized invoice %s for owner %s (total %s)", invoice.invoice_number, owner_id, invoice.total)
        return invoice


def _check_reference(db: Session, crud, obj_id: Optional[int], owner_id: int) -> None:
    if obj_id is not None:
        crud.get_or_404(db, obj_id=obj_id, owner_id=owner_id)


def composer_from_payload(db: Session, payload: InvoiceCreate, owner_id: int, number_factory=None) -> InvoiceComposer:
    """Rebuild a cart from a request body, re-snapshotting catalog references."""
    composer = InvoiceComposer(number_factory=number_factory)
    for item in payload.items:
        if item.catalog_id is None:
            composer.add_snapshot_line(item)
        elif item.type == LineItemType.PACKAGE.value:
            package = package_crud.get_or_404(db, obj_id=item.catalog_id, owner_id=owner_id)
            composer.add_package_line(package, item.quantity, item.time_period)
        else:
            service = service_crud.get_or_404(db, obj_id=item.catalog_id, owner_id=owner_id)
            composer.add_service_line(service, item.quantity, item.time_period)
    return composer


def payload_parts(db: Session, payload: InvoiceCreate, owner_id: int) -> tuple[ClientInfo, PriceModifiers, InvoiceDetails]:
    """Split a request body into composer inputs, checking optional references exist."""
    _check_reference(db, company_profile_crud, payload.company_profile_id, owner_id)
    _check_reference(db, payment_method_crud, payload.payment_method_id, owner_id)
    _check_reference(db, invoice_template_crud, payload.template_id, owner_id)
    client = ClientInfo(
        name=payload.client_name,
        phone=payload.client_phone,
        address=payload.client_address,
        email=payload.client_email,
        custom_fields=[field.model_dump() for field in payload.client_custom_fields],
    )
    modifiers = PriceModifiers(
        tax_percentage=payload.tax_percentage,
        discount_type=payload.discount_type,
        discount_value=payload.discount_value,
    )
    details = InvoiceDetails(
        platform=payload.platform,
        company_profile_id=payload.company_profile_id,
        payment_method_id=payload.payment_method_id,
        payment_received_by=payload.payment_received_by,
        template_id=payload.template_id,
        notes=payload.notes,
        terms=payload.terms,
    )
    return client, modifiers, details


def overwrite_invoice(db: Session, invoice: Invoice, payload: InvoiceCreate) -> Invoice:
    """Full-overwrite update: recompose every line and total from the payload."""
    composer = composer_from_payload(db, payload, invoice.owner_id)
    client, modifiers, details = payload_parts(db, payload, invoice.owner_id)
    replacement = composer.build(
        owner_id=invoice.owner_id,
        client=client,
        modifiers=modifiers,
        details=details,
        created_by=invoice.created_by,
        invoice_number=payload.invoice_number or invoice.invoice_number,
        status=payload.status,
    )
    for column in Invoice.__table__.columns.keys():
        if column in ("id", "owner_id", "created_by", "created_at", "updated_at"):
            continue
        setattr(invoice, column, getattr(replacement, column))
    invoice = invoice_crud.save(db, invoice=invoice)
    logger.info("Updated invoice %s", invoice.invoice_number)
    return invoice
