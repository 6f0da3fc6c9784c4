"""Invoice store: persistence and owner/assignee scoped listing."""

from datetime import datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.app.core.errors import DuplicateInvoiceNumberError, NotFoundError
from backend.app.crud.base import commit_or_raise
from backend.app.models.invoice import Invoice
from backend.app.schemas.invoice import InvoiceListFilter


class CRUDInvoice:
    def _scoped(self, db: Session, *, owner_id: int, assigned_to: int | None):
        query = db.query(Invoice).filter(Invoice.owner_id == owner_id)
        if assigned_to is not None:
            query = query.filter(Invoice.created_by == assigned_to)
        return query

    def create(self, db: Session, *, invoice: Invoice) -> Invoice:
        db.add(invoice)
        commit_or_raise(db, DuplicateInvoiceNumberError, f"Invoice number {invoice.invoice_number} already exists")
        db.refresh(invoice)
        return invoice

    def save(self, db: Session, *, invoice: Invoice) -> Invoice:
        commit_or_raise(db, DuplicateInvoiceNumberError, f"Invoice number {invoice.invoice_number} already exists")
        db.refresh(invoice)
        return invoice

    def get(self, db: Session, *, invoice_id: int, owner_id: int, assigned_to: int | None = None) -> Optional[Invoice]:
        return self._scoped(db, owner_id=owner_id, assigned_to=assigned_to).filter(Invoice.id == invoice_id).first()

    def get_or_404(self, db: Session, *, invoice_id: int, owner_id: int, assigned_to: int | None = None) -> Invoice:
        invoice = self.get(db, invoice_id=invoice_id, owner_id=owner_id, assigned_to=assigned_to)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def get_multi(
        self,
        db: Session,
        *,
        owner_id: int,
        filters: InvoiceListFilter | None = None,
        assigned_to: int | None = None,
    ) -> List[Invoice]:
        filters = filters or InvoiceListFilter()
        query = self._scoped(db, owner_id=owner_id, assigned_to=assigned_to)
        if filters.status is not None:
            query = query.filter(Invoice.status == filters.status.value)
        if filters.created_by is not None:
            query = query.filter(Invoice.created_by == filters.created_by)
        if filters.start_date is not None:
            query = query.filter(Invoice.created_at >= datetime.combine(filters.start_date, time.min))
        if filters.end_date is not None:
            # Inclusive of the whole end day
            query = query.filter(Invoice.created_at < datetime.combine(filters.end_date + timedelta(days=1), time.min))
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            query = query.filter(
                or_(
                    Invoice.client_name.ilike(pattern),
                    Invoice.invoice_number.ilike(pattern),
                    Invoice.platform.ilike(pattern),
                )
            )
        return (
            query.order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .offset(filters.skip)
            .limit(filters.limit)
            .all()
        )

    def number_exists(self, db: Session, invoice_number: str) -> bool:
        return db.query(Invoice.id).filter(Invoice.invoice_number == invoice_number).first() is not None

    def delete(self, db: Session, *, invoice_id: int, owner_id: int, assigned_to: int | None = None) -> bool:
        invoice = self.get(db, invoice_id=invoice_id, owner_id=owner_id, assigned_to=assigned_to)
        if invoice is None:
            return False
        db.delete(invoice)
        commit_or_raise(db)
        return True


invoice_crud = CRUDInvoice()
