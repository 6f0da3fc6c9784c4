"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import DiscountType, InvoiceStatus
from backend.app.schemas.common import CustomField
from backend.app.schemas.invoice_item import LineItem, LineItemInput


class InvoiceBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    invoice_number: Optional[str] = Field(default=None, max_length=100)
    client_name: str = ""
    client_phone: Optional[str] = None
    client_address: Optional[str] = None
    client_email: Optional[str] = None
    client_custom_fields: List[CustomField] = Field(default_factory=list)
    tax_percentage: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.FLAT
    discount_value: Decimal = Decimal("0")
    platform: Optional[str] = None
    company_profile_id: Optional[int] = None
    payment_method_id: Optional[int] = None
    payment_received_by: Optional[str] = None
    template_id: Optional[int] = None
    notes: Optional[str] = None
    terms: Optional[str] = None


class InvoiceCreate(InvoiceBase):
    items: List[LineItemInput] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT


class InvoiceUpdate(InvoiceCreate):
    """Full overwrite; a missing ``invoice_number`` keeps the stored one."""


class InvoiceRead(InvoiceBase):
    id: int
    owner_id: int
    created_by: Optional[int] = None
    invoice_number: str
    items: List[LineItem]
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    status: InvoiceStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class InvoiceTotals(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal


class InvoiceListFilter(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None
    created_by: Optional[int] = None
    search: Optional[str] = None
    skip: int = 0
    limit: int = 50
