"""Invoice template schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import TemplateFamily
from backend.app.schemas.common import CustomField


class TemplateField(BaseModel):
    id: str
    name: str
    label: str
    visible: bool = True
    custom_label: Optional[str] = None


class InvoiceTemplateBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    family: TemplateFamily = TemplateFamily.PROFESSIONAL
    primary_color: str = "#374151"
    text_color: str = "#111827"
    border_color: str = "#d1d5db"
    font_family: str = "Inter"
    logo_visible: bool = True
    fields: List[TemplateField] = Field(default_factory=list)
    show_notes: bool = True
    show_terms: bool = True
    show_payment: bool = True
    notes: Optional[str] = None
    terms: Optional[str] = None
    custom_fields: List[CustomField] = Field(default_factory=list)


class InvoiceTemplateCreate(InvoiceTemplateBase):
    is_default: bool = False


class InvoiceTemplateUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    family: Optional[TemplateFamily] = None
    primary_color: Optional[str] = None
    text_color: Optional[str] = None
    border_color: Optional[str] = None
    font_family: Optional[str] = None
    logo_visible: Optional[bool] = None
    fields: Optional[List[TemplateField]] = None
    show_notes: Optional[bool] = None
    show_terms: Optional[bool] = None
    show_payment: Optional[bool] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    custom_fields: Optional[List[CustomField]] = None
    is_default: Optional[bool] = None


class InvoiceTemplateRead(InvoiceTemplateBase):
    id: int
    owner_id: int
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
