"""Payment method schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import PaymentMethodType


class PaymentMethodBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: PaymentMethodType = PaymentMethodType.BANK
    name: str = Field(min_length=1, max_length=255)
    fields: Dict[str, str] = Field(default_factory=dict)


class PaymentMethodCreate(PaymentMethodBase):
    pass


class PaymentMethodUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: Optional[PaymentMethodType] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    fields: Optional[Dict[str, str]] = None


class PaymentMethodRead(PaymentMethodBase):
    id: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class PaymentMethodPreset(BaseModel):
    type: PaymentMethodType
    fields: List[str]
