"""Invoice line item schemas."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import LineItemType
from backend.app.schemas.package import PackageServiceEntry


class LineItem(BaseModel):
    """A priced row; ``total`` is always derived from the other fields."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    type: LineItemType
    name: str
    unit_price: Decimal
    quantity: int = 1
    time_period: int = 1
    total: Decimal
    package_services: List[PackageServiceEntry] = Field(default_factory=list)


class LineItemInput(BaseModel):
    """A cart row sent by a client.

    When ``catalog_id`` is set the name and price are taken from the catalog
    entry; otherwise ``name`` and ``unit_price`` are an earlier snapshot. A
    submitted ``total`` is accepted but always recomputed.
    """

    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    type: LineItemType = LineItemType.SERVICE
    catalog_id: Optional[int] = None
    name: Optional[str] = None
    unit_price: Optional[Decimal] = None
    quantity: int = 1
    time_period: int = 1
    total: Optional[Decimal] = None
    package_services: List[PackageServiceEntry] = Field(default_factory=list)
