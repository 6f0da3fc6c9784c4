"""Company profile schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from backend.app.schemas.common import CustomField


class CompanyProfileBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    address: Optional[str] = None
    logo_url: Optional[str] = None
    tagline: Optional[str] = None
    custom_fields: List[CustomField] = Field(default_factory=list)


class CompanyProfileCreate(CompanyProfileBase):
    pass


class CompanyProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    tagline: Optional[str] = None
    custom_fields: Optional[List[CustomField]] = None


class CompanyProfileRead(CompanyProfileBase):
    id: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
