"""Team member schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Capabilities(BaseModel):
    can_create_invoices: bool = False
    can_delete_invoices: bool = False
    can_manage_services: bool = False
    can_manage_company_profiles: bool = False
    can_manage_payment_methods: bool = False
    can_manage_templates: bool = False
    can_view_only_assigned_invoices: bool = False
    can_manage_team_members: bool = False


class TeamMemberCreate(Capabilities):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = None
    role: str = "Member"


class TeamMemberUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    full_name: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    can_create_invoices: Optional[bool] = None
    can_delete_invoices: Optional[bool] = None
    can_manage_services: Optional[bool] = None
    can_manage_company_profiles: Optional[bool] = None
    can_manage_payment_methods: Optional[bool] = None
    can_manage_templates: Optional[bool] = None
    can_view_only_assigned_invoices: Optional[bool] = None
    can_manage_team_members: Optional[bool] = None


class TeamMemberRead(Capabilities):
    id: int
    admin_id: int
    email: EmailStr
    full_name: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
