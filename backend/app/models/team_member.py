"""Team member model: a scoped credential acting on an admin account's data."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base

CAPABILITY_FLAGS = (
    "can_create_invoices",
    "can_delete_invoices",
    "can_manage_services",
    "can_manage_company_profiles",
    "can_manage_payment_methods",
    "can_manage_templates",
    "can_view_only_assigned_invoices",
    "can_manage_team_members",
)


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(String(100), nullable=False, default="Member")

    can_create_invoices = Column(Boolean, nullable=False, default=False)
    can_delete_invoices = Column(Boolean, nullable=False, default=False)
    can_manage_services = Column(Boolean, nullable=False, default=False)
    can_manage_company_profiles = Column(Boolean, nullable=False, default=False)
    can_manage_payment_methods = Column(Boolean, nullable=False, default=False)
    can_manage_templates = Column(Boolean, nullable=False, default=False)
    can_view_only_assigned_invoices = Column(Boolean, nullable=False, default=False)
    can_manage_team_members = Column(Boolean, nullable=False, default=False)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    admin = relationship("User", back_populates="team_members")
    invoices = relationship("Invoice", back_populates="creator")
