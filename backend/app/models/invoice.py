"""Invoice model; line items are stored as a snapshot list on the row."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.enums import DiscountType, InvoiceStatus


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True, index=True)
    invoice_number = Column(String(100), nullable=False, unique=True)

    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(50), nullable=True)
    client_address = Column(Text, nullable=True)
    client_email = Column(String(255), nullable=True)
    client_custom_fields = Column(JSON, nullable=False, default=list)

    items = Column(JSON, nullable=False, default=list)
    tax_percentage = Column(Numeric(6, 2), nullable=False, default=0)
    discount_type = Column(String(20), nullable=False, default=DiscountType.FLAT.value)
    discount_value = Column(Numeric(10, 2), nullable=False, default=0)
    platform = Column(String(255), nullable=True)

    company_profile_id = Column(Integer, ForeignKey("company_profiles.id", ondelete="SET NULL"), nullable=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id", ondelete="SET NULL"), nullable=True)
    payment_received_by = Column(String(255), nullable=True)
    template_id = Column(Integer, ForeignKey("invoice_templates.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="invoices")
    creator = relationship("TeamMember", back_populates="invoices")
    template = relationship("InvoiceTemplate", back_populates="invoices")
    company_profile = relationship("CompanyProfile")
    payment_method = relationship("PaymentMethod")
