"""Invoice template model: layout family plus visual and structural options."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.enums import TemplateFamily


class InvoiceTemplate(Base):
    __tablename__ = "invoice_templates"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(500), nullable=True)
    family = Column(String(20), nullable=False, default=TemplateFamily.PROFESSIONAL.value)

    primary_color = Column(String(20), nullable=False, default="#374151")
    text_color = Column(String(20), nullable=False, default="#111827")
    border_color = Column(String(20), nullable=False, default="#d1d5db")
    font_family = Column(String(100), nullable=False, default="Inter")
    logo_visible = Column(Boolean, nullable=False, default=True)

    fields = Column(JSON, nullable=False, default=list)
    custom_fields = Column(JSON, nullable=False, default=list)
    show_notes = Column(Boolean, nullable=False, default=True)
    show_terms = Column(Boolean, nullable=False, default=True)
    show_payment = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # At most one default template per owner
    __table_args__ = (
        Index(
            "uq_invoice_templates_owner_default",
            owner_id,
            unique=True,
            sqlite_where=is_default.is_(True),
            postgresql_where=is_default.is_(True),
        ),
    )

    owner = relationship("User", back_populates="invoice_templates")
    invoices = relationship("Invoice", back_populates="template")
