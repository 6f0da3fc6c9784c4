from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="owner", cascade="all, delete-orphan")
    packages = relationship("Package", back_populates="owner", cascade="all, delete-orphan")
    company_profiles = relationship("CompanyProfile", back_populates="owner", cascade="all, delete-orphan")
    payment_methods = relationship("PaymentMethod", back_populates="owner", cascade="all, delete-orphan")
    invoice_templates = relationship("InvoiceTemplate", back_populates="owner", cascade="all, delete-orphan")
    invoices = relationship("Invoice", back_populates="owner", cascade="all, delete-orphan")
    team_members = relationship("TeamMember", back_populates="admin", cascade="all, delete-orphan")
