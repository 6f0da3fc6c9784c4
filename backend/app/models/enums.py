"""String enums shared by models, schemas and services."""

from enum import Enum


class TemplateFamily(str, Enum):
    PROFESSIONAL = "professional"
    MINIMALIST = "minimalist"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class DiscountType(str, Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


class LineItemType(str, Enum):
    SERVICE = "service"
    PACKAGE = "package"


class PaymentMethodType(str, Enum):
    BANK = "bank"
    CARD = "card"
    CRYPTO = "crypto"
    CUSTOM = "custom"
