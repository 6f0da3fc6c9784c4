"""Starting configurations offered to new accounts."""

from typing import Dict, List

from backend.app.models.enums import PaymentMethodType, TemplateFamily
from backend.app.schemas.invoice_template import InvoiceTemplateCreate, TemplateField
from backend.app.schemas.payment_method import PaymentMethodPreset

PAYMENT_METHOD_PRESET_FIELDS: Dict[str, List[str]] = {
    PaymentMethodType.BANK.value: ["Bank Name", "Account Name", "Account Number", "Routing Number"],
    PaymentMethodType.CARD.value: ["Cardholder Name", "Card Number", "Expiry Date"],
    PaymentMethodType.CRYPTO.value: ["Wallet Type", "Wallet Address"],
    PaymentMethodType.CUSTOM.value: [],
}


def payment_method_presets() -> List[PaymentMethodPreset]:
    return [PaymentMethodPreset(type=kind, fields=list(fields)) for kind, fields in PAYMENT_METHOD_PRESET_FIELDS.items()]


def _fields(*columns: tuple[str, str]) -> List[TemplateField]:
    return [TemplateField(id=str(index), name=name, label=label) for index, (name, label) in enumerate(columns, start=1)]


def builtin_templates() -> List[InvoiceTemplateCreate]:
    """Fresh copies each call so callers may mutate them."""
    return [
        InvoiceTemplateCreate(
            name="Professional Grey",
            description="Clean grey layout with a flat header banner",
            family=TemplateFamily.PROFESSIONAL,
            primary_color="#374151",
            text_color="#111827",
            border_color="#d1d5db",
            font_family="Inter",
            fields=_fields(
                ("itemDescription", "Item Description"),
                ("price", "Price"),
                ("quantity", "Quantity"),
                ("total", "Total"),
            ),
            show_notes=True,
            show_terms=True,
            show_payment=True,
        ),
        InvoiceTemplateCreate(
            name="Minimalist Red",
            description="Geometric header with angular accents",
            family=TemplateFamily.MINIMALIST,
            primary_color="#991b1b",
            text_color="#111827",
            border_color="#991b1b",
            font_family="Inter",
            fields=_fields(
                ("description", "Description"),
                ("unitPrice", "Unit Price"),
                ("qty", "QTY"),
                ("total", "Total"),
            ),
            show_notes=True,
            show_terms=False,
            show_payment=True,
        ),
    ]
