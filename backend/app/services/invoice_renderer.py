"""Render invoices into a layout-family document tree.

The tree is the single source for both the JSON preview and the PDF export.
Rendering is a pure function of its inputs: it never reads the clock, the
database or any cache, and missing optional references fall back to
placeholders instead of failing.
"""

import re
from typing import Callable, Dict, Iterable, List, Optional

from backend.app.models.enums import DiscountType, LineItemType, TemplateFamily
from backend.app.schemas.common import CustomField
from backend.app.schemas.document import DocumentNode, RenderedDocument
from backend.app.schemas.invoice_item import LineItem
from backend.app.schemas.invoice_template import TemplateField
from backend.app.services.billing import round_money, to_decimal

NO_COMPANY_PLACEHOLDER = "No Company Profile Selected"
DEFAULT_PAYMENT_RECIPIENT = "Company Account"
EMPTY_CELL = "-"
UNSET_NUMBER = "Not specified"

DESCRIPTION_FIELDS = {"itemdescription", "description", "item", "name", "service"}
PRICE_FIELDS = {"price", "unitprice", "rate"}
QUANTITY_FIELDS = {"quantity", "qty"}
TOTAL_FIELDS = {"total", "amount", "linetotal"}


def format_money(value) -> str:
    amount = round_money(to_decimal(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):.2f}"


def format_percentage(value) -> str:
    return f"{int(to_decimal(value))}%"


def invoice_filename(invoice_number: Optional[str], client_name: Optional[str]) -> str:
    slug = re.sub(r"\s+", "-", (client_name or "").strip())
    return f"invoice-{invoice_number or 'draft'}-{slug}.pdf"


def _node(kind: str, text: Optional[str] = None, children: Iterable[DocumentNode] = (), **style) -> DocumentNode:
    return DocumentNode(
        kind=kind,
        text=text,
        style={key: str(value) for key, value in style.items() if value is not None},
        children=list(children),
    )


def _text(text: str, **style) -> DocumentNode:
    return _node("text", text, **style)


def _as_fields(raw: Iterable) -> List[TemplateField]:
    return [TemplateField.model_validate(item) for item in raw or []]


def _as_custom_fields(raw: Iterable) -> List[CustomField]:
    return [CustomField.model_validate(item) for item in raw or []]


def visible_columns(template) -> List[TemplateField]:
    return [field for field in _as_fields(template.fields) if field.visible]


def resolve_custom_value(field: CustomField, client_fields: List[CustomField]) -> str:
    """Client value for the same name, else the template's static value, else ``-``."""
    match = next((client_field for client_field in client_fields if client_field.name == field.name), None)
    return (match.value if match else "") or field.value or EMPTY_CELL


def _standard_cell(field: TemplateField, line: LineItem) -> Optional[str]:
    key = re.sub(r"[^a-z]", "", field.name.lower())
    if key in DESCRIPTION_FIELDS:
        return None
    if key in PRICE_FIELDS:
        return format_money(line.unit_price)
    if key in QUANTITY_FIELDS:
        return str(line.quantity)
    if key in TOTAL_FIELDS:
        return format_money(line.total)
    return EMPTY_CELL


def _description_cell(line: LineItem, style: "LayoutStyle") -> DocumentNode:
    children = [_text(line.name, bold="true", color=style.text_color)]
    if line.type == LineItemType.PACKAGE.value and line.package_services:
        entries = [
            _node("list_item", f"{entry.name} ({entry.quantity})" if entry.quantity else entry.name)
            for entry in line.package_services
        ]
        children.append(_node("list", children=entries, font_size=8, color="#4b5563"))
    if line.time_period and line.time_period > 1:
        children.append(_text(f"Duration: {line.time_period} months", font_size=8, color="#4b5563"))
    return _node("cell", children=children, weight=2)


class LayoutStyle:
    def __init__(self, template):
        self.primary_color = template.primary_color
        self.text_color = template.text_color
        self.border_color = template.border_color
        self.font_family = template.font_family


def build_items_table(invoice, template, style: LayoutStyle, header_background: str, header_color: str) -> DocumentNode:
    columns = visible_columns(template)
    custom_columns = _as_custom_fields(template.custom_fields)
    client_fields = _as_custom_fields(invoice.client_custom_fields)

    header_cells = [
        _node("cell", field.custom_label or field.label, weight=2 if _is_description(field) else 1, bold="true")
        for field in columns
    ]
    header_cells.extend(_node("cell", field.name.upper(), weight=1, bold="true") for field in custom_columns)
    rows = [_node("table_row", children=header_cells, background=header_background, color=header_color, header="true")]

    for raw in invoice.items or []:
        line = LineItem.model_validate(raw)
        cells = []
        for field in columns:
            value = _standard_cell(field, line)
            cells.append(_description_cell(line, style) if value is None else _node("cell", value, weight=1))
        for field in custom_columns:
            cells.append(_node("cell", resolve_custom_value(field, client_fields), weight=1))
        rows.append(_node("table_row", children=cells, border_color=style.border_color))

    return _node("table", children=rows, border_color=style.border_color)


def _is_description(field: TemplateField) -> bool:
    return re.sub(r"[^a-z]", "", field.name.lower()) in DESCRIPTION_FIELDS


def build_totals(invoice, style: LayoutStyle) -> DocumentNode:
    rows = [_total_row("Subtotal:", format_money(invoice.subtotal))]
    if to_decimal(invoice.tax_percentage) > 0:
        rows.append(_total_row(f"Tax ({format_percentage(invoice.tax_percentage)}):", format_money(invoice.tax_amount)))
    if to_decimal(invoice.discount_value) > 0:
        if invoice.discount_type == DiscountType.PERCENTAGE.value:
            label = format_percentage(invoice.discount_value)
        else:
            label = format_money(invoice.discount_value)
        rows.append(_total_row(f"Discount ({label}):", f"-{format_money(invoice.discount_amount)}"))
    rows.append(_node("rule", color=style.primary_color, thickness=1))
    rows.append(_total_row("Total:", format_money(invoice.total), bold="true", color=style.primary_color, font_size=12))
    return _node("block", children=rows, align="right", width="0.45")


def _total_row(label: str, value: str, **style) -> DocumentNode:
    return _node("columns", children=[_text(label, **style), _text(value, align="right", **style)])


def build_bill_to(invoice, style: LayoutStyle) -> DocumentNode:
    lines = [_text("BILL TO", bold="true", color=style.primary_color, font_size=9)]
    lines.append(_text(invoice.client_name or EMPTY_CELL, bold="true", font_size=11))
    for value in (invoice.client_phone, invoice.client_email, invoice.client_address):
        if value:
            lines.append(_text(value))
    return _node("block", children=lines)


def build_company(company_profile, template, style: LayoutStyle) -> DocumentNode:
    if company_profile is None:
        return _node("block", children=[_text(NO_COMPANY_PLACEHOLDER, color="#6b7280", italic="true")], align="right")
    lines = []
    if template.logo_visible and company_profile.logo_url:
        lines.append(_node("image", company_profile.logo_url, height=14))
    lines.append(_text(company_profile.name, bold="true", font_size=11, color=style.text_color))
    if company_profile.tagline:
        lines.append(_text(company_profile.tagline, italic="true"))
    for value in (company_profile.email, company_profile.address):
        if value:
            lines.append(_text(value))
    for field in _as_custom_fields(company_profile.custom_fields):
        lines.append(_text(f"{field.name}: {field.value or EMPTY_CELL}"))
    return _node("block", children=lines, align="right")


def build_payment(invoice, template, payment_method, style: LayoutStyle) -> Optional[DocumentNode]:
    if not template.show_payment or payment_method is None:
        return None
    lines = [
        _text("PAYMENT INFORMATION", bold="true", color=style.primary_color, font_size=9),
        _text(f"Payment Method: {payment_method.type}"),
        _text(f"Payment To: {invoice.payment_received_by or DEFAULT_PAYMENT_RECIPIENT}"),
    ]
    fields: Dict[str, str] = payment_method.fields or {}
    for key in sorted(fields):
        lines.append(_text(f"{key[:1].upper()}{key[1:]}: {fields[key]}"))
    return _node("block", children=lines)


def build_notes_and_terms(invoice, template, style: LayoutStyle) -> List[DocumentNode]:
    sections = []
    for title, shown, template_text, invoice_text in (
        ("NOTES", template.show_notes, template.notes, invoice.notes),
        ("TERMS & CONDITIONS", template.show_terms, template.terms, invoice.terms),
    ):
        text = template_text or (invoice_text if shown else None)
        if text:
            sections.append(
                _node(
                    "block",
                    children=[_text(title, bold="true", color=style.primary_color, font_size=9), _text(text)],
                )
            )
    return sections


def _issue_date(invoice) -> str:
    created_at = getattr(invoice, "created_at", None)
    return created_at.strftime("%B %d, %Y") if created_at else EMPTY_CELL


def render_professional(invoice, template, company_profile, payment_method) -> DocumentNode:
    style = LayoutStyle(template)
    banner = _node(
        "banner",
        children=[
            _node(
                "columns",
                children=[
                    _text("INVOICE", bold="true", font_size=24, color="#ffffff"),
                    _text(f"INVOICE NUMBER • {invoice.invoice_number or UNSET_NUMBER}", align="right", color="#ffffff"),
                ],
            ),
            _text(f"Date: {_issue_date(invoice)}", align="right", color="#e5e7eb", font_size=9),
        ],
        background=style.primary_color,
        shape="flat",
    )
    body = [
        banner,
        _node("columns", children=[build_bill_to(invoice, style), build_company(company_profile, template, style)]),
    ]
    if invoice.platform:
        body.append(_text(f"Platform: {invoice.platform}", color="#4b5563"))
    body.append(build_items_table(invoice, template, style, header_background="#f3f4f6", header_color=style.text_color))
    body.append(build_totals(invoice, style))
    payment = build_payment(invoice, template, payment_method, style)
    if payment is not None:
        body.append(payment)
    body.extend(build_notes_and_terms(invoice, template, style))
    body.append(_node("rule", color=style.border_color, thickness=1))
    body.append(_text("Thank you for your business!", align="center", color="#6b7280", font_size=9))
    return _node("page", children=body, font_family=style.font_family, color=style.text_color)


def render_minimalist(invoice, template, company_profile, payment_method) -> DocumentNode:
    style = LayoutStyle(template)
    banner = _node(
        "banner",
        children=[
            _text("INVOICE", bold="true", font_size=26, color="#ffffff"),
            _text(f"INVOICE NO: {invoice.invoice_number or UNSET_NUMBER}", color="#ffffff"),
            _text(f"DATE: {_issue_date(invoice)}", color="#ffffff", font_size=9),
        ],
        background=style.primary_color,
        shape="diagonal",
    )
    body = [banner]
    if invoice.platform:
        body.append(_text(f"PLATFORM: {invoice.platform}", bold="true", color=style.primary_color))
    body.append(_node("columns", children=[build_bill_to(invoice, style), build_company(company_profile, template, style)]))
    body.append(_node("rule", color=style.primary_color, thickness=2))
    body.append(build_items_table(invoice, template, style, header_background="#ffffff", header_color=style.primary_color))
    body.append(build_totals(invoice, style))
    payment = build_payment(invoice, template, payment_method, style)
    if payment is not None:
        body.append(payment)
    body.extend(build_notes_and_terms(invoice, template, style))
    body.append(_node("ornament", color=style.primary_color, shape="angular"))
    return _node("page", children=body, font_family=style.font_family, color=style.text_color)


LAYOUTS: Dict[str, Callable] = {
    TemplateFamily.PROFESSIONAL.value: render_professional,
    TemplateFamily.MINIMALIST.value: render_minimalist,
}


def render_invoice(invoice, template, company_profile=None, payment_method=None) -> RenderedDocument:
    """Render ``invoice`` through the layout family of ``template``."""
    family = getattr(template.family, "value", template.family)
    layout = LAYOUTS.get(family, render_professional)
    root = layout(invoice, template, company_profile, payment_method)
    return RenderedDocument(
        family=family if family in LAYOUTS else TemplateFamily.PROFESSIONAL.value,
        template_name=template.name,
        filename=invoice_filename(invoice.invoice_number, invoice.client_name),
        root=root,
    )
