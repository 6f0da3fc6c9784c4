"""Pricing math for invoice line items and invoice totals.

All arithmetic is Decimal; money is rounded half-up to cents at each derived
amount so stored and recomputed values agree.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from backend.app.core.errors import ValidationError
from backend.app.models.enums import DiscountType
from backend.app.schemas.invoice import InvoiceTotals

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PriceModifiers:
    tax_percentage: Decimal = Decimal("0")
    discount_type: str = DiscountType.FLAT.value
    discount_value: Decimal = Decimal("0")


def to_decimal(value: Decimal | int | float | str | None, field: str = "value") -> Decimal:
    """Parse a monetary input without going through binary floats."""
    if value is None:
        return Decimal("0")
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if not parsed.is_finite():
        raise ValidationError(f"{field} must be a number")
    return parsed


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_line_total(unit_price: Decimal, quantity: int, time_period: int = 1) -> Decimal:
    return round_money(to_decimal(unit_price) * Decimal(quantity) * Decimal(time_period or 1))


def compute_totals(
    line_totals: Iterable[Decimal],
    tax_percentage: Decimal | int | str = 0,
    discount_type: str = DiscountType.FLAT.value,
    discount_value: Decimal | int | str = 0,
) -> InvoiceTotals:
    """Derive subtotal, tax, discount and total.

    Tax and discount inputs are rounded to cents first, the precision they are
    stored with. Percentages are not clamped and a discount larger than
    subtotal plus tax yields a negative total.
    """
    subtotal = round_money(sum((to_decimal(total) for total in line_totals), Decimal("0")))
    tax_rate = round_money(to_decimal(tax_percentage, "tax_percentage"))
    discount = round_money(to_decimal(discount_value, "discount_value"))

    tax_amount = round_money(subtotal * tax_rate / HUNDRED)
    if discount_type == DiscountType.PERCENTAGE.value:
        discount_amount = round_money(subtotal * discount / HUNDRED)
    elif discount_type == DiscountType.FLAT.value:
        discount_amount = round_money(discount)
    else:
        raise ValidationError(f"Unknown discount type: {discount_type}")

    total = subtotal + tax_amount - discount_amount
    return InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, discount_amount=discount_amount, total=total)


def compute_modifier_totals(line_totals: Iterable[Decimal], modifiers: PriceModifiers) -> InvoiceTotals:
    return compute_totals(line_totals, modifiers.tax_percentage, modifiers.discount_type, modifiers.discount_value)
