import pytest
from decimal import Decimal

from backend.app.core.errors import ValidationError
from backend.app.services.billing import (
    PriceModifiers,
    calculate_line_total,
    compute_modifier_totals,
    compute_totals,
    to_decimal,
)


def test_calculate_line_total_basic():
    assert calculate_line_total(Decimal("50.00"), 2) == Decimal("100.00")
    assert calculate_line_total(Decimal("19.99"), 3, 2) == Decimal("119.94")
    assert calculate_line_total(Decimal("10.005"), 1) == Decimal("10.01")


def test_percentage_discount_example():
    totals = compute_totals([Decimal("200.00")], Decimal("10"), "percentage", Decimal("5"))
    assert totals.subtotal == Decimal("200.00")
    assert totals.tax_amount == Decimal("20.00")
    assert totals.discount_amount == Decimal("10.00")
    assert totals.total == Decimal("210.00")


def test_flat_discount_example():
    totals = compute_totals([Decimal("60.00"), Decimal("40.00")], 0, "flat", Decimal("15"))
    assert totals.subtotal == Decimal("100.00")
    assert totals.tax_amount == Decimal("0.00")
    assert totals.discount_amount == Decimal("15.00")
    assert totals.total == Decimal("85.00")


def test_total_matches_line_and_modifier_sum():
    totals = compute_totals([Decimal("33.33"), Decimal("66.67"), Decimal("12.50")], Decimal("7.5"), "percentage", 3)
    assert totals.total == totals.subtotal + totals.tax_amount - totals.discount_amount


def test_discount_larger_than_subtotal_gives_negative_total():
    totals = compute_totals([Decimal("10.00")], 0, "flat", Decimal("25"))
    assert totals.total == Decimal("-15.00")


def test_empty_lines_total_zero():
    totals = compute_modifier_totals([], PriceModifiers())
    assert totals.subtotal == Decimal("0.00")
    assert totals.total == Decimal("0.00")


def test_unknown_discount_type_rejected():
    with pytest.raises(ValidationError):
        compute_totals([Decimal("10.00")], 0, "bogus", 1)


def test_to_decimal_rejects_garbage():
    assert to_decimal("12.30") == Decimal("12.30")
    assert to_decimal(None) == Decimal("0")
    with pytest.raises(ValidationError):
        to_decimal("twelve")
    with pytest.raises(ValidationError):
        to_decimal("NaN")


def test_modifiers_are_rounded_to_stored_precision():
    totals = compute_totals([Decimal("99999.90")], Decimal("12.345"), "percentage", Decimal("3.333"))
    assert totals.tax_amount == Decimal("12349.99")
    assert totals.discount_amount == Decimal("3330.00")
    assert totals == compute_totals([Decimal("99999.90")], Decimal("12.35"), "percentage", Decimal("3.33"))
