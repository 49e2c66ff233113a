from decimal import Decimal
from types import SimpleNamespace

import pytest

from invoices.invoice_calculator import (
    aggregate_amounts,
    apply_item_amounts,
    calculate_item,
    parse_quantity,
    parse_rate,
    parse_unit_price,
    recompute_total,
    validate_for_persistence,
)
from invoices.invoice import Invoice
from invoices.invoice_item import InvoiceItem
from src.exceptions import ValidationError


def test_calculate_item_with_nine_percent_cgst_and_sgst():
    amounts = calculate_item(Decimal("100.00"), 2, Decimal("9"), Decimal("9"))

    assert amounts.subtotal == Decimal("200.00")
    assert amounts.cgst_amount == Decimal("18.00")
    assert amounts.sgst_amount == Decimal("18.00")
    assert amounts.tax_amount == Decimal("36.00")
    assert amounts.total_price == Decimal("236.00")


def test_calculate_item_without_rates_has_no_tax():
    amounts = calculate_item("50", 3, None, 0)

    assert amounts.tax_amount == Decimal("0.00")
    assert amounts.total_price == Decimal("150.00")


@pytest.mark.parametrize(
    "unit_price, quantity, cgst, sgst",
    [
        ("0.99", 7, "2.5", "2.5"),
        ("1234.57", 3, "6", "6"),
        ("19.99", 11, "14", "14"),
        ("5", 1, "0", "18"),
    ],
)
def test_total_is_subtotal_plus_both_taxes(unit_price, quantity, cgst, sgst):
    amounts = calculate_item(unit_price, quantity, cgst, sgst)

    assert amounts.tax_amount == amounts.cgst_amount + amounts.sgst_amount
    assert amounts.total_price == amounts.subtotal + amounts.cgst_amount + amounts.sgst_amount
    assert amounts.cgst_amount >= 0 and amounts.sgst_amount >= 0


def test_tax_grows_with_rate():
    low = calculate_item("100", 1, "5", "5")
    high = calculate_item("100", 1, "10", "10")

    assert high.cgst_amount == low.cgst_amount * 2
    assert high.sgst_amount == low.sgst_amount * 2


def test_calculate_item_is_repeatable():
    first = calculate_item("33.33", 3, "2.5", "2.5")
    second = calculate_item("33.33", 3, "2.5", "2.5")

    assert first == second
    assert [str(v) for v in first] == [str(v) for v in second]


def test_each_tax_component_is_rounded_half_up():
    # subtotal 99.99, 2.5% = 2.49975 -> 2.50
    amounts = calculate_item("33.33", 3, "2.5", "2.5")

    assert amounts.cgst_amount == Decimal("2.50")
    assert amounts.total_price == Decimal("104.99")


@pytest.mark.parametrize(
    "unit_price, quantity",
    [("0", 1), ("-5", 1), (None, 1), ("10", 0), ("10", -2), ("10", "1.5"), ("10", None), ("10", True)],
)
def test_calculate_item_rejects_bad_price_or_quantity(unit_price, quantity):
    with pytest.raises(ValidationError):
        calculate_item(unit_price, quantity, "9", "9")


def test_price_and_rates_are_rounded_before_amounts_are_derived():
    amounts = calculate_item("10.005", 3, "9.125", None)

    assert amounts.subtotal == Decimal("30.03")
    assert amounts.cgst_amount == Decimal("2.74")
    assert amounts.total_price == parse_unit_price("10.005") * 3 + amounts.tax_amount
    assert parse_rate("9.125", "cgst_rate") == Decimal("9.13")


def test_price_that_rounds_to_zero_is_rejected():
    with pytest.raises(ValidationError, match="unit price"):
        calculate_item("0.004", 1)


def test_calculate_item_rejects_negative_rate():
    with pytest.raises(ValidationError):
        calculate_item("10", 1, "-1", "9")


def test_calculate_item_rejects_blank_name_when_given():
    with pytest.raises(ValidationError, match="Item name"):
        calculate_item("10", 1, "9", "9", item_name="   ")


def test_parse_quantity_accepts_whole_numbers_only():
    assert parse_quantity(4) == 4
    assert parse_quantity("4") == 4
    assert parse_quantity(4.0) == 4
    with pytest.raises(ValidationError):
        parse_quantity("four")


def test_apply_item_amounts_overwrites_client_values():
    item = InvoiceItem(
        item_name="Paint",
        quantity=2,
        unit_price=Decimal("100.00"),
        cgst_rate=Decimal("9"),
        sgst_rate=Decimal("9"),
        total_price=Decimal("1.00"),
        tax_amount=Decimal("999"),
    )

    apply_item_amounts(item)

    assert item.tax_amount == Decimal("36.00")
    assert item.total_price == Decimal("236.00")


def test_recompute_total_of_nothing_is_zero():
    assert recompute_total([]) == Decimal("0.00")
    assert recompute_total([SimpleNamespace(total_price=None)]) == Decimal("0.00")


def test_recompute_total_sums_item_totals():
    items = [SimpleNamespace(total_price=Decimal("236.00")), SimpleNamespace(total_price=Decimal("118.00"))]

    assert recompute_total(items) == Decimal("354.00")


def test_aggregate_amounts_builds_header_totals():
    totals = aggregate_amounts([calculate_item("100", 2, "9", "9"), calculate_item("50", 1, "6", "6")])

    assert totals.subtotal == Decimal("250.00")
    assert totals.tax_amount == Decimal("42.00")
    assert totals.total == Decimal("292.00")


def _invoice_with(*items):
    invoice = Invoice(customer_name="Test", invoice_no="INV000001")
    invoice.items = list(items)
    return invoice


def test_validate_rejects_invoice_without_items():
    with pytest.raises(ValidationError, match="at least one item"):
        validate_for_persistence(_invoice_with())


def test_validate_rejects_item_with_zero_quantity():
    item = InvoiceItem(item_name="Bolt", quantity=0, unit_price=Decimal("10"), total_price=Decimal("10"))

    with pytest.raises(ValidationError, match="quantity"):
        validate_for_persistence(_invoice_with(item))


def test_validate_rejects_item_with_non_positive_total():
    item = InvoiceItem(item_name="Bolt", quantity=1, unit_price=Decimal("10"), total_price=Decimal("0"))
    other = InvoiceItem(item_name="Nut", quantity=1, unit_price=Decimal("10"), total_price=Decimal("10"))

    with pytest.raises(ValidationError, match="total price"):
        validate_for_persistence(_invoice_with(other, item))


def test_validate_recomputes_stale_total():
    item = InvoiceItem(item_name="Bolt", quantity=2, unit_price=Decimal("10"), total_price=Decimal("20.00"))
    invoice = _invoice_with(item)
    invoice.total_amount = Decimal("-5")

    assert validate_for_persistence(invoice) == Decimal("20.00")
    assert invoice.total_amount == Decimal("20.00")
