"""Line item tax calculation and invoice total aggregation.

All amounts are rounded half-up to two decimal places (see ``invoices.money``).
Tax components are rounded individually before being summed, so
``tax_amount == cgst_amount + sgst_amount`` holds exactly on every item.
Unit prices and rates are rounded the same way before any amount is derived
from them, so a stored row satisfies
``total_price == unit_price * quantity + tax_amount``.
"""
from decimal import Decimal, InvalidOperation
from typing import NamedTuple

from invoices.money import ZERO, quantize_money, percent_of, to_decimal
from src.exceptions import ValidationError


class ItemAmounts(NamedTuple):
    subtotal: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    tax_amount: Decimal
    total_price: Decimal


class InvoiceTotals(NamedTuple):
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


_UNSET = object()


def parse_quantity(value):
    if value is None or isinstance(value, bool):
        raise ValidationError("Item quantity is required and must be a whole number")
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Item quantity must be a whole number, got {value!r}")
    if not number.is_finite() or number != number.to_integral_value():
        raise ValidationError(f"Item quantity must be a whole number, got {value!r}")
    return int(number)


def parse_rate(value, field):
    """Tax rate as a percentage, rounded to the two places the rate columns hold."""
    rate = to_decimal(value, field)
    if rate is None:
        return ZERO
    if rate < 0:
        raise ValidationError(f"{field} cannot be negative")
    return quantize_money(rate)


def parse_unit_price(value):
    price = to_decimal(value, "unit_price")
    if price is None:
        raise ValidationError("Item unit price must be greater than 0")
    # Amounts are worked out from the price as it will be stored
    price = quantize_money(price)
    if price <= 0:
        raise ValidationError("Item unit price must be greater than 0")
    return price


def calculate_item(unit_price, quantity, cgst_rate=None, sgst_rate=None, item_name=_UNSET):
    """Compute the tax breakdown and line total for one invoice item.

    ``item_name`` is optional so the arithmetic can be used on its own; when it
    is passed it must be non-blank.
    """
    if item_name is not _UNSET and (item_name is None or not str(item_name).strip()):
        raise ValidationError("Item name is required")

    price = parse_unit_price(unit_price)

    qty = parse_quantity(quantity)
    if qty < 1:
        raise ValidationError("Item quantity must be at least 1")

    subtotal = quantize_money(price * qty)
    cgst_amount = percent_of(subtotal, parse_rate(cgst_rate, "cgst_rate"))
    sgst_amount = percent_of(subtotal, parse_rate(sgst_rate, "sgst_rate"))
    tax_amount = cgst_amount + sgst_amount

    return ItemAmounts(
        subtotal=subtotal,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        tax_amount=tax_amount,
        total_price=subtotal + tax_amount,
    )


def apply_item_amounts(item):
    """Recalculate an InvoiceItem in place. Client-supplied amounts are overwritten."""
    amounts = calculate_item(
        item.unit_price,
        item.quantity,
        item.cgst_rate,
        item.sgst_rate,
        item_name=item.item_name,
    )
    item.unit_price = parse_unit_price(item.unit_price)
    item.cgst_rate = parse_rate(item.cgst_rate, "cgst_rate")
    item.sgst_rate = parse_rate(item.sgst_rate, "sgst_rate")
    item.cgst_amount = amounts.cgst_amount
    item.sgst_amount = amounts.sgst_amount
    item.tax_amount = amounts.tax_amount
    item.total_price = amounts.total_price
    return amounts


def recompute_total(items):
    total = ZERO
    for item in items or []:
        if item.total_price is not None:
            total += Decimal(item.total_price)
    return quantize_money(total)


def aggregate_amounts(amounts):
    """Sum a sequence of ItemAmounts into header totals."""
    subtotal = ZERO
    tax_amount = ZERO
    for line in amounts:
        subtotal += line.subtotal
        tax_amount += line.tax_amount
    return InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)


def validate_for_persistence(invoice):
    """Recompute ``invoice.total_amount`` from its items and check it can be stored.

    The incoming total is never trusted. Returns the recomputed total.
    """
    items = list(invoice.items or [])
    if not items:
        raise ValidationError("Invoice must contain at least one item")

    invoice.total_amount = recompute_total(items)
    if invoice.total_amount <= 0:
        raise ValidationError(
            f"Invoice must have a positive total amount. Current total: {invoice.total_amount}"
        )

    for item in items:
        if item.quantity is None or item.quantity <= 0:
            raise ValidationError("All items must have positive quantity")
        if item.unit_price is None or Decimal(item.unit_price) <= 0:
            raise ValidationError("All items must have positive unit price")
        if item.total_price is None or Decimal(item.total_price) <= 0:
            raise ValidationError("All items must have positive total price")

    return invoice.total_amount
