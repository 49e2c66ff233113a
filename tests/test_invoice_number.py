import re
from datetime import datetime

import pytest

from invoices.invoice_number import next_invoice_number


def test_sequential_number_is_incremented():
    assert next_invoice_number("INV000042") == "INV000043"


def test_sequential_number_keeps_six_digit_padding():
    assert next_invoice_number("INV000009") == "INV000010"
    assert next_invoice_number("INV999999") == "INV1000000"


@pytest.mark.parametrize("last_issued", [None, "", "   ", "INV-2024-01", "BILL000042", "INV12A"])
def test_missing_or_malformed_number_falls_back_to_timestamp(last_issued):
    number = next_invoice_number(last_issued)

    assert re.fullmatch(r"INV\d{12}", number)


def test_fallback_uses_minute_resolution_timestamp():
    now = datetime(2026, 10, 19, 14, 5, 59)

    assert next_invoice_number(None, now=now) == "INV202610191405"


def test_timestamp_number_is_continued_sequentially():
    assert next_invoice_number("INV202610191405") == "INV202610191406"
