from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from src.exceptions import ValidationError

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value, field="amount"):
    """Coerce request data into a Decimal. ``None`` passes through untouched."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so floats keep their printed value, not the binary one
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return result


def quantize_money(value):
    """Round half-up to two decimal places."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount, rate):
    if not rate:
        return ZERO
    return quantize_money(Decimal(amount) * Decimal(rate) / HUNDRED)
