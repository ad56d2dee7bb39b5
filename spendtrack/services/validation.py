from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import ValidationError

CENT = Decimal("0.01")
AMOUNT_CEILING = Decimal("1e10")  # Numeric(12, 2) holds up to 9,999,999,999.99


def parse_amount(raw, field="amount", minimum=None) -> Decimal:
    """Parse a positive currency amount, rounded to cents."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("Amount is required", field=field)
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError("Amount must be a number", field=field) from None
    if not amount.is_finite():
        raise ValidationError("Amount must be a number", field=field)
    if abs(amount) >= AMOUNT_CEILING:
        raise ValidationError("Amount is too large", field=field)
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount >= AMOUNT_CEILING:
        raise ValidationError("Amount is too large", field=field)
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero", field=field)
    if minimum is not None and amount < Decimal(str(minimum)):
        raise ValidationError(f"Amount must be at least {Decimal(str(minimum)):.2f}", field=field)
    return amount


def parse_date(raw, default=None, field="date") -> date:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default or date.today()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        raise ValidationError("Date must look like YYYY-MM-DD", field=field) from None


def parse_period(raw, default: date):
    """Parse ``YYYY-MM`` into ``(year, month)``; blank means ``default``'s month."""
    if raw is None or not str(raw).strip():
        return default.year, default.month
    try:
        year_s, month_s = str(raw).strip().split("-")
        year, month = int(year_s), int(month_s)
    except ValueError:
        raise ValidationError("Month must look like YYYY-MM", field="month") from None
    validate_period(year, month)
    return year, month


def validate_period(year, month):
    if not isinstance(year, int) or not 1 <= year <= 9999:
        raise ValidationError("Year is out of range", field="year")
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", field="month")
