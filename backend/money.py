from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# NUMERIC(10, 2)
MAX_AMOUNT = Decimal("99999999.99")

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_decimal(value) -> Decimal:
    """
    Coerce a JSON number or numeric string into a Decimal with two places.
    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("must be a number")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, int):
        dec = Decimal(value)
    elif isinstance(value, float):
        dec = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("must be a number")
        try:
            dec = Decimal(text)
        except InvalidOperation:
            raise ValueError("must be a number") from None
    else:
        raise ValueError("must be a number")

    if not dec.is_finite():
        raise ValueError("must be a finite number")
    if abs(dec) > MAX_AMOUNT:
        raise ValueError(f"must not exceed {MAX_AMOUNT} in magnitude")
    dec = dec.quantize(CENT, rounding=ROUND_HALF_UP)
    if abs(dec) > MAX_AMOUNT:
        raise ValueError(f"must not exceed {MAX_AMOUNT} in magnitude")
    return dec


def positive_amount(value) -> Decimal:
    dec = to_decimal(value)
    if dec <= 0:
        raise ValueError("amount must be a positive number")
    return dec


def to_number(value) -> float:
    """Display conversion for JSON output only."""
    if value is None:
        return 0.0
    return float(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_date_only(value) -> bool:
    return isinstance(value, str) and bool(_DATE_ONLY.match(value.strip()))


def parse_datetime(value, *, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO-8601 date or datetime into a naive UTC datetime.

    A bare date means midnight, or the last microsecond of that day when
    ``end_of_day`` is set (used for inclusive upper bounds).
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.max if end_of_day else time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if is_date_only(text):
            try:
                d = date.fromisoformat(text)
            except ValueError:
                raise ValueError("Invalid date format (ISO 8601 expected)") from None
            dt = datetime.combine(d, time.max if end_of_day else time.min)
        else:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                dt = datetime.fromisoformat(text)
            except ValueError:
                raise ValueError("Invalid date format (ISO 8601 expected)") from None
    else:
        raise ValueError("Invalid date format (ISO 8601 expected)")

    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        except (OverflowError, ValueError):
            raise ValueError("Invalid date format (ISO 8601 expected)") from None
    return dt


def iso(value) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def as_money(value) -> Decimal:
    """Normalise a value read back from the database (Decimal, int or driver float)."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
