from decimal import Decimal, InvalidOperation
from typing import Optional


def decimal(val, default=Decimal(0)) -> Decimal:
    """Coerce a value to Decimal safely, with a default on failure.

    Accepts Decimal, int, float, str. Falls back to 'default' if parsing fails
    or the result is not a finite number.
    """
    if isinstance(val, Decimal):
        return val if val.is_finite() else Decimal(default)
    try:
        out = Decimal(str(val).strip())
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(default)
    return out if out.is_finite() else Decimal(default)


def price(val) -> Decimal:
    """Retail prices are never negative; anything unparseable or below zero is 0."""
    d = decimal(val)
    return d if d > 0 else Decimal(0)


def optional_decimal(val) -> Optional[Decimal]:
    """Like decimal(), but None/blank/garbage stays None instead of becoming 0."""
    if val is None or (isinstance(val, str) and not val.strip()):
        return None
    try:
        out = Decimal(str(val).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return out if out.is_finite() else None
