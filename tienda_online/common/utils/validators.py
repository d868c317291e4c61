from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def as_positive_int(value: Any) -> Optional[int]:
    """Return value as an int > 0, or None when it is not one.

    Booleans and floats with a fractional part are rejected; integral
    floats (``2.0``) and digit strings (``"2"``) are accepted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return int(value) if value > 0 else None
    if isinstance(value, str):
        number = as_int(value)
        return number if number is not None and number > 0 else None
    return None


def as_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON number (or numeric string) to Decimal via its text form."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        # isdigit() also accepts "²", which int() refuses
        if text.lstrip("+-").isdecimal():
            try:
                return int(text)
            except ValueError:
                return None
    return None
