from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        d = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def format_usd(value: Any, digits: int = 2, dash: str = "-") -> str:
    """
    "$1,234.56" for numbers, `dash` for anything unusable (None, NaN, text).
    """
    d = _to_decimal(value)
    if d is None:
        return dash
    digits = max(0, int(digits))
    q = Decimal(1) if digits == 0 else Decimal("1").scaleb(-digits)
    d = d.quantize(q, rounding=ROUND_HALF_UP)
    sign = "-" if d < 0 else ""
    return f"{sign}${abs(d):,.{digits}f}"


def format_pct(value: Any, digits: int = 2, dash: str = "-") -> str:
    """
    Signed percent: 12.345 -> "+12.35%", -3 -> "-3.00%". Zero is shown with "+".
    """
    d = _to_decimal(value)
    if d is None:
        return dash
    digits = max(0, int(digits))
    q = Decimal(1) if digits == 0 else Decimal("1").scaleb(-digits)
    d = d.quantize(q, rounding=ROUND_HALF_UP)
    if d == 0:
        d = abs(d)  # no "-0.00"
    sign = "+" if d >= 0 else ""
    return f"{sign}{d:.{digits}f}%"
