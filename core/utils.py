"""Formatting and input sanitizing helpers."""

import re
from decimal import ROUND_HALF_UP, Decimal

_NON_NUMERIC = re.compile(r"[^0-9.]")


def _round_half_up(value, decimals):
    q = Decimal(1).scaleb(-decimals)
    return Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP)


def format_currency(amount, decimals=2):
    """Render ``amount`` as US dollars, e.g. ``$1,234.56``."""
    try:
        v = float(amount)
    except (TypeError, ValueError):
        v = 0.0
    d = _round_half_up(abs(v), decimals)
    sign = "-" if v < 0 and d != 0 else ""
    return f"{sign}${d:,.{decimals}f}"


def format_percentage(percent, decimals=2):
    """Render a percent value (``6.125`` means 6.125%) as ``6.13%``."""
    try:
        v = float(percent)
    except (TypeError, ValueError):
        v = 0.0
    return f"{_round_half_up(v, decimals):.{decimals}f}%"


def format_dscr(value):
    return f"{_round_half_up(value or 0.0, 2):.2f}"


def parse_currency_input(text):
    """Coerce free-form money input to a non-negative float.

    Everything but digits and the decimal point is dropped, so
    ``"$1,250"`` becomes ``1250.0`` and garbage becomes ``0.0``.
    """
    if isinstance(text, (int, float)):
        return max(0.0, float(text))
    cleaned = _NON_NUMERIC.sub("", str(text or ""))
    m = re.match(r"\d*\.?\d*", cleaned)
    num = m.group(0) if m else ""
    if num in ("", "."):
        return 0.0
    return float(num)


def parse_percentage_input(text):
    """Like ``parse_currency_input`` but capped to ``[0, 100]``."""
    return min(100.0, parse_currency_input(text))
