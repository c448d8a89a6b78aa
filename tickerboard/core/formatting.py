"""Numeric parsing and rendering for quote fields."""

from __future__ import annotations

import math
from typing import Any

DECIMAL_PLACES = 2


def parse_number(raw: Any) -> float | None:
    """Coerce a provider value to float.

    Accepts ints, floats, Yahoo ``{"raw": ...}`` wrappers and numeric text with
    thousands separators. Returns None for anything else, including bools,
    NaN and infinities.
    """
    if isinstance(raw, dict):
        raw = raw.get("raw")
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip().replace(",", "").rstrip("%")
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def format_number(value: float, places: int = DECIMAL_PLACES) -> str:
    """Render ``value`` rounded to ``places`` decimals, trailing zeros trimmed.

    >>> format_number(-2.3)
    '-2.3'
    >>> format_number(38654.426)
    '38654.43'
    """
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        return "0"
    return text


def format_percent(value: float, places: int = DECIMAL_PLACES) -> str:
    return format_number(value, places) + "%"


__all__ = ["DECIMAL_PLACES", "format_number", "format_percent", "parse_number"]
