from __future__ import annotations

import math
from typing import Any

NOT_AVAILABLE = "N/A"

_EMPTY_MARKERS = {"", "-", "—", "N/A", "None", "none", "null", "nan", "NaN"}


def to_float(value: Any) -> float | None:
    """
    Converts a provider value such as "12.5", "1,234" or 0.3 to float.
    Returns None for missing values, empty markers, booleans and NaN.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if cleaned in _EMPTY_MARKERS:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_ratio(value: Any) -> str:
    number = to_float(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number:.2f}"


def format_percent(value: Any) -> str:
    number = to_float(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number * 100:.2f}%"


def format_count(value: Any) -> str:
    number = to_float(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{round(number):,}"


def format_text(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    text = str(value).strip()
    return text or NOT_AVAILABLE
