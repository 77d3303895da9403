"""Lenient numeric parsing for malformed exports.

Exports regularly carry empty cells, stray quotes around numbers, or text
where a number is expected. Every such value becomes 0 so the caller can
treat "absent" and "zero" the same way.
"""

from __future__ import annotations

import math
from typing import Any

_QUOTE_CHARS = "\"'"


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().strip(_QUOTE_CHARS).strip()
    return value


def safe_float(value: Any) -> float:
    """Parse a float, substituting 0 for missing or non-numeric input."""
    value = _clean(value)
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(parsed) or math.isinf(parsed):
        return 0.0
    return parsed


def safe_int(value: Any) -> int:
    """Parse an int, substituting 0 for missing or non-numeric input.

    Decimal input is truncated toward zero ("5.0" -> 5, "7.9" -> 7).
    """
    return int(safe_float(value))
