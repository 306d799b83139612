"""Numeric safety helpers for credit calculations.

Every ratio in the credit pipeline is routed through these functions so
that ``NaN``, ``inf`` and missing values never reach a user-facing figure.
None of them raise; they degrade to a safe numeric value instead.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass; a checkbox value is not an amount
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value)


def safe_number(value: Any, default: float = 0.0) -> float:
    """Return *value* as a float if it is finite, otherwise *default*.

    Numeric strings (``"42"``, ``" 1.5 "``) are parsed.  ``None``, ``NaN``,
    ``inf``, booleans and unparseable values fall back to *default*.
    """
    if _is_finite_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default
    return default


def clamp(value: float, lo: float, hi: float) -> float:
    """Bound *value* to ``[lo, hi]``; non-finite values are treated as 0."""
    v = value if _is_finite_number(value) else 0.0
    return min(hi, max(lo, v))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """``numerator / denominator``, or *default* when that is undefined."""
    if not _is_finite_number(denominator) or denominator == 0:
        return default
    if not _is_finite_number(numerator):
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def round_to(value: float, decimals: int = 2) -> float:
    return round(safe_number(value), decimals)


def average(values: Iterable[Any]) -> float:
    """Arithmetic mean of the finite values in *values* (0 when none)."""
    valid = [float(v) for v in values if _is_finite_number(v)]
    if not valid:
        return 0.0
    return sum(valid) / len(valid)


def normalize_rate(rate: Any) -> float:
    """Interpret a rate given either as a decimal (0.12) or a percent (12)."""
    r = safe_number(rate)
    if r > 1:
        return r / 100.0
    return r
