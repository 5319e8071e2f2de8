"""Numeric input helpers for session metrics and goal values."""

import math
from typing import Any, Optional, Union

# Largest integer SQLite can bind as INTEGER.
SQLITE_MAX_INTEGER = 2 ** 63 - 1


def as_storable_number(value: Any) -> Optional[Union[int, float]]:
    """Return value as a finite number the store can hold, or None.

    Booleans and non-numeric values are rejected. Integers beyond SQLite's
    64-bit range are converted to float; those too large for a float are
    rejected.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int) and abs(value) > SQLITE_MAX_INTEGER:
        try:
            value = float(value)
        except OverflowError:
            return None
    if not math.isfinite(value):
        return None
    return value
