"""
Input coercion for ledger values.

Everything a user types or a stored journal contains passes through here
before it touches a balance. Bad numbers become zero, bad dates become None;
nothing in this module raises.
"""
import math
import numbers
from decimal import Decimal
from datetime import date, datetime
from typing import Any, Optional, Union
import logging

import pandas as pd

logger = logging.getLogger(__name__)

Number = Union[int, float]


def is_blank(value: Any) -> bool:
    """True for None and empty/whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_number(value: Any) -> Optional[Number]:
    """
    Parse a numeric input, returning None when it isn't a finite number.

    Ints and floats pass through unchanged, other reals (Decimal, numpy
    scalars) become floats, strings are parsed as floating-point.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        result = value
    elif isinstance(value, (numbers.Real, Decimal)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if isinstance(result, float) and not math.isfinite(result):
        return None
    return result


def coerce(value: Any) -> Number:
    """
    Total numeric coercion.

    Examples:
    - coerce("12.5") -> 12.5
    - coerce(-3) -> -3
    - coerce("") -> 0
    - coerce("abc") -> 0
    """
    parsed = parse_number(value)
    if parsed is None:
        if not is_blank(value):
            logger.debug(f"Coerced unparsable value {value!r} to 0")
        return 0
    return parsed


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date, returning None when the input isn't one."""
    if value is None or value is pd.NaT:
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str) or not value.strip():
        return None

    parsed = pd.to_datetime(value.strip(), errors="coerce")
    if pd.isna(parsed):
        logger.debug(f"Unparsable date {value!r}")
        return None
    return parsed.date()
