"""Scalar recognition helpers.

Every helper returns ``None`` when a value does not parse, so callers keep the
original string instead of handling exceptions field by field.
"""

from __future__ import annotations

import datetime
import math
import re
from typing import Optional, Union

# Decimal notation as accepted for a double: optional sign, digits with an
# optional fraction (or a bare fraction), optional exponent.
_DOUBLE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")

JsonScalar = Union[None, bool, int, float, str]


def parse_double(value: Optional[str]) -> Optional[float]:
    if not value or not _DOUBLE.fullmatch(value):
        return None
    number = float(value)
    if math.isinf(number):
        return None
    return number


def is_numeric(value: Optional[str]) -> bool:
    return parse_double(value) is not None


def parse_boolean(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_number(value: str) -> Optional[Union[int, float]]:
    """A '.' selects floating point, anything else must be an integer."""
    if "." in value:
        return parse_double(value)
    if _INTEGER.fullmatch(value):
        return int(value)
    return None


def infer_scalar(text: Optional[str]) -> JsonScalar:
    """Infer the JSON value of element text: boolean, then number, then string.

    Empty or missing text is JSON null.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    flag = parse_boolean(text)
    if flag is not None:
        return flag
    number = parse_number(text)
    if number is not None:
        return number
    return text


def scalar_to_text(value) -> str:
    """JSON-style string form of a scalar: booleans lower case, dates and
    times ISO-8601, floats always with a mantissa point, everything else
    via str()."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def format_float(value: float) -> str:
    """str() of a float, with '.0' added to a bare exponent mantissa
    (1e+20 -> 1.0e+20) so the text reads back as a float."""
    text = str(value)
    mantissa, sep, exponent = text.partition("e")
    if sep and "." not in mantissa:
        return f"{mantissa}.0e{exponent}"
    return text
