"""Dynamic value coercion and formatting.

Pin values are untyped at run time: `None` (absent), `str`, `int`, `float` or
`bool`. These helpers implement the coercion rules shared by every node kind
and the way values are shown in the console trace.
"""

from __future__ import annotations

import json
import math
from typing import Any, Optional, Union

Number = Union[int, float]


def parse_number(value: Any) -> Optional[Number]:
    """Coerce a dynamic value to a finite number, or None when it can't be.

    - numbers pass through (non-finite floats are rejected)
    - numeric strings are parsed (surrounding whitespace ignored)
    - booleans map to 1 / 0
    - anything else (absent, empty string, text) fails
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        s = value.strip()
        # Python accepts "1_000"; the editor's number fields never produce it.
        if not s or "_" in s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            parsed = float(s)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def to_integer(value: Any) -> Optional[int]:
    """Coerce to a number, then truncate toward zero."""
    n = parse_number(value)
    if n is None:
        return None
    return math.trunc(n)


def to_float(value: Any) -> Optional[float]:
    n = parse_number(value)
    if n is None:
        return None
    try:
        return float(n)
    except OverflowError:
        return None


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return not math.isnan(value) and value != 0.0
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return bool(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def display_string(value: Any) -> str:
    """Stringify a value the way the console shows it (absent -> "")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    return str(value)


def describe(value: Any) -> str:
    """Render a raw input for warning lines (absent -> "undefined")."""
    if value is None:
        return "undefined"
    return display_string(value)


def json_literal(value: Any) -> str:
    """JSON-like literal for the final variable dump.

    Floats render like the console does (`3.0` -> `3`); non-finite ones as `null`.
    """
    if isinstance(value, float):
        return _format_float(value) if math.isfinite(value) else "null"
    return json.dumps(value, ensure_ascii=False, default=str)
