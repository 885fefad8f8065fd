"""
Field resolution shared by every view.

Upstream payloads are loosely typed: a field may be absent, None, an empty
string or zero, and all of those mean "not provided". resolve() picks the
first provided candidate; the placeholder literals rendered for missing
values are defined here only.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

PLACEHOLDER = "N/A"
UNKNOWN = "unknown"
ZERO = "0"

TIMESTAMP_FORMAT = "%m/%d/%Y %H:%M:%S"

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def is_present(value: Any) -> bool:
    """False for None, empty string, False, zero and NaN."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


def resolve(*candidates: Any, default: Any = PLACEHOLDER) -> Any:
    """Return the first present candidate, else default."""
    for candidate in candidates:
        if is_present(candidate):
            return candidate
    return default


def parse_int_prefix(value: Any) -> int | None:
    """Integer from the leading digits of value ("1704067200.5" -> 1704067200), or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else int(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_float_prefix(value: Any) -> float:
    """Float from the leading number of value; 0.0 when there is none."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return 0.0 if math.isnan(number) else number
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        return float(match.group(1)) if match else 0.0
    return 0.0


def parse_number(value: Any) -> float | None:
    """Number when the whole of value is numeric ("5", " 2.5 "), else None ("5abc")."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def format_timestamp(value: Any) -> str:
    """
    Format Unix seconds as MM/DD/YYYY HH:MM:SS (UTC).

    Missing, zero, "N/A" or non-numeric values render as N/A.
    """
    if not is_present(value) or value == PLACEHOLDER:
        return PLACEHOLDER
    seconds = parse_int_prefix(value)
    if seconds is None:
        return PLACEHOLDER
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return PLACEHOLDER
    return moment.strftime(TIMESTAMP_FORMAT)


def as_text(value: Any) -> str:
    """Render a resolved value as CSV text."""
    return value if isinstance(value, str) else str(value)
