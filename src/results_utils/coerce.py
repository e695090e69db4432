"""Lenient decoding of the untrusted results feed (pure, never raises).

The feed is a spreadsheet-backed JSON snapshot edited by hand during the
event, so any field may be missing, mistyped or padded with whitespace.
Every helper here maps a raw value onto a typed value or a documented
default instead of raising:

  - to_record(value) → dict | None
  - to_array(value) → list
  - to_text(value) → str | None
  - to_number(value) → int | float | None
  - to_rank(value) → int (0 when unresolvable)
  - first_text / first_number / first_array → first usable fallback
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

Number = int | float

_NUMERIC_TEXT = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def to_record(value: Any) -> Mapping[str, Any] | None:
    """Return `value` when it is a JSON object, else None."""
    if isinstance(value, Mapping):
        return value
    return None


def to_array(value: Any) -> list[Any]:
    """Return a shallow list copy of a JSON array, else an empty list."""
    if isinstance(value, list | tuple):
        return list(value)
    return []


def _finite(value: float) -> Number | None:
    if not math.isfinite(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_number(value: Any) -> Number | None:
    """Coerce a native number or numeric string to a finite number.

    Thousands separators are stripped (``"1,234"`` → ``1234``). Integral
    values come back as ``int``. Booleans, blanks, NaN/infinity and
    unparsable text resolve to None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _finite(value)
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not _NUMERIC_TEXT.match(cleaned):
            return None
        if re.fullmatch(r"[+-]?\d+", cleaned):
            return int(cleaned)
        return _finite(float(cleaned))
    return None


def to_text(value: Any) -> str | None:
    """Trimmed non-empty string; finite numbers are rendered as text."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    number = to_number(value)
    if number is None:
        return None
    return str(number)


def to_rank(value: Any) -> int:
    """Positive integral rank, or 0 when the value cannot be a rank."""
    number = to_number(value)
    if number is None or number < 1:
        return 0
    if isinstance(number, float):
        # 1.5 is not a placement
        return 0
    return number


def first_text(record: Mapping[str, Any], *keys: str) -> str | None:
    """Return the first resolvable text among `keys` of `record`."""
    for key in keys:
        text = to_text(record.get(key))
        if text is not None:
            return text
    return None


def first_number(record: Mapping[str, Any], *keys: str) -> Number | None:
    """Return the first resolvable number among `keys` of `record`."""
    for key in keys:
        number = to_number(record.get(key))
        if number is not None:
            return number
    return None


def first_array(*values: Any) -> list[Any]:
    """Return the first non-empty array among alternative nestings."""
    for value in values:
        items = to_array(value)
        if items:
            return items
    return []


def nested(record: Mapping[str, Any] | None, *path: str) -> Any:
    """Walk `path` through nested objects; None as soon as a hop is missing."""
    current: Any = record
    for key in path:
        current = to_record(current)
        if current is None:
            return None
        current = current.get(key)
    return current
