"""Normalization helpers.

Centralizes defensive parsing of values coming from remote services.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def finite_float(value: Any) -> float | None:
    """Like :func:`safe_float` but also rejects infinities."""
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return parsed


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def strip_unit(value: str, *units: str) -> str:
    """Remove trailing unit suffixes such as ``"°"`` from *value*."""
    text = value.strip()
    for unit in units:
        if text.endswith(unit):
            text = text[: -len(unit)].rstrip()
    return text
