"""simsweep.core.text

Deterministic text for values written to results files.

Two runs with the same spec and seed must produce the same bytes, so every
value goes through `format_value`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np


def flatten(value: Any) -> list[Any]:
    """Flatten nested sequences into one list. Strings and mappings are leaves."""

    out: list[Any] = []
    if isinstance(value, np.ndarray):
        value = value.tolist()
    for item in value:
        if isinstance(item, np.ndarray):
            item = item.tolist()
        if isinstance(item, Iterable) and not isinstance(item, (str, bytes, Mapping)):
            out.extend(flatten(item))
        else:
            out.append(item)
    return out


def format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float):
        return repr(value)
    return str(value)


def format_sequence(value: Any) -> str:
    return "[" + ", ".join(format_scalar(v) for v in flatten(value)) + "]"


def format_value(value: Any) -> str:
    if isinstance(value, (str, bytes, Mapping)) or value is None:
        return format_scalar(value)
    if isinstance(value, (Iterable, np.ndarray)):
        return format_sequence(value)
    return format_scalar(value)
