"""simsweep.harness.binding

Textual values onto typed fields.

Binding never raises for bad input. An unknown name goes to the model's
`bind_unknown` hook; a value that does not coerce leaves the field as it was.
Both are logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from simsweep.core.config import KEY_PARAM_KINDS, KeyParams
from simsweep.core.text import format_value
from simsweep.core.types import FieldKind
from simsweep.models.base import SimulationModel
from simsweep.sampling.distributions import is_nan, looks_like_code, sample

_TRUE_WORDS = frozenset({"true"})
_FALSE_WORDS = frozenset({"false"})


def coerce(kind: FieldKind, raw: str) -> Any:
    """Convert `raw` for a field of `kind`. ValueError when it cannot."""

    if kind is FieldKind.STR:
        return raw
    if kind is FieldKind.INT:
        try:
            return int(float(raw))
        except OverflowError as e:
            raise ValueError(f"not an integer: {raw!r}") from e
    if kind is FieldKind.FLOAT:
        return float(raw)
    if kind is FieldKind.BOOL:
        s = raw.strip().lower()
        if s in _TRUE_WORDS:
            return True
        if s in _FALSE_WORDS:
            return False
        # 0/1, including drawn values such as "1.0" from C(2)
        n = float(s)
        if n == 0:
            return False
        if n == 1:
            return True
        raise ValueError(f"not a boolean: {raw!r}")
    if kind is FieldKind.CHAR:
        if not raw:
            raise ValueError("empty value for a character field")
        return raw[0]
    raise ValueError(f"{kind} fields cannot be bound from text")


def bind(
    model: SimulationModel,
    name: str,
    value: str,
    rng: np.random.Generator,
    logger: logging.Logger,
) -> bool:
    """Set field `name` on `model` from `value`. True when something was set."""

    spec = model.fields().get(name)
    if spec is None or spec.setter is None:
        try:
            if model.bind_unknown(name, value):
                return True
        except ValueError:
            logger.warning("bind_coercion_failed", extra={"field": name, "value": value})
            return False
        logger.warning("bind_field_missing", extra={"field": name})
        return False

    # A bound value may itself be a code, drawn fresh on every bind.
    draw = sample(value, rng)
    if not is_nan(draw):
        value = format_value(draw)
    elif spec.kind is not FieldKind.STR and looks_like_code(value):
        logger.warning("random_parameter_malformed", extra={"field": name, "code": value})
        return False

    try:
        coerced = coerce(spec.kind, value)
    except ValueError:
        logger.warning("bind_coercion_failed", extra={"field": name, "value": value, "kind": str(spec.kind)})
        return False

    spec.setter(model, coerced)
    return True


def bind_all(
    model: SimulationModel,
    values: Mapping[str, str],
    rng: np.random.Generator,
    logger: logging.Logger,
) -> int:
    """Bind every value in declaration order. Returns how many were set."""

    return sum(1 for name, value in values.items() if bind(model, name, value, rng, logger))


def reset_results(model: SimulationModel, names: Iterable[str]) -> None:
    """Zero every scalar result field so nothing leaks from the previous run."""

    fields = model.fields()
    for name in names:
        spec = fields.get(name)
        if spec is None or spec.setter is None or not spec.kind.is_scalar:
            continue
        spec.setter(model, coerce(spec.kind, "0"))


def bind_key(keys: KeyParams, name: str, value: str, logger: logging.Logger) -> bool:
    """Set a reserved key parameter. Invalid values keep the prior setting."""

    kind = KEY_PARAM_KINDS.get(name)
    if kind is None:
        logger.warning("key_parameter_unknown", extra={"key": name})
        return False
    try:
        if name == "sep":
            # The validator owns separator spelling (tab escapes).
            setattr(keys, name, value)
        else:
            setattr(keys, name, coerce(kind, value))
    except ValueError:
        # pydantic.ValidationError is a ValueError too.
        logger.warning("key_parameter_invalid", extra={"key": name, "value": value})
        return False
    return True
