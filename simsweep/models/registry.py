"""simsweep.models.registry

Name to model class lookup for the CLI.

Bundled models register themselves with @register("name") when their module is
imported. Third-party models can do the same, or be handed to Harness directly
without a name.

Discovery imports every bundled model module, once per process. `get_model`
only discovers on a miss; `list_models` always discovers, so the listing is
complete even when some models were imported or registered beforehand.
"""

from __future__ import annotations

import functools
import importlib
import pkgutil
from collections.abc import Callable
from typing import Any

from simsweep.models.base import SimModel

_REGISTRY: dict[str, type[SimModel]] = {}

# support modules in simsweep.models that hold no model
_PLUMBING = frozenset({"base", "fields", "network", "registry", "schedule"})


def register(name: str) -> Callable[[type[Any]], type[Any]]:
    """Class decorator: file the class under `name` and set its `name` attribute."""

    def _wrap(cls: type[Any]) -> type[Any]:
        taken = _REGISTRY.get(name)
        if taken is not None and taken is not cls:
            raise ValueError(f"model name {name!r} is taken by {taken.__qualname__}")
        cls.name = name
        _REGISTRY[name] = cls
        return cls

    return _wrap


@functools.cache
def discover() -> tuple[str, ...]:
    """Import the bundled model modules. Returns their short names."""

    pkg = importlib.import_module("simsweep.models")
    loaded: list[str] = []
    for info in pkgutil.iter_modules(pkg.__path__):
        if info.name in _PLUMBING:
            continue
        importlib.import_module(f"{pkg.__name__}.{info.name}")
        loaded.append(info.name)
    return tuple(loaded)


def get_model(name: str) -> type[SimModel]:
    cls = _REGISTRY.get(name)
    if cls is None:
        discover()
        cls = _REGISTRY.get(name)
    if cls is None:
        raise KeyError(f"unknown model: {name}")
    return cls


def list_models() -> list[str]:
    discover()
    return sorted(_REGISTRY)
