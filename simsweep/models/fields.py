"""simsweep.models.fields

Explicit field registries.

A model says which names the harness may read and write, what kind each one
is, and how to get and set it. Nothing is discovered by reflection: a name the
registry does not know goes to the model's `bind_unknown` hook.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from simsweep.core.types import FieldKind

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    kind: FieldKind
    getter: Getter
    setter: Setter | None = None

    @classmethod
    def attr(cls, name: str, kind: FieldKind, *, attr: str | None = None, settable: bool = True) -> FieldSpec:
        """Accessor pair over a plain attribute (named `attr`, default `name`)."""

        target = attr or name

        def _get(obj: Any) -> Any:
            return getattr(obj, target)

        def _set(obj: Any, value: Any) -> None:
            setattr(obj, target, value)

        return cls(name=name, kind=kind, getter=_get, setter=_set if settable else None)


class FieldRegistry:
    """Ordered name -> FieldSpec map. Order is the order templates list fields in."""

    def __init__(self, specs: Iterable[FieldSpec] = ()) -> None:
        self._specs: dict[str, FieldSpec] = {}
        for s in specs:
            self.add(s)

    @classmethod
    def of(cls, **kinds: FieldKind) -> FieldRegistry:
        return cls(FieldSpec.attr(name, kind) for name, kind in kinds.items())

    def add(self, spec: FieldSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"field already registered: {spec.name}")
        self._specs[spec.name] = spec

    def get(self, name: str) -> FieldSpec | None:
        return self._specs.get(name)

    def kind(self, name: str) -> FieldKind | None:
        spec = self._specs.get(name)
        return spec.kind if spec is not None else None

    def is_list(self, name: str) -> bool:
        return self.kind(name) is FieldKind.LIST

    def names(self, *kinds: FieldKind) -> list[str]:
        if not kinds:
            return list(self._specs)
        return [n for n, s in self._specs.items() if s.kind in kinds]

    def scalar_or_list(self) -> list[str]:
        return [n for n, s in self._specs.items() if s.kind is not FieldKind.NETWORK]

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


EMPTY_REGISTRY = FieldRegistry()
