"""simsweep.core.types

Frozen records passed between the resolver, the sweep driver and the writer.

Validated config lives in pydantic models (core.config); these are plain
dataclasses built once per spec or once per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simsweep.core.config import KeyParams


class FieldKind(StrEnum):
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CHAR = "char"
    LIST = "list"
    NETWORK = "network"

    @property
    def is_scalar(self) -> bool:
        return self not in (FieldKind.LIST, FieldKind.NETWORK)


class Role(StrEnum):
    FIXED = "fixed"
    SWEPT = "swept"
    RANDOM = "random"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    name: str
    raw: str
    role: Role
    initial: str
    values: tuple[str, ...] = ()  # SWEPT only, every token including the initial one
    code: str | None = None  # RANDOM only

    def __post_init__(self) -> None:
        if self.role is Role.SWEPT and not self.values:
            raise ValueError(f"swept parameter {self.name} needs a value list")
        if self.role is Role.RANDOM and not self.code:
            raise ValueError(f"random parameter {self.name} needs a distribution code")
        if self.role is not Role.SWEPT and self.values:
            raise ValueError(f"only swept parameters carry a value list: {self.name}")


@dataclass(slots=True)
class ResolvedSpec:
    """Everything one spec file declares."""

    params: list[ParameterSpec]
    keys: KeyParams
    results: list[str] = field(default_factory=list)
    list_results: list[str] = field(default_factory=list)
    agent_results: list[str] = field(default_factory=list)
    agent_lists: list[str] = field(default_factory=list)
    networks: list[str] = field(default_factory=list)
    # Result lines from the file itself (model-declared results excluded), kept for splitting.
    file_results: list[str] = field(default_factory=list)
    source: Path | None = None

    def by_role(self, role: Role) -> list[ParameterSpec]:
        return [p for p in self.params if p.role is role]

    @property
    def random(self) -> list[ParameterSpec]:
        return self.by_role(Role.RANDOM)

    @property
    def swept(self) -> list[ParameterSpec]:
        return self.by_role(Role.SWEPT)

    def names(self) -> list[str]:
        return [p.name for p in self.params]

    def get(self, name: str) -> ParameterSpec | None:
        for p in self.params:
            if p.name == name:
                return p
        return None


@dataclass(frozen=True, slots=True)
class SweepStats:
    iterations: int
    leaves: int
    runs: int


@dataclass(frozen=True, slots=True)
class RunContext:
    """One replication of one sweep leaf."""

    seed: int
    # random values then swept values, in declaration order
    prefix: tuple[str, ...]
    replication: int = 0
