"""simsweep.models.base

Models are what the harness drives.

The harness never subclasses a model and never reflects over one. It talks to
an injected object through `SimulationModel`:
- names: declare_names(), fields(), agent_fields()
- binding: fields() setters, bind_unknown() for everything else
- reading: read_result(), read_agent_result(), agents(), network()
- engine: reseed(), start(), step(), steps, finish()

`SimModel` implements all of it on top of a FieldRegistry and a Schedule.
Subclasses usually only declare FIELDS and implement setup().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np

from simsweep.core.text import format_value
from simsweep.core.types import FieldKind
from simsweep.models.fields import EMPTY_REGISTRY, FieldRegistry
from simsweep.models.schedule import Schedule


@runtime_checkable
class SimulationModel(Protocol):
    name: str
    rng: np.random.Generator

    @property
    def steps(self) -> int: ...

    def declare_names(self) -> tuple[list[str], list[str]]: ...

    def fields(self) -> FieldRegistry: ...

    def agent_fields(self) -> FieldRegistry: ...

    def bind_unknown(self, name: str, value: str) -> bool: ...

    def read_result(self, name: str) -> str: ...

    def read_agent_result(self, agent: Any, name: str) -> str: ...

    def agents(self) -> Sequence[Any | None]: ...

    def network(self, name: str) -> Any: ...

    def reseed(self, seed: int) -> None: ...

    def start(self) -> None: ...

    def step(self) -> bool: ...

    def finish(self) -> None: ...


class SimModel(ABC):
    """Template-method base class.

    Subclasses declare:
    - FIELDS (model-level registry), AGENT_FIELDS (optional)
    - PARAMS / RESULTS (names listed first in templates, results always collected)

    and implement:
    - setup() (build state, schedule steppables; called by start())
    """

    name: str = "model"

    FIELDS: FieldRegistry = EMPTY_REGISTRY
    AGENT_FIELDS: FieldRegistry = EMPTY_REGISTRY
    PARAMS: tuple[str, ...] = ()
    RESULTS: tuple[str, ...] = ()

    def __init__(self, seed: int = 0) -> None:
        self.rng = np.random.default_rng(seed)
        self.schedule = Schedule()
        self.population: list[Any | None] = []

    # -- names ---------------------------------------------------------------

    def declare_names(self) -> tuple[list[str], list[str]]:
        return list(self.PARAMS), list(self.RESULTS)

    def fields(self) -> FieldRegistry:
        return self.FIELDS

    def agent_fields(self) -> FieldRegistry:
        return self.AGENT_FIELDS

    # -- binding -------------------------------------------------------------

    def bind_unknown(self, name: str, value: str) -> bool:
        """Hook for parameters that are not plain fields. True when handled."""

        return False

    # -- reading -------------------------------------------------------------

    def read_result(self, name: str) -> str:
        spec = self.FIELDS.get(name)
        if spec is None:
            return self.unknown_result(name)
        return format_value(spec.getter(self))

    def unknown_result(self, name: str) -> str:
        return ""

    def read_agent_result(self, agent: Any, name: str) -> str:
        if agent is None:
            return ""
        spec = self.AGENT_FIELDS.get(name)
        if spec is None:
            return self.unknown_agent_result(agent, name)
        return format_value(spec.getter(agent))

    def unknown_agent_result(self, agent: Any, name: str) -> str:
        return ""

    def agents(self) -> Sequence[Any | None]:
        return self.population

    def network(self, name: str) -> Any:
        spec = self.FIELDS.get(name)
        if spec is None or spec.kind is not FieldKind.NETWORK:
            return None
        return spec.getter(self)

    # -- engine --------------------------------------------------------------

    @property
    def steps(self) -> int:
        return self.schedule.steps

    def reseed(self, seed: int) -> None:
        self.rng = np.random.default_rng(seed)

    def start(self) -> None:
        self.schedule.reset()
        self.population = []
        self.setup()

    @abstractmethod
    def setup(self) -> None:
        raise NotImplementedError

    def step(self) -> bool:
        return self.schedule.step()

    def finish(self) -> None:
        """Teardown hook, called once per replication after the final write."""
