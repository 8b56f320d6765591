"""simsweep.models.template

Copy-this model.

To adapt:
- rename TemplateModel and the registered name
- list every field the harness may set or read in FIELDS
- build state and schedule steppables in setup()
- override bind_unknown()/unknown_result() for names that are not plain fields
"""

from __future__ import annotations

from simsweep.core.types import FieldKind
from simsweep.models.base import SimModel
from simsweep.models.fields import FieldRegistry
from simsweep.models.registry import register


@register("template")
class TemplateModel(SimModel):
    """A small, working example used by unit tests."""

    FIELDS = FieldRegistry.of(
        a=FieldKind.INT,
        b=FieldKind.STR,
        total=FieldKind.INT,
    )
    PARAMS = ("a", "b")
    RESULTS = ("total",)

    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.a = 0
        self.b = ""
        self.total = 0

    def setup(self) -> None:
        self.schedule.schedule_repeating(self._tick)

    def _tick(self) -> None:
        self.total += self.a
