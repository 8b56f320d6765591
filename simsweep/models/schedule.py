"""simsweep.models.schedule

Reference step engine.

Just enough of a discrete-event engine to drive bundled models: a step counter,
steppables called once per step in registration order, and a halt flag.
Models with their own engine only need to honour the same three calls:
`reset()`, `step() -> bool`, `steps`.
"""

from __future__ import annotations

from collections.abc import Callable

Steppable = Callable[[], None]


class Schedule:
    def __init__(self) -> None:
        self.steps = 0
        self._repeating: list[Steppable] = []
        self._halted = False

    def reset(self) -> None:
        self.steps = 0
        self._repeating = []
        self._halted = False

    def schedule_repeating(self, fn: Steppable) -> None:
        self._repeating.append(fn)

    def halt(self) -> None:
        self._halted = True

    @property
    def halted(self) -> bool:
        return self._halted

    def step(self) -> bool:
        """Advance one step. False once nothing remains to run."""

        if self._halted or not self._repeating:
            return False
        for fn in list(self._repeating):
            fn()
        self.steps += 1
        return not self._halted
