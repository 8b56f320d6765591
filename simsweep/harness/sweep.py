"""simsweep.harness.sweep

Drives the model through every parameter combination.

Loop structure:
- `max(iters, 1)` outer iterations; each redraws every random parameter from
  one stream seeded with `seed` (never reseeded, so iterations differ)
- depth-first over the swept parameters, last declared varying fastest
- at each leaf, `reps` replications; replication `i` runs with seed `seed + i`

Random draws are fixed for an iteration and swept values for a leaf, so every
replication of a leaf sees the same parameter table.
"""

from __future__ import annotations

import numpy as np

from simsweep.core.text import format_value
from simsweep.core.types import ResolvedSpec, RunContext, SweepStats
from simsweep.harness.binding import bind_all, reset_results
from simsweep.harness.context import HarnessContext
from simsweep.harness.writer import ResultsWriter
from simsweep.models.base import SimulationModel
from simsweep.sampling.distributions import is_nan, sample


class SweepDriver:
    def __init__(
        self,
        resolved: ResolvedSpec,
        model: SimulationModel,
        writer: ResultsWriter,
        ctx: HarnessContext,
    ) -> None:
        self.resolved = resolved
        self.model = model
        self.writer = writer
        self.ctx = ctx
        self.keys = resolved.keys

        self.random = resolved.random
        self.swept = resolved.swept
        # One slot per parameter, in declaration order.
        self.table: dict[str, str] = {p.name: p.initial for p in resolved.params}
        self.param_rng = np.random.default_rng(self.keys.seed)

        self._leaves = 0
        self._runs = 0

    def run(self) -> SweepStats:
        iterations = max(self.keys.iters, 1)
        for _ in range(iterations):
            self.draw_random()
            if self.swept:
                self._sweep(0)
            else:
                self.test()

        stats = SweepStats(iterations=iterations, leaves=self._leaves, runs=self._runs)
        self.ctx.logger.info(
            "sweep_finished",
            extra={"iterations": stats.iterations, "leaves": stats.leaves, "runs": stats.runs},
        )
        return stats

    def draw_random(self) -> None:
        for p in self.random:
            draw = sample(p.code or "", self.param_rng)
            if is_nan(draw):
                # keep the previous value; bind reports the code again per run
                self.ctx.logger.warning("random_parameter_malformed", extra={"field": p.name, "code": p.code})
                continue
            self.table[p.name] = format_value(draw)

    def _sweep(self, depth: int) -> None:
        p = self.swept[depth]
        for value in p.values:
            self.table[p.name] = value
            if depth + 1 < len(self.swept):
                self._sweep(depth + 1)
            else:
                self.test()

    def prefix(self) -> tuple[str, ...]:
        return tuple(self.table[p.name] for p in self.random) + tuple(self.table[p.name] for p in self.swept)

    def test(self) -> None:
        """All replications of the current parameter table."""

        self._leaves += 1
        prefix = self.prefix()
        self.ctx.logger.debug("sweep_leaf_started", extra={"leaf": self._leaves, "values": list(prefix)})

        per_replication = self.ctx.config.rebind == "replication"
        for i in range(self.keys.reps):
            run = RunContext(seed=self.keys.seed + i, prefix=prefix, replication=i)
            self.model.reseed(run.seed)
            reset_results(self.model, self.resolved.results)
            if per_replication or i == 0:
                bind_all(self.model, self.table, self.model.rng, self.ctx.logger)
            self._run_once(run)

    def _run_once(self, run: RunContext) -> None:
        keys = self.keys
        model = self.model
        model.start()
        while model.steps < keys.steps:
            step = model.steps
            if keys.testint > 0 and step >= keys.teststart and step % keys.testint == 0:
                self.writer.write(run)
            if not model.step():
                break
        self.writer.write(run, end=True)
        model.finish()
        self._runs += 1
