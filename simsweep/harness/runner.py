"""simsweep.harness.runner

Harness facade: one object per spec, four ways to use it.

Modes:
- template: no spec, write an editable skeleton for the model
- run: resolve a spec file, sweep it, write every results channel
- split: resolve a spec file and partition it into smaller spec files
- exec: positional values for the model's parameters instead of a file

With `*gui = 1` a run only binds the base values onto the model and hands it
back for interactive use.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from simsweep.core.config import KeyParams
from simsweep.core.exceptions import MissingKeyParameterError
from simsweep.core.types import ResolvedSpec, SweepStats
from simsweep.harness.binding import bind_all, reset_results
from simsweep.harness.context import HarnessContext
from simsweep.harness.resolver import resolve_args, resolve_file
from simsweep.harness.split import split_file
from simsweep.harness.sweep import SweepDriver
from simsweep.harness.template import write_template
from simsweep.harness.writer import ResultsWriter
from simsweep.models.base import SimulationModel


class Harness:
    def __init__(self, model: SimulationModel, resolved: ResolvedSpec, ctx: HarnessContext | None = None) -> None:
        self.model = model
        self.resolved = resolved
        self.ctx = ctx or HarnessContext.default()

    @classmethod
    def from_file(cls, path: str | Path, model: SimulationModel, ctx: HarnessContext | None = None) -> Harness:
        ctx = ctx or HarnessContext.default()
        return cls(model, resolve_file(path, model, ctx), ctx)

    @classmethod
    def from_args(
        cls,
        values: Sequence[str],
        model: SimulationModel,
        ctx: HarnessContext | None = None,
        *,
        keys: KeyParams | None = None,
    ) -> Harness:
        ctx = ctx or HarnessContext.default()
        return cls(model, resolve_args(model, values, ctx, keys=keys), ctx)

    @property
    def keys(self) -> KeyParams:
        return self.resolved.keys

    def base_values(self) -> dict[str, str]:
        return {p.name: p.initial for p in self.resolved.params}

    def bind_base(self) -> SimulationModel:
        """Seed the model and bind the first value of every parameter."""

        self.model.reseed(self.keys.seed)
        reset_results(self.model, self.resolved.results)
        bind_all(self.model, self.base_values(), self.model.rng, self.ctx.logger)
        return self.model

    def run(self) -> SweepStats | None:
        """Sweep and write results. None in interactive mode, where nothing is run."""

        if self.keys.gui:
            self.bind_base()
            self.ctx.logger.info("interactive_mode", extra={"model": self.model.name})
            return None

        missing = self.keys.missing_mandatory()
        if missing:
            raise MissingKeyParameterError(f"Key parameters must be set: {', '.join('*' + k for k in missing)}")

        self.ctx.logger.info(
            "sweep_started",
            extra={
                "model": self.model.name,
                "seed": self.keys.seed,
                "iters": self.keys.iters,
                "reps": self.keys.reps,
                "steps": self.keys.steps,
            },
        )
        with ResultsWriter(self.resolved, self.model, self.ctx) as writer:
            return SweepDriver(self.resolved, self.model, writer, self.ctx).run()

    def split(
        self,
        split_params: Sequence[str],
        split_keys: Sequence[str],
        out_dir: str | Path | None = None,
    ) -> list[Path]:
        return split_file(self.resolved, split_params, split_keys, self.ctx, out_dir=out_dir)


def emit_template(model: SimulationModel, ctx: HarnessContext | None = None, path: str | Path | None = None) -> Path:
    ctx = ctx or HarnessContext.default()
    cfg = ctx.config
    target = Path(path) if path is not None else Path(cfg.output_dir) / cfg.template_name
    written = write_template(model, target, auto_params=cfg.auto_params, auto_results=cfg.auto_results)
    ctx.logger.info("template_written", extra={"path": str(written), "model": model.name})
    return written
