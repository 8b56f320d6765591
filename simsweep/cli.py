"""simsweep.cli

Command line interface entry point for simsweep.

Design constraints:
- argparse-based.
- Lazy imports: models are only discovered once a command needs one.
- Harness errors become one `error:` line and exit code 1; usage errors exit 2.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simsweep.harness.context import HarnessContext
    from simsweep.models.base import SimulationModel

EPILOG = "Spec lines: `name = value`, `name = v1 v2 v3`, `name = U(0,1)`, or `name =` to collect."


@dataclass(frozen=True)
class CliContext:
    work_dir: Path


def _work_dir_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--model", default="contagion", help="Registered model name (default: contagion).")
    common.add_argument("--config", type=Path, default=None, help="YAML harness config.")

    parser = argparse.ArgumentParser(
        prog="simsweep",
        description="Declarative parameter sweeps over discrete-event simulations.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_tpl = sub.add_parser("template", parents=[common], help="Write an editable spec skeleton for a model")
    p_tpl.add_argument("--output", type=Path, default=None, help="Where to write (default: <output_dir>/inputTemplate.txt).")

    p_run = sub.add_parser("run", parents=[common], help="Resolve a spec file, sweep it and write results")
    p_run.add_argument("spec", type=Path)

    p_split = sub.add_parser("split", parents=[common], help="Split a spec file by the values of swept parameters")
    p_split.add_argument("spec", type=Path)
    p_split.add_argument(
        "--by",
        action="append",
        default=[],
        metavar="PARAM=KEY",
        help="Split on PARAM, prefixing file names with KEY<value>. Repeatable; first is outermost.",
    )
    p_split.add_argument("--out-dir", type=Path, default=None, help="Directory for the pieces (default: beside SPEC).")

    p_exec = sub.add_parser("exec", parents=[common], help="Run with positional parameter values instead of a file")
    p_exec.add_argument("values", nargs="*", help="One value per declared parameter, in order.")
    p_exec.add_argument(
        "--key",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a key parameter (steps, reps, testint, ...). Repeatable.",
    )

    sub.add_parser("models", help="List registered models")

    return parser


def _print_version() -> None:
    from simsweep import __version__

    print(f"simsweep v{__version__}")


def _pairs(items: list[str], what: str) -> list[tuple[str, str]] | None:
    out: list[tuple[str, str]] = []
    for item in items:
        name, eq, value = item.partition("=")
        if not eq or not name.strip():
            print(f"error: expected {what}, got {item!r}", file=sys.stderr)
            return None
        out.append((name.strip(), value.strip()))
    return out


def _setup(args: argparse.Namespace) -> tuple[HarnessContext, SimulationModel] | int:
    """Config, logging and a fresh model, or the exit code after printing why not."""

    from simsweep.core.config import HarnessConfig
    from simsweep.core.exceptions import ConfigError
    from simsweep.core.log import configure_logging
    from simsweep.harness.context import HarnessContext
    from simsweep.models.registry import get_model

    try:
        config = HarnessConfig.load(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    try:
        model_cls = get_model(args.model)
    except KeyError:
        from simsweep.models.registry import list_models

        print(f"error: unknown model {args.model!r} (have: {', '.join(list_models())})", file=sys.stderr)
        return 2

    return HarnessContext.default(config), model_cls()


def _cmd_template(ctx: CliContext, args: argparse.Namespace) -> int:
    from simsweep.core.exceptions import SimsweepError
    from simsweep.harness.runner import emit_template

    setup = _setup(args)
    if isinstance(setup, int):
        return setup
    hctx, model = setup

    try:
        path = emit_template(model, hctx, args.output)
    except SimsweepError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(f"template written: {path}")
    return 0


def _cmd_run(ctx: CliContext, args: argparse.Namespace) -> int:
    from simsweep.core.exceptions import SimsweepError
    from simsweep.harness.runner import Harness

    setup = _setup(args)
    if isinstance(setup, int):
        return setup
    hctx, model = setup

    try:
        stats = Harness.from_file(ctx.work_dir / args.spec, model, hctx).run()
    except SimsweepError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if stats is None:
        print("interactive mode: base parameters bound, nothing run")
    else:
        print(f"runs: {stats.runs} (iterations: {stats.iterations}, combinations per iteration: {stats.leaves // stats.iterations})")
    return 0


def _cmd_split(ctx: CliContext, args: argparse.Namespace) -> int:
    from simsweep.core.exceptions import SimsweepError
    from simsweep.harness.runner import Harness

    pairs = _pairs(list(args.by), "PARAM=KEY")
    if pairs is None:
        return 2
    if not pairs:
        print("error: at least one --by PARAM=KEY is required", file=sys.stderr)
        return 2

    setup = _setup(args)
    if isinstance(setup, int):
        return setup
    hctx, model = setup

    try:
        harness = Harness.from_file(ctx.work_dir / args.spec, model, hctx)
        written = harness.split([p for p, _ in pairs], [k for _, k in pairs], out_dir=args.out_dir)
    except SimsweepError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for p in written:
        print(p)
    return 0


def _cmd_exec(ctx: CliContext, args: argparse.Namespace) -> int:
    from simsweep.core.exceptions import SimsweepError
    from simsweep.harness.binding import bind_key
    from simsweep.harness.runner import Harness

    pairs = _pairs(list(args.key), "NAME=VALUE")
    if pairs is None:
        return 2

    setup = _setup(args)
    if isinstance(setup, int):
        return setup
    hctx, model = setup

    keys = hctx.config.defaults.model_copy()
    for name, value in pairs:
        bind_key(keys, name.lstrip("*"), value, hctx.logger)

    try:
        stats = Harness.from_args(list(args.values), model, hctx, keys=keys).run()
    except SimsweepError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if stats is not None:
        print(f"runs: {stats.runs}")
    return 0


def _cmd_models(ctx: CliContext, args: argparse.Namespace) -> int:
    from simsweep.models.registry import get_model, list_models

    for name in list_models():
        doc = (get_model(name).__doc__ or "").strip().splitlines()
        print(f"{name}\t{doc[0] if doc else ''}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(work_dir=_work_dir_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "template": _cmd_template,
        "run": _cmd_run,
        "split": _cmd_split,
        "exec": _cmd_exec,
        "models": _cmd_models,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    return int(fn(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
