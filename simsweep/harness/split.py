"""simsweep.harness.split

One spec file into many, one per combination of values of the chosen swept
parameters. Each piece is a complete spec file that can be run on its own,
for example as a separate cluster job.

Naming: every split parameter contributes `<key><value>` to a prefix. The
prefix goes in front of the source file name and in front of `*fname`, so the
pieces and their results never collide. The first split parameter's segment
sits next to the original name.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from simsweep.core.config import KEY_PARAMS, KeyParams
from simsweep.core.exceptions import ArgumentError, ConfigError, OutputFileError
from simsweep.core.text import format_value
from simsweep.core.types import ResolvedSpec, Role
from simsweep.harness.context import HarnessContext
from simsweep.harness.resolver import AGENT_INFO, EDGE_LIST


def _key_value(keys: KeyParams, name: str) -> str:
    value = getattr(keys, name)
    if name == "sep" and value == "\t":
        return "tab"
    return format_value(value)


def render_piece(resolved: ResolvedSpec, prefix: str, values: dict[str, str], *, auto_results: bool = True) -> str:
    keys = resolved.keys
    lines = [f"*{k} = {_key_value(keys, k)}" for k in KEY_PARAMS if k != "fname"]
    lines.append(f"*fname = {prefix}{keys.fname}")
    for p in resolved.params:
        lines.append(f"{p.name} = {values.get(p.name, p.raw)}")
    if auto_results:
        lines.extend(f"{r} =" for r in resolved.file_results)
    agent_names = [*resolved.agent_results, *resolved.agent_lists]
    if agent_names:
        lines.append(f"{AGENT_INFO} = {' '.join(agent_names)}")
    if resolved.networks:
        lines.append(f"{EDGE_LIST} = {' '.join(resolved.networks)}")
    return "\n".join(lines) + "\n"


def split_file(
    resolved: ResolvedSpec,
    split_params: Sequence[str],
    split_keys: Sequence[str],
    ctx: HarnessContext,
    *,
    out_dir: str | Path | None = None,
) -> list[Path]:
    """Write one spec file per combination of the split parameters' values."""

    if len(split_params) != len(split_keys):
        raise ArgumentError(
            f"Each split parameter needs one key: {len(split_params)} parameters, {len(split_keys)} keys"
        )
    for name in split_params:
        if resolved.get(name) is None:
            raise ConfigError(f"Cannot split on unknown parameter: {name}")

    source = resolved.source
    base_name = source.name if source is not None else "spec.txt"
    target = Path(out_dir) if out_dir is not None else (source.parent if source is not None else Path("."))
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputFileError(f"Cannot create output directory {target}: {e}") from e

    written: list[Path] = []

    def _recurse(depth: int, prefix: str, values: dict[str, str]) -> None:
        if depth == len(split_params):
            path = target / f"{prefix}{base_name}"
            try:
                path.write_text(
                    render_piece(resolved, prefix, values, auto_results=ctx.config.auto_results),
                    encoding="utf-8",
                )
            except OSError as e:
                raise OutputFileError(f"Failed to create input file {path}: {e}") from e
            written.append(path)
            return

        name = split_params[depth]
        spec = resolved.get(name)
        if spec is None:
            return
        tokens = [spec.raw] if spec.role is Role.RANDOM else spec.raw.split()
        for token in tokens:
            _recurse(depth + 1, f"{split_keys[depth]}{token}{prefix}", {**values, name: token})

    _recurse(0, "", {})
    ctx.logger.info("spec_split", extra={"source": str(source), "pieces": len(written)})
    return written
