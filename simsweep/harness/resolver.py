"""simsweep.harness.resolver

Spec files into parameter declarations.

Line grammar:
- blank lines and lines starting with `%` are comments; text after an
  unescaped `%` is dropped (`\\%` is a literal percent sign)
- `name` or `name =` (nothing after `=`) declares a result to collect
- `*agentInfo = a b c` declares per-agent results
- `*edgeList = net1 net2` declares networks to export as edge lists
- `*key = value` with a reserved key sets a harness setting
- `name = value` declares a parameter; `classify` decides its role

Declaration order is the column order of every results file.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from simsweep.core.config import KEY_PARAMS, KeyParams
from simsweep.core.exceptions import ArgumentError, DuplicateParameterError, InputFileError
from simsweep.core.types import FieldKind, ParameterSpec, ResolvedSpec, Role
from simsweep.harness.binding import bind_key
from simsweep.harness.context import HarnessContext
from simsweep.models.base import SimulationModel
from simsweep.sampling.distributions import parse_code

AGENT_INFO = "*agentInfo"
EDGE_LIST = "*edgeList"

_RESERVED = frozenset(KEY_PARAMS)


def strip_comment(line: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line) and line[i + 1] == "%":
            out.append("%")
            i += 2
            continue
        if ch == "%":
            break
        out.append(ch)
        i += 1
    return "".join(out)


def classify(name: str, value: str) -> ParameterSpec:
    """RANDOM if `value` is a distribution code, SWEPT if it holds several tokens, else FIXED."""

    value = value.strip()
    if parse_code(value) is not None:
        return ParameterSpec(name=name, raw=value, role=Role.RANDOM, initial=value, code=value)

    tokens = value.split()
    if not tokens:
        raise ValueError(f"empty value for parameter {name}")
    if len(tokens) > 1:
        return ParameterSpec(name=name, raw=value, role=Role.SWEPT, initial=tokens[0], values=tuple(tokens))
    return ParameterSpec(name=name, raw=value, role=Role.FIXED, initial=tokens[0])


def _is_reserved(key: str) -> bool:
    return key.startswith("*") and key[1:] in _RESERVED


def _append_unique(items: list[str], name: str) -> None:
    if name not in items:
        items.append(name)


def resolve_lines(
    lines: Iterable[str],
    model: SimulationModel,
    ctx: HarnessContext,
    *,
    source: Path | None = None,
) -> ResolvedSpec:
    keys: KeyParams = ctx.config.defaults.model_copy()
    params: list[ParameterSpec] = []
    seen: set[str] = set()

    file_results: list[str] = []
    agent_results: list[str] = []
    agent_lists: list[str] = []
    networks: list[str] = []

    agent_fields = model.agent_fields()

    for lineno, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip().startswith("%"):
            continue

        body = strip_comment(line)
        key, _, value = body.partition("=")
        key = key.strip()
        value = value.strip()
        if not key:
            if value:
                ctx.logger.warning("spec_line_ignored", extra={"line": lineno})
            continue

        if not value:
            # Unfilled settings keep their defaults instead of becoming result columns.
            if _is_reserved(key) or key in (AGENT_INFO, EDGE_LIST):
                continue
            if ctx.config.auto_results:
                _append_unique(file_results, key)
            continue

        if key == AGENT_INFO:
            for r in value.split():
                if agent_fields.is_list(r):
                    _append_unique(agent_lists, r)
                else:
                    _append_unique(agent_results, r)
        elif key == EDGE_LIST:
            for n in value.split():
                _append_unique(networks, n)
        elif _is_reserved(key):
            bind_key(keys, key[1:], value, ctx.logger)
        else:
            if key in seen:
                raise DuplicateParameterError(f"parameter declared twice: {key} (line {lineno})")
            seen.add(key)
            params.append(classify(key, value))

    results, list_results = _split_results(model, file_results)
    return ResolvedSpec(
        params=params,
        keys=keys,
        results=results,
        list_results=list_results,
        agent_results=agent_results,
        agent_lists=agent_lists,
        networks=networks,
        file_results=file_results,
        source=source,
    )


def _split_results(model: SimulationModel, file_results: Sequence[str]) -> tuple[list[str], list[str]]:
    """Model-declared results first, then the file's; list-valued fields go to their own channel."""

    fields = model.fields()
    scalars: list[str] = []
    lists: list[str] = []
    _, declared = model.declare_names()
    for r in [*declared, *file_results]:
        if fields.kind(r) is FieldKind.LIST:
            _append_unique(lists, r)
        else:
            _append_unique(scalars, r)
    return scalars, lists


def resolve_file(path: str | Path, model: SimulationModel, ctx: HarnessContext) -> ResolvedSpec:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InputFileError(f"Input file not found: {p}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(f"Problem reading input file {p}: {e}") from e

    resolved = resolve_lines(text.splitlines(), model, ctx, source=p)
    ctx.logger.info(
        "spec_resolved",
        extra={
            "source": str(p),
            "params": len(resolved.params),
            "swept": len(resolved.swept),
            "random": len(resolved.random),
        },
    )
    return resolved


def positional_names(model: SimulationModel, auto_params: bool) -> list[str]:
    """Declared parameters, then (with auto_params) every other scalar field that is not a result."""

    declared, results = model.declare_names()
    names = list(declared)
    if auto_params:
        for n in model.fields().names():
            kind = model.fields().kind(n)
            if kind is None or not kind.is_scalar or n in results:
                continue
            _append_unique(names, n)
    return names


def resolve_args(
    model: SimulationModel,
    values: Sequence[str],
    ctx: HarnessContext,
    *,
    names: Sequence[str] | None = None,
    keys: KeyParams | None = None,
) -> ResolvedSpec:
    """Positional values for the model's parameters, in declared order."""

    names = list(names) if names is not None else positional_names(model, ctx.config.auto_params)
    if len(values) < len(names):
        raise ArgumentError(f"Not enough arguments: {len(names)} parameters ({', '.join(names)}), got {len(values)} values")

    blank = [n for n, v in zip(names, values) if not v.strip()]
    if blank:
        raise ArgumentError(f"Empty value for: {', '.join(blank)}")

    params = [classify(n, v) for n, v in zip(names, values)]
    results, list_results = _split_results(model, [])
    return ResolvedSpec(
        params=params,
        keys=keys or ctx.config.defaults.model_copy(),
        results=results,
        list_results=list_results,
    )
