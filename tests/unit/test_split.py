from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from simsweep.core.exceptions import ArgumentError, ConfigError
from simsweep.core.types import ResolvedSpec, Role
from simsweep.harness.context import HarnessContext
from simsweep.harness.resolver import resolve_file
from simsweep.harness.split import split_file
from simsweep.models.template import TemplateModel

LINES = (
    "*steps = 10",
    "*testint = 1",
    "*fname = out",
    "a = 1 2",
    "b = x y z",
    "total",
    "*agentInfo = foo",
)


def _resolved(spec_file: Callable[..., Path], ctx: HarnessContext) -> ResolvedSpec:
    return resolve_file(spec_file(*LINES), TemplateModel(), ctx)


def test_split_on_one_parameter(spec_file: Callable[..., Path], harness_ctx: HarnessContext, temp_dir: Path) -> None:
    written = split_file(_resolved(spec_file, harness_ctx), ["a"], ["a"], harness_ctx)
    assert [p.name for p in written] == ["a1spec.txt", "a2spec.txt"]
    assert all(p.parent == temp_dir for p in written)

    lines = written[0].read_text(encoding="utf-8").splitlines()
    assert "*steps = 10" in lines
    assert "*fname = a1out" in lines
    assert "a = 1" in lines
    assert "b = x y z" in lines
    assert "total =" in lines
    assert "*agentInfo = foo" in lines


def test_pieces_resolve(spec_file: Callable[..., Path], harness_ctx: HarnessContext) -> None:
    written = split_file(_resolved(spec_file, harness_ctx), ["a"], ["a"], harness_ctx)
    piece = resolve_file(written[1], TemplateModel(), harness_ctx)
    a, b = piece.get("a"), piece.get("b")
    assert a is not None and b is not None
    assert a.role is Role.FIXED
    assert a.initial == "2"
    assert b.role is Role.SWEPT
    assert piece.keys.fname == "a2out"
    assert piece.keys.steps == 10


def test_split_on_two_parameters(spec_file: Callable[..., Path], harness_ctx: HarnessContext, temp_dir: Path) -> None:
    out = temp_dir / "pieces"
    written = split_file(_resolved(spec_file, harness_ctx), ["a", "b"], ["a", "b"], harness_ctx, out_dir=out)
    assert [p.name for p in written] == [
        "bxa1spec.txt",
        "bya1spec.txt",
        "bza1spec.txt",
        "bxa2spec.txt",
        "bya2spec.txt",
        "bza2spec.txt",
    ]
    assert all(p.parent == out for p in written)


def test_unknown_split_parameter(spec_file: Callable[..., Path], harness_ctx: HarnessContext) -> None:
    with pytest.raises(ConfigError):
        split_file(_resolved(spec_file, harness_ctx), ["nope"], ["n"], harness_ctx)


def test_key_count_must_match(spec_file: Callable[..., Path], harness_ctx: HarnessContext) -> None:
    with pytest.raises(ArgumentError):
        split_file(_resolved(spec_file, harness_ctx), ["a", "b"], ["a"], harness_ctx)
