from __future__ import annotations

import csv
import logging
from pathlib import Path

import pytest

from simsweep.core.exceptions import OutputFileError
from simsweep.core.types import RunContext
from simsweep.harness.context import HarnessContext
from simsweep.harness.resolver import resolve_lines
from simsweep.harness.runner import Harness
from simsweep.harness.writer import ResultsWriter
from simsweep.models.contagion import ContagionModel
from simsweep.models.template import TemplateModel

SPEC = [
    "*fname = run_",
    "*steps = 3",
    "*testint = 1",
    "a = 1 2",
    "b = U(0,1)",
]


def _rows(path: Path, sep: str = ",") -> tuple[list[str], list[list[str]]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    comments = [ln for ln in lines if ln.startswith("%")]
    body = [ln for ln in lines if not ln.startswith("%")]
    return comments, list(csv.reader(body, delimiter=sep))


def _run(lines: list[str], ctx: HarnessContext) -> Path:
    model = TemplateModel()
    Harness(model, resolve_lines(lines, model, ctx), ctx).run()
    return Path(ctx.config.output_dir)


def test_header_layout(harness_ctx: HarnessContext) -> None:
    out = _run(SPEC, harness_ctx)
    comments, rows = _rows(out / "run_endresults.txt")

    assert comments[0] == "% Base Parameters: a = 1, b = U(0,1)"
    assert comments[1:5] == ["% Random Parameters:", "%b = U(0,1)", "% Test Parameters:", "%a = [1, 2]"]
    assert comments[5] == "% ,Random Parameters,Test Parameters,Results"
    assert rows[0] == ["Seed", "b", "a", "total"]


def test_timecourse_labels_and_gate(harness_ctx: HarnessContext) -> None:
    out = _run(SPEC, harness_ctx)
    comments, rows = _rows(out / "run_timeresults.txt")
    assert comments[-1] == "% ,,Random Parameters,Test Parameters,Results"
    assert rows[0] == ["Seed", "Timestep", "b", "a", "total"]
    # steps 0, 1, 2 while running, then step 3 at the end; for both leaves
    assert [r[1] for r in rows[1:]] == ["0", "1", "2", "3"] * 2


def test_end_rows_one_per_run(harness_ctx: HarnessContext) -> None:
    out = _run(SPEC, harness_ctx)
    _, rows = _rows(out / "run_endresults.txt")
    body = rows[1:]
    assert len(body) == 2
    assert [r[2] for r in body] == ["1", "2"]
    # total = a * steps
    assert [r[3] for r in body] == ["3", "6"]
    assert body[0][1] == body[1][1]


def test_every_row_matches_header_width(harness_ctx: HarnessContext) -> None:
    out = _run(SPEC, harness_ctx)
    for name in ("run_endresults.txt", "run_timeresults.txt"):
        _, rows = _rows(out / name)
        assert {len(r) for r in rows} == {len(rows[0])}


def test_teststart_and_testint(harness_ctx: HarnessContext) -> None:
    out = _run(["*steps = 5", "*testint = 2", "*teststart = 1", "a = 1"], harness_ctx)
    _, rows = _rows(out / "timeresults.txt")
    assert [r[1] for r in rows[1:]] == ["2", "4", "5"]


def test_custom_separator(harness_ctx: HarnessContext) -> None:
    out = _run(["*sep = ;", *SPEC], harness_ctx)
    _, rows = _rows(out / "run_endresults.txt", sep=";")
    assert rows[0] == ["Seed", "b", "a", "total"]


def test_channels_open_only_when_needed(harness_ctx: HarnessContext) -> None:
    model = ContagionModel()
    lines = ["infected_ids", "*agentInfo = state infected", "*edgeList = contacts"]
    w = ResultsWriter(resolve_lines(lines, model, harness_ctx), model, harness_ctx)
    assert [c.suffix for c in w.channels] == [
        "endresults",
        "timeresults",
        "agentresults",
        "listresults",
        "agentlistresults",
        "contactsedgelist",
    ]

    bare = TemplateModel()
    w = ResultsWriter(resolve_lines([], bare, harness_ctx), bare, harness_ctx)
    assert [c.suffix for c in w.channels] == ["endresults", "timeresults"]


def test_unknown_network_is_logged_and_skipped(harness_ctx: HarnessContext, caplog: pytest.LogCaptureFixture) -> None:
    model = TemplateModel()
    resolved = resolve_lines(["*edgeList = bogus", "*fname = n_"], model, harness_ctx)
    with caplog.at_level(logging.WARNING):
        with ResultsWriter(resolved, model, harness_ctx) as w:
            model.start()
            w.write(RunContext(seed=0, prefix=()))
    assert "network_export_failed" in caplog.messages
    _, rows = _rows(Path(harness_ctx.config.output_dir) / "n_bogusedgelist.txt")
    assert rows == [["Seed", "Timestep", "From", "To", "Info"]]


def test_output_not_creatable(harness_ctx: HarnessContext, temp_dir: Path) -> None:
    blocker = temp_dir / "file"
    blocker.write_text("x", encoding="utf-8")
    cfg = harness_ctx.config.model_copy(update={"output_dir": blocker / "sub"})
    ctx = HarnessContext(config=cfg, logger=harness_ctx.logger)
    model = TemplateModel()
    with pytest.raises(OutputFileError):
        ResultsWriter(resolve_lines([], model, ctx), model, ctx).open()
