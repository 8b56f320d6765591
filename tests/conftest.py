from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from simsweep.core.config import HarnessConfig  # noqa: E402
from simsweep.harness.context import HarnessContext  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def harness_config(temp_dir: Path) -> HarnessConfig:
    """Config that points output_dir to a temp directory."""

    c = HarnessConfig.from_yaml(REPO_ROOT / "config" / "default.yaml")
    return c.model_copy(update={"output_dir": temp_dir / "out"})


@pytest.fixture()
def harness_ctx(harness_config: HarnessConfig) -> HarnessContext:
    return HarnessContext(config=harness_config, logger=logging.getLogger("simsweep.test"))


@pytest.fixture()
def spec_file(temp_dir: Path) -> Callable[..., Path]:
    """Write spec lines to a file in temp_dir and return its path."""

    def _write(*lines: str, name: str = "spec.txt") -> Path:
        p = temp_dir / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _write


@pytest.fixture(autouse=True)
def _reset_cli_logging() -> Iterator[None]:
    """CLI tests install a stderr handler; drop it so later tests don't write to a closed capture."""

    yield
    root = logging.getLogger("simsweep")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.NOTSET)
