"""simsweep.core.config

Three config surfaces only:
1) `config/default.yaml` (or any YAML passed with --config)
2) Environment variables prefixed `SIMSWEEP_`
3) `*key = value` lines in the spec file, which override `defaults`

Everything else is derived.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from simsweep.core.exceptions import ConfigError
from simsweep.core.types import FieldKind

# Declared order is also the order of the template and of split files.
KEY_PARAMS: tuple[str, ...] = (
    "seed",
    "sep",
    "steps",
    "iters",
    "reps",
    "fname",
    "testint",
    "teststart",
    "gui",
    "agentint",
    "netint",
    "listint",
)

KEY_PARAM_KINDS: dict[str, FieldKind] = {
    "seed": FieldKind.INT,
    "sep": FieldKind.CHAR,
    "steps": FieldKind.INT,
    "iters": FieldKind.INT,
    "reps": FieldKind.INT,
    "fname": FieldKind.STR,
    "testint": FieldKind.INT,
    "teststart": FieldKind.INT,
    "gui": FieldKind.BOOL,
    "agentint": FieldKind.INT,
    "netint": FieldKind.INT,
    "listint": FieldKind.INT,
}

# Unset (zero) outside interactive mode is fatal.
MANDATORY_KEY_PARAMS: tuple[str, ...] = ("steps", "reps", "testint")

KEY_PARAM_HELP: dict[str, str] = {
    "seed": "random seed of the first replicate of each combination (incremented per replicate)",
    "sep": "separator character for the output files (defaults to comma)",
    "steps": "number of steps each simulation is run for",
    "iters": "number of sets of randomly drawn parameters",
    "reps": "number of simulations run for each combination of parameter values",
    "fname": "beginning of the names of all output files",
    "testint": "how often timecourse data is collected (in steps)",
    "teststart": "step at which timecourse collection starts (defaults to 0)",
    "gui": "bind the first set of parameter values and return without sweeping (defaults to false)",
    "agentint": "how often agent-level data is collected (0 = every timecourse step)",
    "netint": "how often edge lists are written (0 = every timecourse step)",
    "listint": "how often list-type data is written (0 = every timecourse step)",
}


class KeyParams(BaseModel):
    """Harness-level settings addressed with a leading `*` in spec files."""

    seed: int = Field(default=0, ge=0)
    sep: str = ","
    steps: int = Field(default=0, ge=0)
    iters: int = Field(default=1, ge=0)
    reps: int = Field(default=1, ge=0)
    fname: str = ""
    testint: int = Field(default=0, ge=0)
    teststart: int = Field(default=0, ge=0)
    gui: bool = False
    agentint: int = Field(default=0, ge=0)
    netint: int = Field(default=0, ge=0)
    listint: int = Field(default=0, ge=0)

    model_config = {"validate_assignment": True}

    @field_validator("sep", mode="before")
    @classmethod
    def sep_is_one_character(cls, v: Any) -> str:
        s = str(v)
        if s in ("\\t", "tab"):
            return "\t"
        if len(s) != 1:
            raise ValueError(f"sep must be a single character, got {s!r}")
        return s

    def missing_mandatory(self) -> list[str]:
        return [k for k in MANDATORY_KEY_PARAMS if int(getattr(self, k)) == 0]


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class HarnessConfig(BaseSettings):
    """Root configuration. Single source of truth."""

    output_dir: Path = Path(".")
    template_name: str = "inputTemplate.txt"

    # Treat unassigned lines as results, and list registered fields in templates.
    auto_params: bool = True
    auto_results: bool = True

    # Whether parameters are rebound before every replication or once per sweep leaf.
    rebind: Literal["replication", "leaf"] = "replication"

    defaults: KeyParams = Field(default_factory=KeyParams)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "SIMSWEEP_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> HarnessConfig:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must hold a mapping: {path}")

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e

    @classmethod
    def load(cls, path: Path | None = None) -> HarnessConfig:
        if path is None:
            return cls()
        return cls.from_yaml(path)
