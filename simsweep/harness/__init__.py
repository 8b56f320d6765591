"""simsweep.harness

Spec files in, results files out.
"""

from .context import HarnessContext
from .resolver import classify, resolve_args, resolve_file, resolve_lines
from .runner import Harness, emit_template
from .split import split_file
from .sweep import SweepDriver
from .template import render_template, write_template
from .writer import ResultsWriter

__all__ = [
    "Harness",
    "HarnessContext",
    "ResultsWriter",
    "SweepDriver",
    "classify",
    "emit_template",
    "render_template",
    "resolve_args",
    "resolve_file",
    "resolve_lines",
    "split_file",
    "write_template",
]
