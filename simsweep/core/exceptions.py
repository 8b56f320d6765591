"""simsweep.core.exceptions

Exception hierarchy rooted at SimsweepError.

Fatal conditions raise one of these. Recoverable ones (a malformed draw, an
unknown field) are logged and never raise.
"""

from __future__ import annotations


class SimsweepError(Exception):
    """Base exception for simsweep."""


class ConfigError(SimsweepError):
    """Configuration is missing, invalid, or inconsistent."""


class InputFileError(SimsweepError):
    """An input file (spec file, network file) is missing or unreadable."""


class OutputFileError(SimsweepError):
    """A results file could not be created or written."""


class ArgumentError(SimsweepError):
    """Positional arguments do not match what the model declares."""


class MissingKeyParameterError(ConfigError):
    """steps, reps and testint must be set unless running interactively."""


class DuplicateParameterError(ConfigError):
    """Same parameter declared twice. Column order would be ambiguous."""
