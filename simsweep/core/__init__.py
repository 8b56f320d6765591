"""simsweep.core

Config, errors, logging and the value types shared by the harness and models.
Nothing here imports from the rest of simsweep.
"""

from .config import KEY_PARAMS, HarnessConfig, KeyParams
from .exceptions import SimsweepError
from .types import FieldKind, ParameterSpec, ResolvedSpec, Role

__all__ = [
    "KEY_PARAMS",
    "FieldKind",
    "HarnessConfig",
    "KeyParams",
    "ParameterSpec",
    "ResolvedSpec",
    "Role",
    "SimsweepError",
]
