"""simsweep.models

Model contract, field registries, the reference Schedule, and bundled models.
"""

from .base import SimModel, SimulationModel
from .fields import FieldRegistry, FieldSpec
from .registry import get_model, list_models, register
from .schedule import Schedule

__all__ = [
    "FieldRegistry",
    "FieldSpec",
    "Schedule",
    "SimModel",
    "SimulationModel",
    "get_model",
    "list_models",
    "register",
]
