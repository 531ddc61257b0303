"""Wave Function Collapse engine for tile grids."""

from .grid import Grid, Cell
from .choice import ChoiceSource, SeededChoice, FixedChoice
from .propagate import propagate, propagate_pass, is_compatible
from .solver import CollapseEngine, EngineState, GenerationResult

__all__ = [
    "Grid",
    "Cell",
    "ChoiceSource",
    "SeededChoice",
    "FixedChoice",
    "propagate",
    "propagate_pass",
    "is_compatible",
    "CollapseEngine",
    "EngineState",
    "GenerationResult",
]
