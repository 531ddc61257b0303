"""Grid generation for tilecollapse."""

from .generate import generate
from .wfc import CollapseEngine, EngineState, GenerationResult, Grid

__all__ = [
    "generate",
    "CollapseEngine",
    "EngineState",
    "GenerationResult",
    "Grid",
]
