"""tilecollapse - tile grid generation with Wave Function Collapse.

Load a tile catalog and adjacency rules, collapse a grid so every pair of
neighbors obeys the rules, and render the result.

Usage:
    from tilecollapse import load_ruleset, generate, save_image

    rules = load_ruleset("rules.wfcin")
    result = generate(rules.catalog, rules.table, width=20, height=20, seed=1)
    if result.complete:
        save_image(result, rules.catalog, "output.png")
"""

__version__ = "0.1.0"

from .core import (
    TileId,
    Direction,
    Position,
    Tile,
    TileCatalog,
    ConstraintTable,
    TileCollapseError,
    DuplicateTileError,
    UnknownTileError,
    OutOfBoundsError,
    IncompleteGridError,
    RuleFileError,
)
from .generation import generate, CollapseEngine, EngineState, GenerationResult, Grid
from .adapters import RuleSet, load_ruleset, render_image, save_image, render_text

__all__ = [
    "__version__",
    "TileId",
    "Direction",
    "Position",
    "Tile",
    "TileCatalog",
    "ConstraintTable",
    "TileCollapseError",
    "DuplicateTileError",
    "UnknownTileError",
    "OutOfBoundsError",
    "IncompleteGridError",
    "RuleFileError",
    "generate",
    "CollapseEngine",
    "EngineState",
    "GenerationResult",
    "Grid",
    "RuleSet",
    "load_ruleset",
    "render_image",
    "save_image",
    "render_text",
]
