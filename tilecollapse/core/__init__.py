"""Core domain models for tilecollapse.

Tiles, directions and the constraint table. No generation state lives here.

Usage:
    from tilecollapse.core import TileCatalog, ConstraintTable, Direction
"""

# Types
from .types import TileId, Direction, Position

# Catalog and constraints
from .catalog import Tile, TileCatalog
from .constraints import ConstraintTable

# Errors
from .errors import (
    TileCollapseError,
    DuplicateTileError,
    UnknownTileError,
    OutOfBoundsError,
    CatalogFrozenError,
    ConstraintTableFrozenError,
    IncompleteGridError,
    RuleFileError,
)

__all__ = [
    # Types
    "TileId",
    "Direction",
    "Position",
    # Catalog and constraints
    "Tile",
    "TileCatalog",
    "ConstraintTable",
    # Errors
    "TileCollapseError",
    "DuplicateTileError",
    "UnknownTileError",
    "OutOfBoundsError",
    "CatalogFrozenError",
    "ConstraintTableFrozenError",
    "IncompleteGridError",
    "RuleFileError",
]
