"""Exceptions for tilecollapse.

Load-time errors (duplicate or unknown tiles) are recoverable: loaders log
them and continue. Out-of-bounds access is a programming error. A generation
conflict is an outcome, not an exception, and has no class here.
"""

from __future__ import annotations

from pathlib import Path

from .types import Position


class TileCollapseError(Exception):
    """Base exception for tilecollapse errors."""

    pass


class DuplicateTileError(TileCollapseError):
    """A tile name was registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Tile already registered: {name!r}")
        self.name = name


class UnknownTileError(TileCollapseError):
    """A tile name or ID does not exist in the catalog."""

    def __init__(self, tile: str | int):
        super().__init__(f"Unknown tile: {tile!r}")
        self.tile = tile


class OutOfBoundsError(TileCollapseError):
    """Grid accessed outside its dimensions."""

    def __init__(self, position: Position, width: int, height: int):
        super().__init__(
            f"Position {position} is outside the {width}x{height} grid"
        )
        self.position = position


class CatalogFrozenError(TileCollapseError):
    """Tile registered after the catalog was frozen."""

    pass


class ConstraintTableFrozenError(TileCollapseError):
    """Constraint changed after the table was frozen."""

    pass


class IncompleteGridError(TileCollapseError):
    """A layout was requested from a run that did not complete."""

    pass


class RuleFileError(TileCollapseError):
    """A rule file could not be loaded."""

    def __init__(self, message: str, path: Path | str | None = None, line: int | None = None):
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")
        self.path = path
        self.line = line
