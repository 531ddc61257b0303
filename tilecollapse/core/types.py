"""Foundational types for tilecollapse.

This module defines the core types used throughout the system:
- TileId: Integer identity of a tile within a catalog
- Direction: The four cardinal directions with grid offsets
- Position: Grid coordinates (x, y)
"""

from __future__ import annotations

from enum import Enum
from typing import NewType, NamedTuple

# Tiles are referenced by ID everywhere except the catalog
TileId = NewType("TileId", int)


class Direction(Enum):
    """Cardinal directions for adjacency rules.

    Coordinate system matches row-major storage:
    - x increases to the east (right)
    - y increases to the south (down)
    - (0, 0) is the north-west corner of the grid
    """

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (dx, dy) offset for this direction."""
        return _DIRECTION_OFFSETS[self]

    @property
    def dx(self) -> int:
        return _DIRECTION_OFFSETS[self][0]

    @property
    def dy(self) -> int:
        return _DIRECTION_OFFSETS[self][1]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction.

        If tile A allows tile B to its EAST, B sits to the WEST of A.
        """
        return _DIRECTION_OPPOSITES[self]

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Parse a direction name, case-insensitive.

        Raises:
            ValueError: If the text is not a direction name
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid direction: {text!r}") from None


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


class Position(NamedTuple):
    """A position in the grid."""

    x: int
    y: int

    def __add__(self, other: object) -> Position:
        """Add a direction offset or tuple to this position."""
        if isinstance(other, Direction):
            dx, dy = other.offset
            return Position(self.x + dx, self.y + dy)
        if isinstance(other, tuple) and len(other) == 2:
            return Position(self.x + other[0], self.y + other[1])
        return NotImplemented

    def neighbor(self, direction: Direction) -> Position:
        """Get the adjacent position in the given direction."""
        return self + direction

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
