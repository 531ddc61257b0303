"""
Grid representation for Wave Function Collapse.

The Grid is the "wave function" - a 2D array of cells where each cell
is in superposition (multiple candidate tiles) until it collapses to a
single definite tile.

This is where we track the state of the generation process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from tilecollapse.core.catalog import TileCatalog
from tilecollapse.core.errors import OutOfBoundsError
from tilecollapse.core.types import Direction, Position, TileId


@dataclass(eq=False)
class Cell:
    """
    A single cell in the WFC grid.

    Before collapse: holds a set of candidate tile IDs
    After collapse: holds exactly one tile ID, recorded in `tile_id`

    A cell with one candidate is not collapsed until it is resolved; a cell
    with zero candidates is in conflict.
    """
    x: int
    y: int
    candidates: set[TileId] = field(default_factory=set)
    collapsed: bool = False
    tile_id: TileId | None = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def entropy(self) -> int:
        """
        How uncertain this cell is.

        Simple count of candidates.
        Lower = more constrained = should be collapsed first.
        """
        return len(self.candidates)

    @property
    def conflicted(self) -> bool:
        """An uncollapsed cell with nothing left to choose from."""
        return not self.collapsed and not self.candidates

    def sorted_candidates(self) -> list[TileId]:
        return sorted(self.candidates)

    def constrain_to(self, allowed: set[TileId]) -> bool:
        """
        Constrain this cell to only the given candidates.

        Returns True if the cell changed (lost candidates).
        """
        old_count = len(self.candidates)
        self.candidates &= allowed
        return len(self.candidates) < old_count

    def __repr__(self) -> str:
        if self.collapsed:
            return f"Cell({self.x}, {self.y}, tile={self.tile_id})"
        return f"Cell({self.x}, {self.y}, candidates={self.sorted_candidates()})"


class Grid:
    """
    The 2D grid of cells representing the wave function.

    Initially all cells can be any tile (maximum superposition).
    As the algorithm runs, cells collapse and constrain their neighbors
    until every cell has exactly one tile, or some cell runs out of options.
    """

    def __init__(self, width: int, height: int, catalog: TileCatalog):
        """
        Create a grid with all cells in maximum superposition.

        Args:
            width: Number of cells horizontally
            height: Number of cells vertically
            catalog: Tiles available to every cell

        Raises:
            ValueError: If width or height is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.catalog = catalog
        self._tile_ids = frozenset(catalog.ids())

        # cells[y][x], row-major
        self.cells: list[list[Cell]] = [
            [
                Cell(x=x, y=y, candidates=set(self._tile_ids))
                for x in range(width)
            ]
            for y in range(height)
        ]

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Get cell at position.

        Raises:
            OutOfBoundsError: If (x, y) is outside the grid
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(Position(x, y), self.width, self.height)
        return self.cells[y][x]

    def neighbor(self, x: int, y: int, direction: Direction) -> Cell | None:
        """Get the cell next to (x, y) in the given direction.

        Returns None at the grid edge.

        Raises:
            OutOfBoundsError: If (x, y) itself is outside the grid
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(Position(x, y), self.width, self.height)
        nx, ny = x + direction.dx, y + direction.dy
        if self.in_bounds(nx, ny):
            return self.cells[ny][nx]
        return None

    def neighbors(self, cell: Cell) -> Iterator[tuple[Cell, Direction]]:
        """
        Yield all in-bounds neighbors of a cell with their directions.

        Direction is FROM the input cell TO the neighbor.
        e.g., (neighbor_cell, Direction.NORTH) means neighbor is north of cell.
        """
        for direction in Direction:
            neighbor = self.neighbor(cell.x, cell.y, direction)
            if neighbor is not None:
                yield neighbor, direction

    def resolve(self, cell: Cell, tile_id: TileId) -> None:
        """
        Collapse a cell to one of its candidates.

        Both the engine's random collapse and the propagator's forced
        collapse go through here.

        Raises:
            ValueError: If the cell is already collapsed or tile_id is not a candidate
        """
        if cell.collapsed:
            raise ValueError(f"{cell!r} is already collapsed")
        if tile_id not in cell.candidates:
            raise ValueError(f"Tile {tile_id} is not a candidate of {cell!r}")
        cell.candidates = {tile_id}
        cell.tile_id = tile_id
        cell.collapsed = True

    def lowest_entropy_cell(self) -> Position | None:
        """
        Find the uncollapsed cell with minimum entropy (fewest candidates).

        Cells with no candidates are skipped. Ties go to the first cell in
        row-major order, so the same grid state always gives the same answer.

        Returns None if no uncollapsed cell has a candidate left: either the
        grid is complete or every remaining cell is in conflict.
        """
        best: Cell | None = None

        for row in self.cells:
            for cell in row:
                if cell.collapsed or not cell.candidates:
                    continue
                if best is None or cell.entropy < best.entropy:
                    best = cell

        return best.position if best is not None else None

    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return all(cell.collapsed for cell in self.all_cells())

    def conflicted_cells(self) -> list[Cell]:
        """Uncollapsed cells with no candidates, in row-major order."""
        return [cell for cell in self.all_cells() if cell.conflicted]

    def collapsed_count(self) -> int:
        return sum(1 for cell in self.all_cells() if cell.collapsed)

    def total_candidates(self) -> int:
        """Sum of candidate counts over every cell."""
        return sum(cell.entropy for cell in self.all_cells())

    def tile_ids(self) -> list[list[TileId]]:
        """
        Resolved tile IDs indexed as [y][x].

        Raises:
            ValueError: If any cell is not collapsed
        """
        if not self.is_complete():
            raise ValueError("Grid is not complete")
        return [[cell.tile_id for cell in row] for row in self.cells]

    def all_cells(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order."""
        for row in self.cells:
            yield from row
