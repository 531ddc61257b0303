"""
Constraint propagation for Wave Function Collapse.

After a cell collapses, its uncollapsed neighbors may lose candidates, and
those losses can force further collapses. Propagation repeats full passes
over the grid until a pass changes nothing.

This is local consistency against collapsed neighbors only, not full arc
consistency. A cell may end up with zero candidates; propagation carries on
and the engine notices the conflict when it next looks for a cell.
"""

import logging

from tilecollapse.core.constraints import ConstraintTable
from tilecollapse.core.types import Direction, TileId

from .grid import Cell, Grid

logger = logging.getLogger(__name__)


def is_compatible(
    table: ConstraintTable,
    candidate: TileId,
    direction: Direction,
    neighbor_tile: TileId,
) -> bool:
    """
    Check a candidate against a collapsed neighbor `direction` of it.

    Both rules must hold: the candidate allows the neighbor on that side,
    and the neighbor allows the candidate on the opposite side.
    """
    return (
        table.is_allowed(candidate, direction, neighbor_tile)
        and table.is_allowed(neighbor_tile, direction.opposite, candidate)
    )


def compatible_candidates(grid: Grid, table: ConstraintTable, cell: Cell) -> set[TileId]:
    """Candidates of `cell` that agree with every collapsed neighbor."""
    collapsed_neighbors = [
        (neighbor.tile_id, direction)
        for neighbor, direction in grid.neighbors(cell)
        if neighbor.collapsed
    ]
    if not collapsed_neighbors:
        return set(cell.candidates)

    return {
        candidate
        for candidate in cell.candidates
        if all(
            is_compatible(table, candidate, direction, neighbor_tile)
            for neighbor_tile, direction in collapsed_neighbors
        )
    }


def propagate_pass(grid: Grid, table: ConstraintTable) -> bool:
    """
    Run one full row-major pass over the uncollapsed cells.

    A cell narrowed to a single candidate is resolved on the spot, so cells
    later in the same pass already see it as collapsed.

    Returns True if any cell lost candidates.
    """
    changed = False

    for cell in grid.all_cells():
        if cell.collapsed:
            continue

        if cell.constrain_to(compatible_candidates(grid, table, cell)):
            changed = True
            if cell.entropy == 1:
                grid.resolve(cell, next(iter(cell.candidates)))
                logger.debug(f"Forced collapse at {cell.position} -> tile {cell.tile_id}")
            elif cell.entropy == 0:
                logger.debug(f"Cell {cell.position} has no candidates left")

    return changed


def propagate(grid: Grid, table: ConstraintTable) -> int:
    """
    Propagate constraints until a fixed point is reached.

    Terminates because every changing pass removes at least one candidate
    and candidates are never added back.

    Returns the number of passes run, including the final unchanged one.
    """
    passes = 1
    while propagate_pass(grid, table):
        passes += 1
    return passes
