"""
Wave Function Collapse engine.

This is the heart of WFC - the loop that observes (collapses) cells
and propagates constraints until the entire grid is determined.

The algorithm:
1. If every cell is collapsed, we are done
2. Find the cell with lowest entropy (most constrained)
3. Collapse it to one of its candidates (uniform random choice)
4. Propagate: narrow the other cells against their collapsed neighbors
5. Repeat until complete or conflict

There is no backtracking. A conflict ends the run; retrying with another
seed is up to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable

from tilecollapse.core.constraints import ConstraintTable
from tilecollapse.core.errors import IncompleteGridError
from tilecollapse.core.types import Position, TileId
from tilecollapse.logging_config import log_outcome, log_propagation, log_step

from .choice import ChoiceSource, SeededChoice
from .grid import Grid
from .propagate import propagate

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """The current state of the collapse engine."""
    RUNNING = auto()    # Still solving, more steps needed
    COMPLETE = auto()   # All cells collapsed successfully
    CONFLICT = auto()   # Some uncollapsed cell has no candidates left


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    state: EngineState
    grid: Grid
    steps: int
    conflicts: list[Position] = field(default_factory=list)
    seed: int | None = None

    @property
    def complete(self) -> bool:
        return self.state == EngineState.COMPLETE

    def layout(self) -> list[list[TileId]]:
        """
        Resolved tile IDs indexed as [y][x].

        Raises:
            IncompleteGridError: If the run did not complete
        """
        if not self.complete:
            raise IncompleteGridError(
                f"Run ended in {self.state.name} after {self.steps} steps; no layout available"
            )
        return self.grid.tile_ids()


class CollapseEngine:
    """
    The WFC collapse loop.

    Usage:
        engine = CollapseEngine(grid, table, SeededChoice(42))
        while engine.step() == EngineState.RUNNING:
            pass

    Or for bulk solving:
        result = engine.run()  # GenerationResult, COMPLETE or CONFLICT

    The engine owns the grid for the duration of the run.
    """

    def __init__(
        self,
        grid: Grid,
        table: ConstraintTable,
        chooser: ChoiceSource | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ):
        """
        Initialize the engine.

        Args:
            grid: The Grid to solve (should be in initial superposition state)
            table: Adjacency rules for the grid's catalog
            chooser: Picks among a cell's candidates (default: unseeded SeededChoice)
            progress_callback: Optional callback(collapsed_cells, total_cells) after each step
        """
        self.grid = grid
        self.table = table
        self.chooser = chooser if chooser is not None else SeededChoice()
        self.progress_callback = progress_callback
        self.state = EngineState.RUNNING
        self.step_count = 0

        # Track the last collapsed position (for visualization/debugging)
        self.last_collapsed: Position | None = None

    def step(self) -> EngineState:
        """
        Perform one step: collapse the lowest-entropy cell and propagate.

        Returns the engine state after this step. Once terminal, the state
        no longer changes.
        """
        if self.state != EngineState.RUNNING:
            return self.state

        # 1. Done?
        if self.grid.is_complete():
            return self._finish(EngineState.COMPLETE)

        # 2. Pick the most constrained cell
        position = self.grid.lowest_entropy_cell()
        if position is None:
            return self._finish(EngineState.CONFLICT)

        # 3. Collapse it
        cell = self.grid.cell_at(*position)
        candidates = cell.sorted_candidates()
        chosen = self.chooser.choose(candidates)
        self.grid.resolve(cell, chosen)
        self.last_collapsed = position
        self.step_count += 1
        log_step(logger, self.step_count, position, chosen, len(candidates))

        # 4. Propagate constraints
        passes = propagate(self.grid, self.table)
        log_propagation(logger, self.step_count, passes, self.grid.collapsed_count())

        if self.progress_callback is not None:
            self.progress_callback(self.grid.collapsed_count(), self.grid.size)

        return self.state

    def run(self) -> GenerationResult:
        """
        Run the engine to a terminal state.

        Ends within one step per cell plus one, since every running step
        collapses at least one cell.
        """
        while self.step() == EngineState.RUNNING:
            pass
        return self.result()

    def result(self) -> GenerationResult:
        """Snapshot of the run so far."""
        conflicts = []
        if self.state == EngineState.CONFLICT:
            conflicts = [cell.position for cell in self.grid.conflicted_cells()]
        return GenerationResult(
            state=self.state,
            grid=self.grid,
            steps=self.step_count,
            conflicts=conflicts,
            seed=getattr(self.chooser, "seed", None),
        )

    def _finish(self, state: EngineState) -> EngineState:
        self.state = state
        details = None
        if state == EngineState.CONFLICT:
            details = f"conflicts={[str(c.position) for c in self.grid.conflicted_cells()]}"
        log_outcome(logger, state.name, self.step_count, details)
        return state
