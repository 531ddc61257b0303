"""
Tile grid generation using Wave Function Collapse.

This module provides the main entry point for generating a grid from a
catalog and constraint table. The engine itself never retries; restarting
with a new seed after a conflict is a policy that lives here.
"""

import logging
import random
from typing import Callable

from tilecollapse.core.catalog import TileCatalog
from tilecollapse.core.constraints import ConstraintTable
from .wfc import CollapseEngine, EngineState, GenerationResult, Grid, SeededChoice

logger = logging.getLogger(__name__)


def generate(
    catalog: TileCatalog,
    table: ConstraintTable,
    width: int = 20,
    height: int = 20,
    seed: int | None = None,
    max_attempts: int = 1,
    progress_callback: Callable[[int, int], None] | None = None,
) -> GenerationResult:
    """
    Generate a tile grid.

    Args:
        catalog: Tiles to place
        table: Adjacency rules over the catalog
        width: Grid width in cells
        height: Grid height in cells
        seed: Random seed for reproducibility (None = random). Attempt n uses seed + n.
        max_attempts: Runs to try before giving up on conflicts
        progress_callback: Optional callback(collapsed_cells, total_cells) for progress updates

    Returns:
        The first COMPLETE result, or the last CONFLICT result if every attempt conflicted

    Raises:
        ValueError: If max_attempts is less than 1 or the dimensions are not positive
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    base_seed = seed if seed is not None else random.SystemRandom().randrange(2**32)
    result: GenerationResult | None = None

    for attempt in range(max_attempts):
        # Fresh grid for each attempt
        grid = Grid(width, height, catalog)
        attempt_seed = base_seed + attempt
        engine = CollapseEngine(
            grid,
            table,
            SeededChoice(attempt_seed),
            progress_callback=progress_callback,
        )

        result = engine.run()
        if result.state == EngineState.COMPLETE:
            logger.info(
                f"Generated {width}x{height} grid in {result.steps} steps "
                f"(seed={attempt_seed}, attempt {attempt + 1}/{max_attempts})"
            )
            return result

        logger.warning(
            f"Conflict at {[str(p) for p in result.conflicts]} "
            f"(seed={attempt_seed}, attempt {attempt + 1}/{max_attempts})"
        )

    return result
