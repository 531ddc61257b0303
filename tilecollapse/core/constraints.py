"""Constraint table: which tiles may sit next to which, per direction.

For each (tile, direction) pair the table stores the set of tile IDs allowed
to occupy the neighboring cell in that direction. Entries that are never set
default to every tile in the catalog, so an undeclared direction never makes
a tile unplaceable.
"""

from __future__ import annotations

from typing import Iterable

from .catalog import TileCatalog
from .errors import ConstraintTableFrozenError, UnknownTileError
from .types import Direction, TileId


class ConstraintTable:
    """Per-tile, per-direction allow-lists.

    The default allowed set is captured from the catalog when the table is
    built; tiles registered afterwards are not added to it.
    """

    def __init__(self, catalog: TileCatalog):
        self._catalog = catalog
        self._all: frozenset[TileId] = frozenset(catalog.ids())
        self._explicit: dict[tuple[TileId, Direction], frozenset[TileId]] = {}
        self._frozen = False

    @property
    def catalog(self) -> TileCatalog:
        return self._catalog

    def set_allowed(
        self,
        tile_id: TileId,
        direction: Direction,
        allowed: Iterable[TileId],
    ) -> None:
        """Replace the allowed set for (tile_id, direction).

        An empty iterable means nothing may sit in that direction.

        Raises:
            UnknownTileError: If tile_id or any allowed ID is not in the table's catalog.
                The table is left unchanged.
            ConstraintTableFrozenError: If the table has been frozen
        """
        if self._frozen:
            raise ConstraintTableFrozenError(
                f"Cannot change constraints of tile {tile_id}: table is frozen"
            )
        self._check(tile_id)
        allowed_set = frozenset(allowed)
        for candidate in allowed_set:
            self._check(candidate)
        self._explicit[(tile_id, direction)] = allowed_set

    def allowed(self, tile_id: TileId, direction: Direction) -> frozenset[TileId]:
        """Get the tile IDs allowed next to tile_id in the given direction."""
        self._check(tile_id)
        return self._explicit.get((tile_id, direction), self._all)

    def is_allowed(
        self,
        tile_id: TileId,
        direction: Direction,
        candidate_id: TileId,
    ) -> bool:
        """Check whether candidate_id may sit in `direction` of tile_id."""
        return candidate_id in self.allowed(tile_id, direction)

    def is_explicit(self, tile_id: TileId, direction: Direction) -> bool:
        """Whether the entry was declared rather than defaulted."""
        return (tile_id, direction) in self._explicit

    def freeze(self) -> None:
        """End the load phase. The table is read-only afterwards."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check(self, tile_id: TileId) -> None:
        if tile_id not in self._all:
            raise UnknownTileError(tile_id)

    def __repr__(self) -> str:
        return f"ConstraintTable(tiles={len(self._all)}, explicit={len(self._explicit)})"
