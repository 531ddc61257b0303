"""Tile catalog: the set of tiles a generation run can place.

Tiles are immutable. The catalog is append-only while rules are loaded and
frozen before generation starts. IDs are assigned in registration order
starting at 0, so they double as indexes.
"""

from __future__ import annotations

from typing import Annotated, Iterator

from pydantic import BaseModel, ConfigDict, Field

from .errors import CatalogFrozenError, DuplicateTileError, UnknownTileError
from .types import TileId

Channel = Annotated[int, Field(ge=0, le=255)]
Color = tuple[int, int, int]


class Tile(BaseModel):
    """A tile type that can appear in the generated output.

    Attributes:
        id: Catalog-assigned identity
        name: Unique human-readable name (e.g., "Water")
        color: RGB tuple used only by renderers
    """

    model_config = ConfigDict(frozen=True)

    id: TileId
    name: str = Field(min_length=1)
    color: tuple[Channel, Channel, Channel] = (128, 128, 128)

    @property
    def glyph(self) -> str:
        """Single character used for text rendering."""
        return self.name[0]


class TileCatalog:
    """Registry of tiles, addressable by name or ID."""

    def __init__(self) -> None:
        self._tiles: list[Tile] = []
        self._by_name: dict[str, TileId] = {}
        self._frozen = False

    def register(self, name: str, color: Color = (128, 128, 128)) -> TileId:
        """Add a tile and return its new ID.

        Raises:
            DuplicateTileError: If the name is already registered
            CatalogFrozenError: If the catalog has been frozen
        """
        if self._frozen:
            raise CatalogFrozenError(f"Cannot register {name!r}: catalog is frozen")
        if name in self._by_name:
            raise DuplicateTileError(name)

        tile_id = TileId(len(self._tiles))
        tile = Tile(id=tile_id, name=name, color=color)
        self._tiles.append(tile)
        self._by_name[name] = tile_id
        return tile_id

    def lookup(self, name: str) -> TileId:
        """Resolve a tile name to its ID.

        Raises:
            UnknownTileError: If no tile has this name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownTileError(name) from None

    def get(self, tile_id: int) -> Tile:
        """Get the tile with the given ID.

        Raises:
            UnknownTileError: If the ID is not in the catalog
        """
        if not self.contains(tile_id):
            raise UnknownTileError(tile_id)
        return self._tiles[tile_id]

    def contains(self, tile_id: int) -> bool:
        return isinstance(tile_id, int) and 0 <= tile_id < len(self._tiles)

    def count(self) -> int:
        return len(self._tiles)

    def ids(self) -> list[TileId]:
        """All tile IDs in ascending order."""
        return [tile.id for tile in self._tiles]

    def names(self) -> list[str]:
        return [tile.name for tile in self._tiles]

    def freeze(self) -> None:
        """End the load phase. No further registration is allowed."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"TileCatalog({self.names()!r})"
