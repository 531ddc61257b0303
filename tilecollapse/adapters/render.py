"""Renderers for generation results.

Images are drawn with Pillow, one solid square per cell in the tile's
color. The text view uses rich and works for any run, including conflicts.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageDraw
from rich.text import Text

from tilecollapse.core.catalog import TileCatalog
from tilecollapse.core.errors import IncompleteGridError
from tilecollapse.generation.wfc import GenerationResult

logger = logging.getLogger(__name__)

DEFAULT_TILE_SIZE = 32

# Glyphs for cells that never resolved
UNRESOLVED_GLYPH = ("?", "bright_black")
CONFLICT_GLYPH = ("!", "bold red")


def render_image(
    result: GenerationResult,
    catalog: TileCatalog,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> Image.Image:
    """
    Draw a completed run as an RGB image.

    Args:
        result: A COMPLETE generation result
        catalog: Catalog the run was generated from
        tile_size: Edge length of each cell in pixels

    Returns:
        Image of size (width * tile_size, height * tile_size)

    Raises:
        IncompleteGridError: If the run did not complete
        ValueError: If tile_size is not positive
    """
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")

    layout = result.layout()
    grid = result.grid
    image = Image.new("RGB", (grid.width * tile_size, grid.height * tile_size))
    draw = ImageDraw.Draw(image)

    for y, row in enumerate(layout):
        for x, tile_id in enumerate(row):
            left, top = x * tile_size, y * tile_size
            draw.rectangle(
                [left, top, left + tile_size - 1, top + tile_size - 1],
                fill=catalog.get(tile_id).color,
            )

    return image


def save_image(
    result: GenerationResult,
    catalog: TileCatalog,
    path: Path | str,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> Path:
    """Render a completed run and write it as PNG.

    Raises:
        IncompleteGridError: If the run did not complete
    """
    path = Path(path)
    image = render_image(result, catalog, tile_size)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    logger.info(f"Image written: {path} ({image.width}x{image.height})")
    return path


def _rgb_style(color: tuple[int, int, int]) -> str:
    r, g, b = color
    return f"rgb({r},{g},{b})"


def render_text(result: GenerationResult, catalog: TileCatalog) -> Text:
    """
    Render the grid as styled text, one glyph per cell.

    Collapsed cells show the first letter of their tile name in the tile's
    color. Unresolved cells show '?', conflicted cells '!'.
    """
    text = Text()
    for row in result.grid.cells:
        for cell in row:
            if cell.collapsed:
                tile = catalog.get(cell.tile_id)
                text.append(tile.glyph, style=_rgb_style(tile.color))
            elif cell.conflicted:
                text.append(*CONFLICT_GLYPH)
            else:
                text.append(*UNRESOLVED_GLYPH)
        text.append("\n")
    return text
