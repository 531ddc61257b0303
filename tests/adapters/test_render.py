"""Tests for image and text rendering."""

import pytest
from PIL import Image

from tilecollapse.adapters import render_image, render_text, save_image
from tilecollapse.core import IncompleteGridError
from tilecollapse.generation.wfc import (
    CollapseEngine,
    EngineState,
    FixedChoice,
    GenerationResult,
    Grid,
)


def solve(rules, width, height, chooser=None):
    catalog, table = rules
    return CollapseEngine(Grid(width, height, catalog), table, chooser or FixedChoice()).run()


class TestRenderImage:
    def test_image_size(self, single_tile_rules):
        catalog, _ = single_tile_rules
        result = solve(single_tile_rules, 3, 2)

        image = render_image(result, catalog, tile_size=4)

        assert image.size == (12, 8)
        assert image.mode == "RGB"

    def test_cells_filled_with_tile_color(self, alternating_rules):
        catalog, _ = alternating_rules
        result = solve(alternating_rules, 2, 1)
        [[left, right]] = result.layout()

        image = render_image(result, catalog, tile_size=5)

        assert image.getpixel((0, 0)) == catalog.get(left).color
        assert image.getpixel((4, 4)) == catalog.get(left).color
        assert image.getpixel((5, 0)) == catalog.get(right).color
        assert image.getpixel((9, 4)) == catalog.get(right).color

    def test_conflict_cannot_be_rendered(self, blocked_east_rules):
        catalog, _ = blocked_east_rules
        result = solve(blocked_east_rules, 2, 1)
        assert result.state == EngineState.CONFLICT

        with pytest.raises(IncompleteGridError):
            render_image(result, catalog)

    @pytest.mark.parametrize("tile_size", [0, -3])
    def test_tile_size_must_be_positive(self, single_tile_rules, tile_size):
        catalog, _ = single_tile_rules
        result = solve(single_tile_rules, 1, 1)

        with pytest.raises(ValueError):
            render_image(result, catalog, tile_size=tile_size)


class TestSaveImage:
    def test_writes_png(self, single_tile_rules, tmp_path):
        catalog, _ = single_tile_rules
        result = solve(single_tile_rules, 2, 2)

        path = save_image(result, catalog, tmp_path / "out" / "grid.png", tile_size=3)

        assert path.exists()
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (6, 6)
            assert image.convert("RGB").getpixel((1, 1)) == catalog.get(0).color

    def test_conflict_writes_nothing(self, blocked_east_rules, tmp_path):
        catalog, _ = blocked_east_rules
        result = solve(blocked_east_rules, 2, 1)

        with pytest.raises(IncompleteGridError):
            save_image(result, catalog, tmp_path / "grid.png")
        assert not (tmp_path / "grid.png").exists()


class TestRenderText:
    def test_glyph_per_cell(self, single_tile_rules):
        catalog, _ = single_tile_rules
        result = solve(single_tile_rules, 3, 2)

        assert render_text(result, catalog).plain == "XXX\nXXX\n"

    def test_tile_color_used_as_style(self, single_tile_rules):
        catalog, _ = single_tile_rules
        result = solve(single_tile_rules, 1, 1)
        r, g, b = catalog.get(0).color

        text = render_text(result, catalog)

        assert str(text.spans[0].style) == f"rgb({r},{g},{b})"

    def test_conflict_marked(self, blocked_east_rules):
        catalog, _ = blocked_east_rules
        result = solve(blocked_east_rules, 2, 1)

        assert render_text(result, catalog).plain == "X!\n"

    def test_unresolved_marked(self, alternating_rules):
        catalog, _ = alternating_rules
        grid = Grid(2, 2, catalog)
        result = GenerationResult(state=EngineState.RUNNING, grid=grid, steps=0)

        assert render_text(result, catalog).plain == "??\n??\n"
