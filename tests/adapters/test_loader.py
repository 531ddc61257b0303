"""Tests for rule file loading."""

from pathlib import Path

import pytest

from tilecollapse.adapters import (
    load_rules,
    load_rules_yaml,
    load_ruleset,
    parse_rules,
    parse_rules_yaml,
)
from tilecollapse.core import Direction, RuleFileError
from tilecollapse.settings import CONFIG_DIR, DEFAULT_RULES_PATH


BASIC = """\
[WFCINPUT]
[Tiles]
Red 255 0 0
Green 0 255 0
Blue 0 0 255

[Constraints]
Red NORTH Green Blue
Red EAST Blue
Green SOUTH Red Blue
"""


def ids(ruleset, *names):
    return {ruleset.catalog.lookup(name) for name in names}


class TestTextFormat:
    """Test the section-based text format."""

    def test_tiles_registered_in_order(self):
        rules = parse_rules(BASIC)
        assert rules.catalog.names() == ["Red", "Green", "Blue"]
        assert rules.catalog.get(0).color == (255, 0, 0)
        assert rules.catalog.get(2).color == (0, 0, 255)
        assert rules.issues == []

    def test_constraints_resolved_to_ids(self):
        rules = parse_rules(BASIC)
        red = rules.catalog.lookup("Red")
        assert rules.table.allowed(red, Direction.NORTH) == ids(rules, "Green", "Blue")
        assert rules.table.allowed(red, Direction.EAST) == ids(rules, "Blue")

    def test_undeclared_directions_are_permissive(self):
        rules = parse_rules(BASIC)
        red = rules.catalog.lookup("Red")
        blue = rules.catalog.lookup("Blue")
        everything = ids(rules, "Red", "Green", "Blue")
        assert rules.table.allowed(red, Direction.WEST) == everything
        for direction in Direction:
            assert rules.table.allowed(blue, direction) == everything

    def test_bare_constraint_allows_nothing(self):
        rules = parse_rules("[WFCINPUT]\n[Tiles]\nX 1 2 3\n[Constraints]\nX EAST\n")
        assert rules.table.allowed(0, Direction.EAST) == frozenset()

    def test_direction_is_case_insensitive(self):
        rules = parse_rules("[WFCINPUT]\n[Tiles]\nX 1 2 3\nY 4 5 6\n[Constraints]\nX east Y\n")
        assert rules.table.allowed(0, Direction.EAST) == {1}

    def test_comments_and_blank_lines_ignored(self):
        text = "# rules\n[WFCINPUT]\n\n; tiles follow\n[Tiles]\n  Red 255 0 0  \n# Blue 0 0 255\n"
        rules = parse_rules(text)
        assert rules.catalog.names() == ["Red"]
        assert rules.issues == []

    def test_short_header_accepted(self):
        rules = parse_rules("[WFINPUT]\n[Tiles]\nRed 255 0 0\n")
        assert rules.catalog.count() == 1

    def test_result_is_frozen(self):
        rules = parse_rules(BASIC)
        assert rules.catalog.frozen
        assert rules.table.frozen

    def test_repeated_constraint_replaces_earlier(self):
        text = BASIC + "Red EAST Green\n"
        rules = parse_rules(text)
        assert rules.table.allowed(0, Direction.EAST) == ids(rules, "Green")


class TestTextFormatErrors:
    """Fatal problems raise, everything else is skipped and recorded."""

    def test_missing_header_raises(self):
        with pytest.raises(RuleFileError, match="header"):
            parse_rules("[Tiles]\nRed 255 0 0\n")

    def test_no_header_anywhere_raises(self):
        with pytest.raises(RuleFileError, match="header"):
            parse_rules("Red 255 0 0\n")

    def test_no_tiles_raises(self):
        with pytest.raises(RuleFileError, match="No tile definitions"):
            parse_rules("[WFCINPUT]\n[Tiles]\n[Constraints]\n")

    def test_duplicate_tile_keeps_first(self):
        rules = parse_rules("[WFCINPUT]\n[Tiles]\nRed 255 0 0\nRed 1 1 1\n")
        assert rules.catalog.count() == 1
        assert rules.catalog.get(0).color == (255, 0, 0)
        assert len(rules.issues) == 1
        assert rules.issues[0].line == 4
        assert "already added" in rules.issues[0].message

    @pytest.mark.parametrize(
        "line",
        [
            "Red 255 0",          # missing channel
            "Red 255 0 0 7",      # extra field
            "Red a b c",          # not numbers
            "Red 256 0 0",        # out of range
            "Red -1 0 0",
        ],
    )
    def test_malformed_tile_line_skipped(self, line):
        rules = parse_rules(f"[WFCINPUT]\n[Tiles]\nGreen 0 255 0\n{line}\n")
        assert rules.catalog.names() == ["Green"]
        assert len(rules.issues) == 1

    def test_unknown_base_tile_skips_entry(self):
        rules = parse_rules(BASIC + "Purple NORTH Red\n")
        assert any("Unknown tile name" in issue.message for issue in rules.issues)

    def test_unknown_allowed_tile_skips_member(self):
        rules = parse_rules(BASIC + "Blue WEST Red Purple Green\n")
        blue = rules.catalog.lookup("Blue")
        assert rules.table.allowed(blue, Direction.WEST) == ids(rules, "Red", "Green")
        assert [issue.message for issue in rules.issues] == ["Unknown allowed tile name: 'Purple'"]

    def test_invalid_direction_skips_entry(self):
        rules = parse_rules(BASIC + "Blue UP Red\n")
        blue = rules.catalog.lookup("Blue")
        assert not rules.table.is_explicit(blue, Direction.NORTH)
        assert any("Invalid direction" in issue.message for issue in rules.issues)

    def test_constraint_missing_direction_skipped(self):
        rules = parse_rules(BASIC + "Blue\n")
        assert any("missing fields" in issue.message for issue in rules.issues)

    def test_unknown_section_ignored(self):
        text = "[WFCINPUT]\n[Tiles]\nRed 1 2 3\n[Extras]\nwhatever goes here\n"
        rules = parse_rules(text)
        assert rules.catalog.names() == ["Red"]
        assert len(rules.issues) == 1

    def test_line_outside_section_recorded(self):
        rules = parse_rules("[WFCINPUT]\nstray line\n[Tiles]\nRed 1 2 3\n")
        assert rules.issues[0].line == 2

    def test_constraints_before_tiles_still_resolve(self):
        text = "[WFCINPUT]\n[Constraints]\nA EAST B\n[Tiles]\nA 1 1 1\nB 2 2 2\n"
        rules = parse_rules(text)
        assert rules.table.allowed(0, Direction.EAST) == {1}

    def test_issue_str_includes_line(self):
        rules = parse_rules("[WFCINPUT]\n[Tiles]\nRed 1 2 3\nRed 1 2 3\n")
        assert str(rules.issues[0]).startswith("line 4: ")


class TestFiles:
    """Test loading from disk."""

    def test_load_rules_from_file(self, tmp_path):
        path = tmp_path / "rules.wfcin"
        path.write_text(BASIC)
        rules = load_rules(path)
        assert rules.catalog.count() == 3
        assert rules.source == str(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RuleFileError, match="Couldn't read file"):
            load_rules(tmp_path / "missing.wfcin")

    def test_load_ruleset_dispatches_on_suffix(self, tmp_path):
        text_path = tmp_path / "rules.txt"
        text_path.write_text(BASIC)
        yaml_path = tmp_path / "rules.yml"
        yaml_path.write_text("tiles:\n  - {name: Solo}\n")

        assert load_ruleset(text_path).catalog.count() == 3
        assert load_ruleset(yaml_path).catalog.names() == ["Solo"]

    def test_packaged_terrain_rules_load_cleanly(self):
        rules = load_rules(DEFAULT_RULES_PATH)
        assert rules.issues == []
        assert rules.catalog.names() == ["Water", "Coast", "Sand", "Grass", "Forest", "Hill", "Stone"]

    def test_packaged_terrain_rules_are_symmetric(self):
        rules = load_rules(DEFAULT_RULES_PATH)
        table = rules.table
        for tile in rules.catalog:
            for direction in Direction:
                for neighbor in table.allowed(tile.id, direction):
                    assert table.is_allowed(neighbor, direction.opposite, tile.id)

    def test_packaged_yaml_rules_load_cleanly(self):
        rules = load_ruleset(CONFIG_DIR / "stripes.yaml")
        assert rules.issues == []
        assert rules.catalog.names() == ["Red", "Blue", "Gray"]


class TestYamlFormat:
    """Test the YAML rule format."""

    YAML = """\
tiles:
  - {name: Red, color: [255, 0, 0]}
  - {name: Blue, color: [0, 0, 255]}
  - name: Plain
constraints:
  Red:
    north: [Blue]
    EAST: []
  Blue:
    west:
"""

    def test_tiles_and_colors(self):
        rules = parse_rules_yaml(self.YAML)
        assert rules.catalog.names() == ["Red", "Blue", "Plain"]
        assert rules.catalog.get(2).color == (128, 128, 128)

    def test_constraints(self):
        rules = parse_rules_yaml(self.YAML)
        assert rules.table.allowed(0, Direction.NORTH) == {1}
        assert rules.table.allowed(0, Direction.EAST) == frozenset()
        assert rules.table.allowed(1, Direction.WEST) == frozenset()
        assert rules.table.allowed(0, Direction.SOUTH) == {0, 1, 2}

    def test_invalid_yaml_raises(self):
        with pytest.raises(RuleFileError, match="Invalid YAML"):
            parse_rules_yaml("tiles: [unclosed")

    def test_schema_violation_raises(self):
        with pytest.raises(RuleFileError, match="Invalid rule file"):
            parse_rules_yaml("tiles:\n  - {name: Red}\nrules: {}\n")

    def test_empty_tile_name_raises_when_nothing_left(self):
        with pytest.raises(RuleFileError, match="No tile definitions"):
            parse_rules_yaml("tiles:\n  - {name: ''}\n")

    @pytest.mark.parametrize(
        "entry",
        [
            "{name: B, color: [300, 0, 0]}",
            "{name: B, color: [1, 2]}",
            "{name: ''}",
            "{name: B, colour: [1, 2, 3]}",
            "{color: [1, 2, 3]}",
        ],
    )
    def test_invalid_tile_entry_skipped(self, entry):
        rules = parse_rules_yaml(f"tiles:\n  - {{name: A}}\n  - {entry}\n")
        assert rules.catalog.names() == ["A"]
        assert len(rules.issues) == 1
        assert rules.issues[0].message.startswith("Invalid tile #2")

    def test_empty_document_raises(self):
        with pytest.raises(RuleFileError):
            parse_rules_yaml("")

    def test_no_tiles_raises(self):
        with pytest.raises(RuleFileError, match="No tile definitions"):
            parse_rules_yaml("tiles: []\n")

    def test_unknown_names_recorded(self):
        rules = parse_rules_yaml(
            "tiles:\n  - {name: A}\nconstraints:\n  A: {east: [Ghost]}\n  Nobody: {west: [A]}\n"
        )
        messages = [issue.message for issue in rules.issues]
        assert "Unknown allowed tile name: 'Ghost'" in messages
        assert "Unknown tile name in constraints: 'Nobody'" in messages
        assert rules.table.allowed(0, Direction.EAST) == frozenset()

    def test_duplicate_tile_recorded(self):
        rules = parse_rules_yaml("tiles:\n  - {name: A}\n  - {name: A}\n")
        assert rules.catalog.count() == 1
        assert rules.issues[0].line is None

    def test_load_yaml_file(self, tmp_path: Path):
        path = tmp_path / "rules.yaml"
        path.write_text(self.YAML)
        assert load_rules_yaml(path).catalog.count() == 3
