"""Rule loading: build a frozen catalog and constraint table from input files.

Two formats are supported.

The text format, one declaration per line:

    [WFCINPUT]
    [Tiles]
    Red 255 0 0
    Green 0 255 0
    Blue 0 0 255

    [Constraints]
    Red NORTH Green Blue
    Red EAST Blue
    Blue WEST

Blank lines and lines starting with '#' or ';' are ignored. A constraint
line with no allowed tiles declares that nothing may sit in that direction.

The YAML format carries the same data:

    tiles:
      - {name: Red, color: [255, 0, 0]}
      - {name: Blue, color: [0, 0, 255]}
    constraints:
      Red:
        north: [Blue, Red]
        east: []

Bad entries (duplicate tiles, unknown tiles, bad directions, malformed lines
or YAML tile entries) are logged, recorded as LoadIssues and skipped. Only a file that cannot yield
any usable rules raises RuleFileError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tilecollapse.core.catalog import Channel, TileCatalog
from tilecollapse.core.constraints import ConstraintTable
from tilecollapse.core.errors import DuplicateTileError, RuleFileError, UnknownTileError
from tilecollapse.core.types import Direction, TileId
from tilecollapse.logging_config import log_load_issue

logger = logging.getLogger(__name__)

HEADER_NAMES = ("WFCINPUT", "WFINPUT")
YAML_SUFFIXES = (".yaml", ".yml")


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LoadIssue:
    """An input entry that was skipped."""

    line: int | None
    message: str

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


@dataclass
class RuleSet:
    """Frozen rules ready for generation, plus what was skipped on the way."""

    catalog: TileCatalog
    table: ConstraintTable
    source: str = "<string>"
    issues: list[LoadIssue] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Shared builder
# -----------------------------------------------------------------------------


@dataclass
class _ConstraintEntry:
    line: int | None
    tile: str
    direction: str
    allowed: list[str]


class _RuleBuilder:
    """Collects tiles and constraints, applying the skip-and-continue policy."""

    def __init__(self, source: str):
        self.source = source
        self.catalog = TileCatalog()
        self.entries: list[_ConstraintEntry] = []
        self.issues: list[LoadIssue] = []

    def issue(self, line: int | None, message: str) -> None:
        log_load_issue(logger, self.source, line, message)
        self.issues.append(LoadIssue(line, message))

    def add_tile(self, line: int | None, name: str, color: tuple[int, int, int]) -> None:
        try:
            tile_id = self.catalog.register(name, color)
        except DuplicateTileError:
            self.issue(line, f"Tile {name!r} was already added, keeping the first definition")
            return
        logger.debug(f"Registered tile {name!r} as {tile_id} with color {color}")

    def add_constraint(self, line: int | None, tile: str, direction: str, allowed: list[str]) -> None:
        self.entries.append(_ConstraintEntry(line, tile, direction, allowed))

    def build(self) -> RuleSet:
        if self.catalog.count() == 0:
            raise RuleFileError("No tile definitions were loaded", self.source)
        self.catalog.freeze()

        table = ConstraintTable(self.catalog)
        for entry in self.entries:
            self._apply(table, entry)
        table.freeze()

        logger.info(
            f"Loaded {self.catalog.count()} tiles and {len(self.entries)} constraint entries "
            f"from {self.source} ({len(self.issues)} issues)"
        )
        return RuleSet(
            catalog=self.catalog,
            table=table,
            source=self.source,
            issues=self.issues,
        )

    def _apply(self, table: ConstraintTable, entry: _ConstraintEntry) -> None:
        try:
            direction = Direction.parse(entry.direction)
        except ValueError:
            self.issue(entry.line, f"Invalid direction in constraint: {entry.direction!r}")
            return

        try:
            tile_id = self.catalog.lookup(entry.tile)
        except UnknownTileError:
            self.issue(entry.line, f"Unknown tile name in constraints: {entry.tile!r}")
            return

        allowed: list[TileId] = []
        for name in entry.allowed:
            try:
                allowed.append(self.catalog.lookup(name))
            except UnknownTileError:
                self.issue(entry.line, f"Unknown allowed tile name: {name!r}")

        if table.is_explicit(tile_id, direction):
            logger.debug(f"Constraint {entry.tile} {direction.name} redeclared, replacing")
        table.set_allowed(tile_id, direction, allowed)


# -----------------------------------------------------------------------------
# Text format
# -----------------------------------------------------------------------------


class _Section(Enum):
    NONE = "none"
    TILES = "tiles"
    CONSTRAINTS = "constraints"
    IGNORED = "ignored"


def parse_rules(text: str, source: str = "<string>") -> RuleSet:
    """
    Parse rules in the text format.

    Args:
        text: File contents
        source: Name used in log messages and errors

    Returns:
        RuleSet with frozen catalog and table

    Raises:
        RuleFileError: If the header is missing or no tiles are defined
    """
    builder = _RuleBuilder(source)
    section = _Section.NONE
    header_read = False

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#;":
            continue

        if line.startswith("["):
            name = line.strip("[]").strip().upper()
            if name in HEADER_NAMES:
                header_read = True
                section = _Section.NONE
            elif name in ("TILES", "CONSTRAINTS"):
                if not header_read:
                    raise RuleFileError(f"Missing [{HEADER_NAMES[0]}] header before [{name.title()}]", source, line_no)
                section = _Section(name.lower())
            else:
                builder.issue(line_no, f"Unknown section {line!r}, ignoring its contents")
                section = _Section.IGNORED
            continue

        tokens = line.split()
        if section == _Section.TILES:
            _parse_tile_line(builder, line_no, tokens)
        elif section == _Section.CONSTRAINTS:
            if len(tokens) < 2:
                builder.issue(line_no, f"Invalid constraint line (missing fields): {line!r}")
                continue
            builder.add_constraint(line_no, tokens[0], tokens[1], tokens[2:])
        elif section == _Section.NONE:
            builder.issue(line_no, f"Line outside of any section: {line!r}")

    if not header_read:
        raise RuleFileError(f"Couldn't find [{HEADER_NAMES[0]}] header", source)

    return builder.build()


def _parse_tile_line(builder: _RuleBuilder, line_no: int, tokens: list[str]) -> None:
    """Parse `<name> <r> <g> <b>`."""
    if len(tokens) != 4:
        builder.issue(line_no, f"Invalid tile definition: {' '.join(tokens)!r}")
        return

    name, *channels = tokens
    try:
        color = tuple(int(c) for c in channels)
    except ValueError:
        builder.issue(line_no, f"Invalid tile color for {name!r}: {' '.join(channels)!r}")
        return
    if not all(0 <= c <= 255 for c in color):
        builder.issue(line_no, f"Tile color for {name!r} out of range 0-255: {color}")
        return

    builder.add_tile(line_no, name, color)


def load_rules(path: Path | str) -> RuleSet:
    """Load a text-format rule file.

    Raises:
        RuleFileError: If the file cannot be read or holds no usable rules
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleFileError(f"Couldn't read file: {e}", path) from e
    return parse_rules(text, source=str(path))


# -----------------------------------------------------------------------------
# YAML format
# -----------------------------------------------------------------------------


class TileSpec(BaseModel):
    """A tile declaration in a YAML rule file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    color: tuple[Channel, Channel, Channel] = (128, 128, 128)


class RuleFileSpec(BaseModel):
    """Top level of a YAML rule file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Tiles are validated one at a time so a bad entry only skips itself
    tiles: list[dict[str, Any]]
    # tile name -> direction name -> allowed tile names (null means none)
    constraints: dict[str, dict[str, list[str] | None]] = {}


def parse_rules_yaml(text: str, source: str = "<string>") -> RuleSet:
    """
    Parse rules in the YAML format.

    Raises:
        RuleFileError: If the YAML is invalid, does not match the schema,
            or defines no tiles
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RuleFileError(f"Invalid YAML: {e}", source) from e

    try:
        parsed = RuleFileSpec.model_validate(data or {})
    except ValidationError as e:
        raise RuleFileError(f"Invalid rule file: {e}", source) from e

    builder = _RuleBuilder(source)
    for index, raw in enumerate(parsed.tiles):
        try:
            tile = TileSpec.model_validate(raw)
        except ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            builder.issue(None, f"Invalid tile #{index + 1} ({location}): {error['msg']}")
            continue
        builder.add_tile(None, tile.name, tile.color)
    for tile_name, directions in parsed.constraints.items():
        for direction, allowed in directions.items():
            builder.add_constraint(None, tile_name, direction, list(allowed or []))

    return builder.build()


def load_rules_yaml(path: Path | str) -> RuleSet:
    """Load a YAML rule file.

    Raises:
        RuleFileError: If the file cannot be read or holds no usable rules
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleFileError(f"Couldn't read file: {e}", path) from e
    return parse_rules_yaml(text, source=str(path))


def load_ruleset(path: Path | str) -> RuleSet:
    """Load a rule file, picking the format from its suffix.

    `.yaml` and `.yml` files are read as YAML, anything else as text.
    """
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        return load_rules_yaml(path)
    return load_rules(path)
