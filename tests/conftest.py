"""Shared test fixtures for tilecollapse."""

import pytest

from tilecollapse.core import ConstraintTable, Direction, TileCatalog


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# =============================================================================
# Rule builders
# =============================================================================


def build_rules(
    names: list[str],
    constraints: dict[tuple[str, Direction], list[str]] | None = None,
) -> tuple[TileCatalog, ConstraintTable]:
    """Build a frozen catalog and table.

    Args:
        names: Tile names, registered in order (IDs 0, 1, ...)
        constraints: (tile name, direction) -> allowed tile names
    """
    catalog = TileCatalog()
    for i, name in enumerate(names):
        catalog.register(name, (i * 40 % 256, 100, 200))
    catalog.freeze()

    table = ConstraintTable(catalog)
    for (name, direction), allowed in (constraints or {}).items():
        table.set_allowed(
            catalog.lookup(name),
            direction,
            [catalog.lookup(a) for a in allowed],
        )
    table.freeze()
    return catalog, table


@pytest.fixture
def make_rules():
    """The build_rules helper, for tests that need custom rules."""
    return build_rules


@pytest.fixture
def alternating_rules() -> tuple[TileCatalog, ConstraintTable]:
    """X allows only Y to its east, Y allows only X to its west."""
    return build_rules(
        ["X", "Y"],
        {
            ("X", Direction.EAST): ["Y"],
            ("Y", Direction.WEST): ["X"],
        },
    )


@pytest.fixture
def blocked_east_rules() -> tuple[TileCatalog, ConstraintTable]:
    """X allows nothing to its east; everything else is permissive."""
    return build_rules(["X", "Y"], {("X", Direction.EAST): []})


@pytest.fixture
def single_tile_rules() -> tuple[TileCatalog, ConstraintTable]:
    """One tile, compatible with itself everywhere."""
    return build_rules(["X"])


@pytest.fixture
def alternating_with_free_rules() -> tuple[TileCatalog, ConstraintTable]:
    """X/Y alternate east-west; Z is never mentioned and fits anywhere."""
    return build_rules(
        ["X", "Y", "Z"],
        {
            ("X", Direction.EAST): ["Y"],
            ("Y", Direction.WEST): ["X"],
        },
    )
