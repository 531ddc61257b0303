"""tilecollapse - tile grid generation with Wave Function Collapse."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from tilecollapse.adapters import load_ruleset, render_text, save_image
from tilecollapse.core.errors import RuleFileError
from tilecollapse.generation import EngineState, generate
from tilecollapse.logging_config import setup_logging
from tilecollapse.settings import DEFAULT_RULES_PATH, SettingsError, load_settings

logger = logging.getLogger("tilecollapse.main")

EXIT_COMPLETE = 0
EXIT_CONFLICT = 1
EXIT_LOAD_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tilecollapse",
        description="tilecollapse - generate tile grids with Wave Function Collapse",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tilecollapse                              # Packaged terrain rules, 20x20
  tilecollapse rules.wfcin -W 40 -H 30      # Custom rules and size
  tilecollapse rules.yaml --seed 7 --show   # Reproducible run, print the grid
  tilecollapse --config settings.yaml       # Settings from YAML
        """,
    )
    parser.add_argument(
        "rules",
        type=Path,
        nargs="?",
        default=DEFAULT_RULES_PATH,
        help="Rule file, text or .yaml (default: packaged terrain rules)",
    )
    parser.add_argument("-W", "--width", type=int, help="Grid width in cells")
    parser.add_argument("-H", "--height", type=int, help="Grid height in cells")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument(
        "--attempts",
        type=int,
        dest="max_attempts",
        metavar="N",
        help="Retry with the next seed up to N runs on conflict",
    )
    parser.add_argument("--tile-size", type=int, help="Pixel size of each cell in the image")
    parser.add_argument("-o", "--output", type=Path, help="PNG output path")
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML settings file (flags override it)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for debug.log (default: logs/)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the generated grid to the terminal",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for tilecollapse."""
    # Load environment variables first
    load_dotenv()

    args = build_parser().parse_args(argv)

    # Setup logging
    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(args.log_dir, console_level=console_level)

    console = Console()
    err_console = Console(stderr=True)

    try:
        settings = load_settings(
            args.config,
            width=args.width,
            height=args.height,
            seed=args.seed,
            max_attempts=args.max_attempts,
            tile_size=args.tile_size,
            output=args.output,
        )
        ruleset = load_ruleset(args.rules)
    except (SettingsError, RuleFileError) as e:
        logger.error(str(e))
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}", soft_wrap=True)
        return EXIT_LOAD_ERROR

    for issue in ruleset.issues:
        err_console.print(f"[yellow]Warning:[/] {escape(f'{ruleset.source}: {issue}')}", soft_wrap=True)

    print(f"Rules: {ruleset.source} ({ruleset.catalog.count()} tiles)")
    print(f"Grid: {settings.width}x{settings.height}")
    print(f"Log file: {log_path}")

    total_cells = settings.width * settings.height
    pbar = tqdm(total=total_cells, desc="Collapsing", unit="cells", disable=args.no_progress)
    last_progress = [0]

    def update_progress(current: int, total: int) -> None:
        # Each attempt restarts from zero
        if current < last_progress[0]:
            pbar.reset(total=total)
            last_progress[0] = 0
        delta = current - last_progress[0]
        if delta > 0:
            pbar.update(delta)
            last_progress[0] = current

    try:
        result = generate(
            ruleset.catalog,
            ruleset.table,
            width=settings.width,
            height=settings.height,
            seed=settings.seed,
            max_attempts=settings.max_attempts,
            progress_callback=update_progress,
        )
    finally:
        pbar.close()

    if args.show:
        console.print(render_text(result, ruleset.catalog), end="", soft_wrap=True)

    if result.state == EngineState.CONFLICT:
        positions = ", ".join(str(p) for p in result.conflicts)
        err_console.print(
            f"[bold red]Conflict:[/] generation failed after {result.steps} steps "
            f"(seed={result.seed}); no valid tile for {positions}",
            soft_wrap=True,
        )
        return EXIT_CONFLICT

    output = save_image(result, ruleset.catalog, settings.output, settings.tile_size)
    print(f"Image generated: {output} (seed={result.seed}, steps={result.steps})")
    return EXIT_COMPLETE


if __name__ == "__main__":
    sys.exit(main())
