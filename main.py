import argparse
import logging
from dataclasses import fields
from pathlib import Path

from worldmap import GenerationSettings, Grid, GridLoadError, adjust_settings, generate_world
from worldmap.persistence import SAVE_FILE, load_grid, load_settings, save_grid
from worldmap.settings import GRID_COLS, GRID_ROWS
from ui.map_view import MapView

logger = logging.getLogger("worldmap")

# Settings exposed as --flag options; seed and the counts get their own types
_BIAS_OPTIONS = [
    f.name
    for f in fields(GenerationSettings)
    if f.name not in {"seed", "continents", "islands"}
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a procedural world map and show it in a viewer."
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible map")
    parser.add_argument("--cols", type=int, default=GRID_COLS, help="Grid width in tiles")
    parser.add_argument("--rows", type=int, default=GRID_ROWS, help="Grid height in tiles")
    parser.add_argument("--continents", type=int, default=None, help="Number of continents")
    parser.add_argument("--islands", type=int, default=None, help="Number of islands")
    for name in _BIAS_OPTIONS:
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            type=float,
            default=None,
            help=f"Override the '{name}' setting",
        )
    parser.add_argument(
        "--load",
        type=Path,
        default=None,
        help="Load a saved map instead of generating one",
    )
    parser.add_argument(
        "--save",
        nargs="?",
        type=Path,
        const=SAVE_FILE,
        default=None,
        help=f"Save the map (default file: {SAVE_FILE})",
    )
    parser.add_argument("--no-view", action="store_true", help="Skip the map viewer")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> GenerationSettings:
    settings = GenerationSettings()
    overrides = {
        name: getattr(args, name)
        for name in ["seed", "continents", "islands", *_BIAS_OPTIONS]
        if getattr(args, name) is not None
    }
    adjust_settings(settings, **overrides)
    return settings


def print_summary(grid: Grid) -> None:
    total = grid.cols * grid.rows
    print(f"Map {grid.cols}x{grid.rows} ({total} tiles)")
    counts = sorted(grid.terrain_counts().items(), key=lambda item: -item[1])
    for terrain, count in counts:
        if count:
            print(f"  {terrain.value:<12} {count:>7}  {100.0 * count / total:5.1f}%")


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.load is not None:
        grid = Grid(args.cols, args.rows)
        try:
            status = load_grid(grid, file_path=args.load)
        except GridLoadError as e:
            logger.error("%s", e)
            raise SystemExit(1)
        if not status:
            logger.error("Could not load %s: %s", args.load, status.value)
            raise SystemExit(1)
        settings = load_settings(args.load)
    else:
        settings = settings_from_args(args)
        grid, report = generate_world(settings, cols=args.cols, rows=args.rows)
        print(f"Seed: {report.seed}")
        print(
            f"Placed {len(report.placement.continents)}/{settings.continents} continents, "
            f"{len(report.placement.islands)}/{settings.islands} islands, "
            f"{len(report.rivers)} rivers"
        )
        settings.seed = report.seed

    print_summary(grid)

    if args.save is not None:
        path = save_grid(grid, settings, file_path=args.save)
        print(f"Saved map to {path}")

    if not args.no_view:
        choice = MapView(grid).run()
        if choice:
            cell = grid.get_cell(*choice)
            print(f"Selected tile {choice}: {cell.terrain.value}")


if __name__ == "__main__":
    main()
