"""voxelcollapse - constraint-propagation tile placement for voxel worlds."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from voxelcollapse.core.catalog import TileCatalog
from voxelcollapse.core.config import load_config
from voxelcollapse.core.errors import ConfigError
from voxelcollapse.generation import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_CONFIG_PATH,
    RecordingSpawner,
    WorldBuilder,
    load_catalog,
)
from voxelcollapse.generation.wfc import GenerationResult, StepResult
from voxelcollapse.logging_config import setup_logging

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
UNASSIGNED_SYMBOL = "?"


def symbol_table(catalog: TileCatalog) -> dict[str, str]:
    """Assign each tile a distinct single-character symbol for layer dumps.

    Prefers the first letter of the id, then later letters, then digits.
    """
    used: set[str] = {UNASSIGNED_SYMBOL}
    symbols: dict[str, str] = {}
    for tile in catalog:
        candidates = [c for c in tile.id if c.isalnum()]
        candidates += [c.upper() for c in candidates] + list("0123456789")
        symbol = next((c for c in candidates if c not in used), "#")
        used.add(symbol)
        symbols[tile.id] = symbol
    return symbols


def format_layer(result: GenerationResult, y: int, symbols: dict[str, str]) -> list[str]:
    """Render one height level as text rows, north (+Z) at the top."""
    rows = []
    for row in reversed(result.layer(y)):
        rows.append(" ".join(
            symbols.get(tile_id, "#") if tile_id is not None else UNASSIGNED_SYMBOL
            for tile_id in row
        ))
    return rows


def print_report(
    result: GenerationResult,
    catalog: TileCatalog,
    show_layers: bool = False,
) -> None:
    """Print the usage summary, fallbacks and coverage of a run."""
    width, height, depth = result.dimensions
    print(f"Generated {result.collapsed_count}/{width * height * depth} cells ({width}x{height}x{depth})")

    print()
    print("=== Tile Usage Summary ===")
    for entry in result.usage:
        print(f"  {entry}")

    if result.diagnostics:
        print()
        print(f"Fallbacks ({result.fallback_count}):")
        for diagnostic in result.diagnostics:
            print(f"  {diagnostic}")

    if not result.is_complete:
        print()
        print(f"Unassigned cells: {result.unassigned_count}")

    if result.spawn_failures:
        print()
        print(f"Spawn failures: {len(result.spawn_failures)}")

    if show_layers:
        symbols = symbol_table(catalog)
        print()
        print("Legend: " + ", ".join(f"{s}={t}" for t, s in symbols.items()))
        for y in range(height):
            print()
            print(f"Level {y}:")
            for row in format_layer(result, y, symbols):
                print(f"  {row}")


def print_audit(catalog: TileCatalog) -> None:
    """List one-directional compatibility rules."""
    rules = catalog.find_asymmetric_rules()
    print(f"One-directional rules ({len(rules)}):")
    for rule in rules:
        print(f"  {rule}")
    print()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for voxelcollapse."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="voxelcollapse - tile placement for voxel worlds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  voxelcollapse                                  # Sample village, random seed
  voxelcollapse --seed 7 --layers                # Reproducible run with layer dump
  voxelcollapse --catalog tiles.yaml --config world.yaml --audit
  voxelcollapse --animate                        # Paced run, one line per cell
        """,
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=Path(os.environ.get("VOXELCOLLAPSE_CATALOG", DEFAULT_CATALOG_PATH)),
        help="Tile catalog YAML (default: sample village catalog)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ.get("VOXELCOLLAPSE_CONFIG", DEFAULT_CONFIG_PATH)),
        help="Generator settings YAML (default: sample village settings)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides the config file)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path(os.environ.get("VOXELCOLLAPSE_DATA", "data")),
        help="Data directory for debug.log (default: data/)",
    )
    parser.add_argument(
        "--layers",
        action="store_true",
        help="Print every height level as a character map",
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="List one-directional compatibility rules in the catalog",
    )
    parser.add_argument(
        "--animate",
        action="store_true",
        help="Run with the paced driver and print each committed cell",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args(argv)

    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(args.data, console_level=console_level)

    from voxelcollapse import __version__
    print(f"voxelcollapse v{__version__}")
    print(f"Catalog: {args.catalog}")
    print(f"Config: {args.config}")
    print(f"Log file: {log_path}")
    print()

    try:
        catalog = load_catalog(args.catalog)
        config = load_config(args.config)
        if args.seed is not None:
            config = config.with_seed(args.seed)
        builder = WorldBuilder(catalog, config, spawner=RecordingSpawner(catalog))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.audit:
        print_audit(catalog)

    if args.animate:
        def show_step(step: StepResult) -> None:
            marker = " (boundary)" if step.forced else " (fallback)" if step.fallback else ""
            print(f"  {step.coord} -> {step.tile_id}{marker}")

        result = asyncio.run(builder.generate_paced(on_step=show_step))
        print()
    else:
        result = builder.generate()

    print_report(result, catalog, show_layers=args.layers)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
