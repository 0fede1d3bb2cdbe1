"""
Tile catalogs authored as YAML.

A catalog file lists tiles and, per face, which tiles they accept:

    tiles:
      - id: grass
        name: Grass
        asset: prefabs/grass
        weight: 2.0
        ground: true
        aerial: false
        max_count: 40          # optional usage cap
        connections:
          all: [grass]         # applies to every face
          horizontal: [path]   # north, south, east and west
          above: [air, tree]   # adds to a single face

    bidirectional:             # symmetric rules in every direction
      - [grass, path]

Rules written under `connections` are directed and kept exactly as written.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from voxelcollapse.core.catalog import Tile, TileCatalog
from voxelcollapse.core.errors import CatalogError
from voxelcollapse.core.types import Direction

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent.parent / "config"
DEFAULT_CATALOG_PATH = CONFIG_DIR / "village_catalog.yaml"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "village.yaml"

ALL_DIRECTIONS_KEY = "all"
HORIZONTAL_KEY = "horizontal"
HORIZONTAL_DIRECTIONS = (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST)

Connections = dict[str, dict[Direction, set[str]]]


def make_bidirectional_rule(connections: Connections, tile_a_id: str, tile_b_id: str) -> None:
    """
    Create a bidirectional adjacency rule: A and B can be neighbors in all directions.

    If A accepts B to its north, then B accepts A to its south, and so on
    for every face.
    """
    for tile_id in (tile_a_id, tile_b_id):
        if tile_id not in connections:
            raise CatalogError(f"Bidirectional rule names unknown tile '{tile_id}'")

    for direction in Direction:
        connections[tile_a_id][direction].add(tile_b_id)
        connections[tile_b_id][direction.opposite].add(tile_a_id)


def _parse_connections(tile_id: str, raw: dict | None) -> dict[Direction, set[str]]:
    parsed: dict[Direction, set[str]] = {d: set() for d in Direction}
    if raw is not None and not isinstance(raw, dict):
        raise CatalogError(f"Tile '{tile_id}' connections must be a mapping of direction to tile ids")
    for key, tile_ids in (raw or {}).items():
        if tile_ids is not None and not isinstance(tile_ids, list):
            raise CatalogError(f"Tile '{tile_id}' connections for '{key}' must be a list")
        if key == ALL_DIRECTIONS_KEY:
            directions = list(Direction)
        elif key == HORIZONTAL_KEY:
            directions = list(HORIZONTAL_DIRECTIONS)
        else:
            try:
                directions = [Direction(key)]
            except ValueError:
                raise CatalogError(f"Tile '{tile_id}' has unknown direction '{key}'") from None
        for direction in directions:
            parsed[direction].update(tile_ids or [])
    return parsed


def catalog_from_dict(data: dict) -> TileCatalog:
    """Build a TileCatalog from parsed YAML data."""
    entries = data.get("tiles") or []
    if not isinstance(entries, list):
        raise CatalogError("'tiles' must be a list")

    connections: Connections = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise CatalogError(f"Tile entry must be a mapping, got {entry!r}")
        if "id" not in entry:
            raise CatalogError(f"Tile entry without an id: {entry}")
        connections[entry["id"]] = _parse_connections(entry["id"], entry.get("connections"))

    for pair in data.get("bidirectional") or []:
        if not isinstance(pair, list) or len(pair) != 2:
            raise CatalogError(f"Bidirectional rule must name two tiles, got {pair}")
        make_bidirectional_rule(connections, pair[0], pair[1])

    try:
        tiles = [
            Tile(
                id=entry["id"],
                name=entry.get("name", ""),
                asset=entry.get("asset"),
                weight=entry.get("weight", 1.0),
                can_be_ground=entry.get("ground", True),
                can_be_aerial=entry.get("aerial", True),
                max_count=entry.get("max_count"),
                connections={d: frozenset(ids) for d, ids in connections[entry["id"]].items()},
            )
            for entry in entries
        ]
    except ValidationError as e:
        raise CatalogError(str(e)) from e

    return TileCatalog(tiles)


def load_catalog(path: Path | str) -> TileCatalog:
    """
    Load a tile catalog from a YAML file.

    One-directional rules are kept, but logged so authors can review them.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"{path} must contain a mapping with a 'tiles' list")

    catalog = catalog_from_dict(data)
    asymmetric = catalog.find_asymmetric_rules()
    if asymmetric:
        logger.warning(
            f"Catalog {path.name} has {len(asymmetric)} one-directional rules "
            "(kept as authored; run with --audit to list them)"
        )
    logger.debug(f"Loaded {len(catalog)} tiles from {path}")
    return catalog


def load_default_catalog() -> TileCatalog:
    """The sample village catalog shipped with the package."""
    return load_catalog(DEFAULT_CATALOG_PATH)
