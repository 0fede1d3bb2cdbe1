"""Core domain models for voxelcollapse.

Pure models with no I/O beyond config loading. Tiles and settings are
immutable (frozen Pydantic models).

Usage:
    from voxelcollapse.core import Coord, Direction, Tile, TileCatalog, GeneratorConfig
"""

# Types
from .types import Coord, Direction

# Errors
from .errors import (
    VoxelCollapseError,
    ConfigError,
    CatalogError,
    UnknownTileError,
    InvalidCoordError,
    CellStateError,
)

# Catalog
from .catalog import Tile, TileCatalog, AsymmetricRule

# Config
from .config import (
    StartPolicy,
    BoundaryConfig,
    UsageLimit,
    PacingConfig,
    GeneratorConfig,
    check_config,
    config_from_dict,
    load_config,
)

__all__ = [
    # Types
    "Coord",
    "Direction",
    # Errors
    "VoxelCollapseError",
    "ConfigError",
    "CatalogError",
    "UnknownTileError",
    "InvalidCoordError",
    "CellStateError",
    # Catalog
    "Tile",
    "TileCatalog",
    "AsymmetricRule",
    # Config
    "StartPolicy",
    "BoundaryConfig",
    "UsageLimit",
    "PacingConfig",
    "GeneratorConfig",
    "check_config",
    "config_from_dict",
    "load_config",
]
