"""World generation for voxelcollapse."""

from .builder import WorldBuilder, RecordingSpawner
from .tileset import (
    load_catalog,
    load_default_catalog,
    catalog_from_dict,
    make_bidirectional_rule,
    DEFAULT_CATALOG_PATH,
    DEFAULT_CONFIG_PATH,
)

__all__ = [
    "WorldBuilder",
    "RecordingSpawner",
    "load_catalog",
    "load_default_catalog",
    "catalog_from_dict",
    "make_bidirectional_rule",
    "DEFAULT_CATALOG_PATH",
    "DEFAULT_CONFIG_PATH",
]
