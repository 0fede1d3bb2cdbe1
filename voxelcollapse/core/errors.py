"""Exceptions raised by voxelcollapse.

Recoverable solver situations (empty candidate domain, exhausted quota,
unreached cells) are not exceptions; they are reported on the generation
result. Everything here is fatal for the operation that raised it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Coord


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class VoxelCollapseError(Exception):
    """Base exception for voxelcollapse errors."""

    pass


class ConfigError(VoxelCollapseError):
    """Generation settings are invalid; no run may begin."""

    pass


class CatalogError(ConfigError):
    """The tile catalog is malformed."""

    pass


class UnknownTileError(CatalogError, KeyError):
    """A tile id is not present in the catalog."""

    def __init__(self, tile_id: str):
        super().__init__(f"Unknown tile '{tile_id}'")
        self.tile_id = tile_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidCoordError(VoxelCollapseError):
    """Coordinate is outside the grid bounds."""

    def __init__(self, message: str, coord: Coord | None = None):
        super().__init__(message)
        self.coord = coord


class CellStateError(VoxelCollapseError):
    """A cell was asked to make an illegal state transition."""

    def __init__(self, message: str, coord: Coord | None = None):
        super().__init__(message)
        self.coord = coord
