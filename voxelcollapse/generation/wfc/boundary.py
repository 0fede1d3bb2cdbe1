"""
Boundary policy: which cells are forced to a designated tile.

A cell is in the boundary region when it lies within `thickness` cells of an
enabled edge. Boundary cells skip propagation and selection entirely.
"""

from voxelcollapse.core.config import BoundaryConfig
from voxelcollapse.core.types import Coord


class BoundaryPolicy:
    """Classifies coordinates as forced-boundary or free."""

    def __init__(self, config: BoundaryConfig, dimensions: tuple[int, int, int]):
        self.config = config
        self.width, self.height, self.depth = dimensions

    @property
    def active(self) -> bool:
        """Forcing only happens when enabled and a boundary tile is configured."""
        return self.config.enabled and self.config.tile_id is not None

    def is_boundary(self, coord: Coord) -> bool:
        """Check whether a coordinate lies inside any enabled edge region."""
        t = self.config.thickness
        if t <= 0:
            return False

        if self.config.x_edges and (coord.x < t or coord.x >= self.width - t):
            return True
        if self.config.z_edges and (coord.z < t or coord.z >= self.depth - t):
            return True
        if self.config.y_bottom and coord.y < t:
            return True
        if self.config.y_top and coord.y >= self.height - t:
            return True
        return False

    def forced_tile(self, coord: Coord) -> str | None:
        """The tile this coordinate must take, or None if it is free."""
        if self.active and self.is_boundary(coord):
            return self.config.tile_id
        return None
