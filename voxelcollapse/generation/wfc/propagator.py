"""
Constraint propagation for a single cell.

The candidate domain of a free cell starts as every tile allowed on its
level and still under quota, then is narrowed by each assigned neighbor:
a tile survives only if that neighbor accepts it across the face that
points back at the cell.

This is one-shot local consistency. Cells assigned earlier are never
re-examined, so results depend on visitation order.
"""

from dataclasses import dataclass

from voxelcollapse.core.catalog import TileCatalog
from voxelcollapse.core.types import Coord, Direction

from .grid import VoxelGrid
from .usage import UsageTracker


@dataclass(frozen=True)
class CandidateDomain:
    """
    The tiles still valid for a cell, in catalog order.

    Attributes:
        coord: The cell the domain belongs to
        tiles: Surviving tile ids (may be empty)
        emptied_by: Direction of the neighbor whose rules emptied the domain,
                    or None if it was empty before any neighbor was applied
    """
    coord: Coord
    tiles: tuple[str, ...]
    emptied_by: Direction | None = None

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def describe_cause(self) -> str:
        """Human-readable reason for an empty domain."""
        if self.emptied_by is None:
            level = "ground" if self.coord.is_ground else "aerial"
            return f"no {level} tile is under its usage cap"
        return f"neighbor to the {self.emptied_by.value} accepts none of the remaining tiles"


class ConstraintPropagator:
    """Computes candidate domains from the catalog, quotas and assigned neighbors."""

    def __init__(self, catalog: TileCatalog, grid: VoxelGrid, usage: UsageTracker):
        self.catalog = catalog
        self.grid = grid
        self.usage = usage

    def base_domain(self, y: int) -> list[str]:
        """Tiles placeable on level y that are not exhausted."""
        return [
            tile.id
            for tile in self.catalog
            if tile.eligible_at_level(y) and self.usage.is_eligible(tile.id)
        ]

    def candidate_domain(self, coord: Coord) -> CandidateDomain:
        """
        Narrow the base domain of coord by every assigned neighbor.

        Stops at the first neighbor that leaves nothing.
        """
        domain = self.base_domain(coord.y)
        if not domain:
            return CandidateDomain(coord, ())

        for direction, adjacent in self.grid.neighbors(coord):
            neighbor_tile = self.grid.tile_at(adjacent)
            if neighbor_tile is None:
                continue

            # The neighbor looks back at us through the opposite face
            allowed = self.catalog.compatible(neighbor_tile, direction.opposite)
            domain = [tile_id for tile_id in domain if tile_id in allowed]

            if not domain:
                return CandidateDomain(coord, (), emptied_by=direction)

        return CandidateDomain(coord, tuple(domain))
