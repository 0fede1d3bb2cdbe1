"""Foundational types for voxelcollapse.

This module defines the core types used throughout the system:
- Coord: Voxel coordinates (x, y, z), y being the height level
- Direction: The six face directions with offsets
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Face directions of a voxel.

    Member order is significant: it is the order in which neighbors are
    inspected during propagation and enqueued on the frontier.
    """

    NORTH = "north"  # +Z
    SOUTH = "south"  # -Z
    EAST = "east"  # +X
    WEST = "west"  # -X
    ABOVE = "above"  # +Y
    BELOW = "below"  # -Y

    @property
    def offset(self) -> tuple[int, int, int]:
        """Get the (dx, dy, dz) offset for this direction."""
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int, int]] = {
    Direction.NORTH: (0, 0, 1),
    Direction.SOUTH: (0, 0, -1),
    Direction.EAST: (1, 0, 0),
    Direction.WEST: (-1, 0, 0),
    Direction.ABOVE: (0, 1, 0),
    Direction.BELOW: (0, -1, 0),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.ABOVE: Direction.BELOW,
    Direction.BELOW: Direction.ABOVE,
}


class Coord(NamedTuple):
    """A cell position in the voxel grid.

    - x runs east (+X) / west (-X)
    - y is the height level, 0 being ground
    - z runs north (+Z) / south (-Z)
    """

    x: int
    y: int
    z: int

    def __add__(self, other: object) -> Coord:
        """Add a direction offset or 3-tuple to this coordinate."""
        if isinstance(other, Direction):
            dx, dy, dz = other.offset
            return Coord(self.x + dx, self.y + dy, self.z + dz)
        if isinstance(other, tuple) and len(other) == 3:
            return Coord(self.x + other[0], self.y + other[1], self.z + other[2])
        return NotImplemented

    def neighbors(self) -> dict[Direction, Coord]:
        """Get all six adjacent coordinates keyed by direction (unbounded)."""
        return {d: self + d for d in Direction}

    def in_bounds(self, width: int, height: int, depth: int) -> bool:
        """Check if the coordinate lies inside a width x height x depth grid."""
        return 0 <= self.x < width and 0 <= self.y < height and 0 <= self.z < depth

    @property
    def is_ground(self) -> bool:
        """True on the lowest height level."""
        return self.y == 0

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"
