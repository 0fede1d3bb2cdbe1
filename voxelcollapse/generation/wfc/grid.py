"""
Voxel grid for the collapse solver.

The grid is a dense 3D array of cells. Each cell walks a one-way state
machine: UNASSIGNED -> QUEUED -> ASSIGNED. Once assigned, a cell holds
exactly one tile id and is never revisited.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from voxelcollapse.core.errors import CellStateError, InvalidCoordError
from voxelcollapse.core.types import Coord, Direction


class CellState(Enum):
    """Lifecycle of a single cell within one run."""
    UNASSIGNED = "unassigned"  # Not yet reached by the frontier
    QUEUED = "queued"          # On the frontier, waiting to collapse
    ASSIGNED = "assigned"      # Collapsed to a tile (terminal)


@dataclass
class Cell:
    """
    A single cell in the voxel grid.

    Before collapse: no tile, state UNASSIGNED or QUEUED
    After collapse: state ASSIGNED and tile_id set
    """
    x: int
    y: int
    z: int
    state: CellState = CellState.UNASSIGNED
    tile_id: str | None = None

    def __hash__(self):
        """Hash by position - cells are unique by their grid location."""
        return hash((self.x, self.y, self.z))

    def __eq__(self, other):
        """Two cells are equal if they have the same position."""
        if not isinstance(other, Cell):
            return False
        return (self.x, self.y, self.z) == (other.x, other.y, other.z)

    @property
    def coord(self) -> Coord:
        return Coord(self.x, self.y, self.z)

    @property
    def assigned(self) -> bool:
        return self.state == CellState.ASSIGNED

    def enqueue(self):
        """Move UNASSIGNED -> QUEUED."""
        if self.state != CellState.UNASSIGNED:
            raise CellStateError(
                f"Cannot queue cell {self.coord} in state {self.state.value}", self.coord
            )
        self.state = CellState.QUEUED

    def collapse_to(self, tile_id: str):
        """Move QUEUED -> ASSIGNED with the given tile."""
        if self.state != CellState.QUEUED:
            raise CellStateError(
                f"Cannot assign cell {self.coord} in state {self.state.value}", self.coord
            )
        self.state = CellState.ASSIGNED
        self.tile_id = tile_id

    def clear(self):
        self.state = CellState.UNASSIGNED
        self.tile_id = None


class VoxelGrid:
    """
    The 3D grid of cells for one generation run.

    Dimensions are fixed at construction. Cells are stored as cells[y][z][x].
    """

    def __init__(self, width: int, height: int, depth: int):
        """
        Create a grid with every cell UNASSIGNED.

        Args:
            width: Number of cells along X
            height: Number of levels along Y (level 0 is ground)
            depth: Number of cells along Z
        """
        self.width = width
        self.height = height
        self.depth = depth

        self.cells: list[list[list[Cell]]] = [
            [
                [Cell(x=x, y=y, z=z) for x in range(width)]
                for z in range(depth)
            ]
            for y in range(height)
        ]

    @property
    def dimensions(self) -> tuple[int, int, int]:
        return (self.width, self.height, self.depth)

    @property
    def size(self) -> int:
        return self.width * self.height * self.depth

    def in_bounds(self, coord: Coord) -> bool:
        return coord.in_bounds(self.width, self.height, self.depth)

    def get_cell(self, coord: Coord) -> Cell | None:
        """Get cell at position, or None if out of bounds."""
        if self.in_bounds(coord):
            return self.cells[coord.y][coord.z][coord.x]
        return None

    def _cell(self, coord: Coord) -> Cell:
        cell = self.get_cell(coord)
        if cell is None:
            raise InvalidCoordError(f"Coordinate {coord} is outside the grid", coord)
        return cell

    def state(self, coord: Coord) -> CellState:
        return self._cell(coord).state

    def tile_at(self, coord: Coord) -> str | None:
        """The assigned tile id, or None if the cell has not collapsed."""
        return self._cell(coord).tile_id

    def mark_queued(self, coord: Coord):
        self._cell(coord).enqueue()

    def assign(self, coord: Coord, tile_id: str):
        self._cell(coord).collapse_to(tile_id)

    def neighbor(self, coord: Coord, direction: Direction) -> Coord | None:
        """
        The adjacent coordinate in a direction, or None if it lies outside the grid.
        """
        adjacent = coord + direction
        if self.in_bounds(adjacent):
            return adjacent
        return None

    def neighbors(self, coord: Coord) -> Iterator[tuple[Direction, Coord]]:
        """
        Yield the in-bounds neighbors of a coordinate with their directions.

        Direction is FROM the input coordinate TO the neighbor, in Direction order.
        """
        for direction in Direction:
            adjacent = self.neighbor(coord, direction)
            if adjacent is not None:
                yield direction, adjacent

    def all_cells(self) -> Iterator[Cell]:
        """Iterate over all cells in the grid."""
        for layer in self.cells:
            for row in layer:
                yield from row

    def count(self, state: CellState) -> int:
        return sum(1 for cell in self.all_cells() if cell.state == state)

    def unassigned(self) -> list[Coord]:
        """Coordinates of every cell that has not collapsed."""
        return [cell.coord for cell in self.all_cells() if not cell.assigned]

    def assignments(self) -> dict[Coord, str]:
        """Map of every assigned coordinate to its tile id."""
        return {
            cell.coord: cell.tile_id
            for cell in self.all_cells()
            if cell.assigned
        }

    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return all(cell.assigned for cell in self.all_cells())

    def reset(self):
        """Reset every cell to UNASSIGNED."""
        for cell in self.all_cells():
            cell.clear()
