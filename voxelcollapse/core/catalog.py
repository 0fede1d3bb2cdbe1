"""Tile catalog for voxelcollapse.

A Tile is a discrete unit that can occupy a voxel. Each tile declares, per
face, which other tiles it accepts as a neighbor across that face. Rules are
directed: A accepting B eastward says nothing about B accepting A westward.

The catalog is an arena of Tile records in authored order. Tiles refer to
each other only by id, never by object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import CatalogError, UnknownTileError
from .types import Direction


class Tile(BaseModel):
    """A placeable tile definition.

    Attributes:
        id: Unique identifier (e.g., "grass", "wall")
        name: Display name; defaults to the id
        asset: Opaque visual-asset reference handed to the spawner untouched
        weight: Selection weight, strictly positive. Higher = more common.
        can_be_ground: Placeable on the lowest level (y == 0)
        can_be_aerial: Placeable on any level above ground
        max_count: Usage cap for one generation run (None = unlimited)
        connections: For each direction, the tile ids accepted across that face
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    asset: str | None = None
    weight: float = Field(default=1.0, gt=0)
    can_be_ground: bool = True
    can_be_aerial: bool = True
    max_count: int | None = Field(default=None, ge=0)
    connections: dict[Direction, frozenset[str]] = Field(default_factory=dict)

    @field_validator("connections")
    @classmethod
    def _cover_every_direction(
        cls, value: dict[Direction, frozenset[str]]
    ) -> dict[Direction, frozenset[str]]:
        # Missing faces accept nothing
        return {d: frozenset(value.get(d, frozenset())) for d in Direction}

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def compatible(self, direction: Direction) -> frozenset[str]:
        """Tile ids this tile accepts across the given face."""
        return self.connections[direction]

    def accepts(self, direction: Direction, tile_id: str) -> bool:
        """Check whether tile_id may sit on the given side of this tile."""
        return tile_id in self.connections[direction]

    def eligible_at_level(self, y: int) -> bool:
        """Ground tiles go on level 0, aerial tiles on every level above."""
        if y == 0:
            return self.can_be_ground
        return self.can_be_aerial


@dataclass(frozen=True)
class AsymmetricRule:
    """A one-directional compatibility rule.

    `tile_id` accepts `neighbor_id` across `direction`, but `neighbor_id`
    does not accept `tile_id` across the opposite face.
    """

    tile_id: str
    direction: Direction
    neighbor_id: str

    def __str__(self) -> str:
        return (
            f"{self.tile_id} accepts {self.neighbor_id} to the {self.direction.value}, "
            f"but {self.neighbor_id} does not accept {self.tile_id} to the "
            f"{self.direction.opposite.value}"
        )


class TileCatalog:
    """Immutable, index-based collection of tiles.

    Iteration follows authored order, which is also the order of every
    candidate domain built from this catalog.
    """

    def __init__(self, tiles: Iterable[Tile]):
        self._tiles: tuple[Tile, ...] = tuple(tiles)
        if not self._tiles:
            raise CatalogError("Tile catalog is empty")

        self._index: dict[str, int] = {}
        for i, tile in enumerate(self._tiles):
            if tile.id in self._index:
                raise CatalogError(f"Duplicate tile id '{tile.id}'")
            self._index[tile.id] = i

        for tile in self._tiles:
            for direction, accepted in tile.connections.items():
                unknown = accepted.difference(self._index)
                if unknown:
                    raise CatalogError(
                        f"Tile '{tile.id}' references unknown tiles to the "
                        f"{direction.value}: {sorted(unknown)}"
                    )

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._index

    @property
    def ids(self) -> tuple[str, ...]:
        """All tile ids in authored order."""
        return tuple(tile.id for tile in self._tiles)

    @property
    def first(self) -> Tile:
        return self._tiles[0]

    def get(self, tile_id: str) -> Tile:
        """Look up a tile by id.

        Raises:
            UnknownTileError: If the id is not in the catalog
        """
        try:
            return self._tiles[self._index[tile_id]]
        except KeyError:
            raise UnknownTileError(tile_id) from None

    def compatible(self, tile_id: str, direction: Direction) -> frozenset[str]:
        return self.get(tile_id).compatible(direction)

    def eligible_at_level(self, tile_id: str, y: int) -> bool:
        return self.get(tile_id).eligible_at_level(y)

    def weight(self, tile_id: str) -> float:
        return self.get(tile_id).weight

    def usage_cap(self, tile_id: str) -> int | None:
        return self.get(tile_id).max_count

    def find_asymmetric_rules(self) -> list[AsymmetricRule]:
        """List every rule that is not reciprocated by its neighbor.

        These are kept as authored. Whether each one is intended or an
        authoring slip can only be decided by whoever wrote the catalog.
        """
        rules: list[AsymmetricRule] = []
        for tile in self._tiles:
            for direction in Direction:
                for neighbor_id in sorted(tile.compatible(direction)):
                    neighbor = self.get(neighbor_id)
                    if not neighbor.accepts(direction.opposite, tile.id):
                        rules.append(AsymmetricRule(tile.id, direction, neighbor_id))
        return rules
