"""
Weighted random selection from a candidate domain.

Tiles with higher weights are proportionally more likely to be chosen.
An empty domain never aborts generation: the configured fallback tile is
used instead and a diagnostic is recorded.
"""

import logging
import random
from dataclasses import dataclass

from voxelcollapse.core.catalog import TileCatalog
from voxelcollapse.core.types import Coord
from voxelcollapse.logging_config import log_fallback

from .propagator import CandidateDomain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A cell whose candidate domain was empty, so the fallback tile was used."""
    coord: Coord
    cause: str
    fallback_tile_id: str

    def __str__(self) -> str:
        return f"{self.coord}: {self.cause} -> {self.fallback_tile_id}"


@dataclass(frozen=True)
class Selection:
    """The outcome of choosing a tile for one cell."""
    tile_id: str
    diagnostic: Diagnostic | None = None

    @property
    def fallback(self) -> bool:
        return self.diagnostic is not None


class WeightedSelector:
    """Picks one tile from a domain using an injected random source."""

    def __init__(self, catalog: TileCatalog, rng: random.Random, fallback_tile_id: str):
        self.catalog = catalog
        self.rng = rng
        self.fallback_tile_id = fallback_tile_id

    def pick(self, tiles: tuple[str, ...] | list[str]) -> str | None:
        """
        Weighted random choice; None for an empty domain.

        Draws u in [0, total) and returns the first tile whose running weight
        exceeds u. A single candidate is returned without drawing.
        """
        if not tiles:
            return None
        if len(tiles) == 1:
            return tiles[0]

        weights = [self.catalog.weight(tile_id) for tile_id in tiles]
        total = sum(weights)
        draw = self.rng.random() * total

        running = 0.0
        for tile_id, weight in zip(tiles, weights):
            running += weight
            if running > draw:
                return tile_id

        # Float rounding can leave the draw at the very top of the range
        return tiles[-1]

    def choose(self, domain: CandidateDomain) -> Selection:
        """Select a tile for domain.coord, falling back when the domain is empty."""
        tile_id = self.pick(domain.tiles)
        if tile_id is not None:
            return Selection(tile_id)

        diagnostic = Diagnostic(
            coord=domain.coord,
            cause=domain.describe_cause(),
            fallback_tile_id=self.fallback_tile_id,
        )
        log_fallback(logger, domain.coord, diagnostic.cause, self.fallback_tile_id)
        return Selection(self.fallback_tile_id, diagnostic)
