"""
Per-tile placement counters and quota enforcement.

Every committed cell is counted, whether it was forced by the boundary
policy or picked by the selector. A capped tile stops being eligible once
its count reaches the cap.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class UsageEntry:
    """One line of the usage summary."""
    tile_id: str
    count: int
    cap: int | None
    description: str = ""

    @property
    def limit_reached(self) -> bool:
        return self.cap is not None and self.count >= self.cap

    def __str__(self) -> str:
        cap = "unlimited" if self.cap is None else str(self.cap)
        status = " (LIMIT REACHED)" if self.limit_reached else ""
        description = f" - {self.description}" if self.description else ""
        return f"{self.tile_id}: {self.count}/{cap}{status}{description}"


class UsageTracker:
    """Counts placements and answers whether a tile may still be placed."""

    def __init__(
        self,
        caps: Mapping[str, int],
        enforce: bool = True,
        descriptions: Mapping[str, str] | None = None,
    ):
        """
        Args:
            caps: Tile id -> maximum placements per run (absent = unlimited)
            enforce: When False, caps are reported but never exclude a tile
            descriptions: Optional note per capped tile for the summary
        """
        self.caps = dict(caps)
        self.enforce = enforce
        self.descriptions = dict(descriptions or {})
        self._counts: Counter[str] = Counter()

    def record(self, tile_id: str):
        """Count one placement of tile_id."""
        self._counts[tile_id] += 1

    def count(self, tile_id: str) -> int:
        return self._counts[tile_id]

    def is_eligible(self, tile_id: str) -> bool:
        """True if the tile has no cap, caps are off, or it is under its cap."""
        if not self.enforce:
            return True
        cap = self.caps.get(tile_id)
        return cap is None or self._counts[tile_id] < cap

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def reset(self):
        """Zero every counter."""
        self._counts.clear()

    def summary(self, tile_ids: list[str] | tuple[str, ...] | None = None) -> tuple[UsageEntry, ...]:
        """
        Usage per tile.

        Args:
            tile_ids: Tiles to report, in order. Defaults to every capped tile
                      followed by every other tile that was placed.
        """
        if tile_ids is None:
            tile_ids = list(self.caps)
            tile_ids += [t for t in self._counts if t not in self.caps]
        return tuple(
            UsageEntry(
                tile_id=tile_id,
                count=self._counts[tile_id],
                cap=self.caps.get(tile_id),
                description=self.descriptions.get(tile_id, ""),
            )
            for tile_id in tile_ids
        )
