"""
World building on top of the collapse solver.

WorldBuilder is the driver: it owns one solver, forwards committed cells to
a spawner, and paces generation for animation. Pacing is cooperative; the
solver only ever advances between suspensions, so clear() can never observe
a half-committed cell.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable

from voxelcollapse.core.catalog import TileCatalog
from voxelcollapse.core.config import GeneratorConfig
from voxelcollapse.core.types import Coord
from voxelcollapse.logging_config import log_run

from .wfc import CollapseSolver, GenerationResult, StepResult

logger = logging.getLogger(__name__)


class RecordingSpawner:
    """
    In-memory spawner that records what would be instantiated.

    Stands in for a scene/prefab collaborator: keeps coord -> asset reference
    (falling back to the tile id for tiles without an asset).
    """

    def __init__(self, catalog: TileCatalog):
        self.catalog = catalog
        self.instances: dict[Coord, str] = {}
        self.spawn_count = 0

    def __call__(self, coord: Coord, tile_id: str) -> None:
        tile = self.catalog.get(tile_id)
        self.instances[coord] = tile.asset or tile.id
        self.spawn_count += 1

    def clear(self) -> None:
        self.instances.clear()


class WorldBuilder:
    """
    Drives generation runs for one catalog and configuration.

    Usage:
        builder = WorldBuilder(catalog, config, spawner=RecordingSpawner(catalog))
        result = builder.generate()

    Or animated, from an asyncio driver:
        result = await builder.generate_paced(on_step=render)
    """

    def __init__(
        self,
        catalog: TileCatalog,
        config: GeneratorConfig,
        spawner: Callable[[Coord, str], None] | None = None,
        on_clear: Callable[[], None] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            catalog: Tiles to place
            config: Generator settings
            spawner: Called with (coord, tile_id) for every committed cell
            on_clear: Called when the world is cleared so the spawner can
                      drop its instances. Defaults to spawner.clear if present.
            rng: Random source; defaults to random.Random(config.seed)

        Raises:
            ConfigError: If the settings are invalid for this catalog
        """
        self.catalog = catalog
        self.config = config
        self.solver = CollapseSolver(catalog, config, rng=rng, spawner=spawner)
        if on_clear is None and spawner is not None:
            on_clear = getattr(spawner, "clear", None)
        self._on_clear = on_clear

        # Bumped by clear(); a paced run stops when it sees a new value
        self._generation = 0

    @property
    def total_cells(self) -> int:
        return self.config.total_cells

    def generate(
        self,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> GenerationResult:
        """
        Run generation to completion without pacing.

        Args:
            progress_callback: Optional callback(collapsed, total_cells)

        Returns:
            The finished GenerationResult
        """
        total = self.total_cells
        for _ in self.solver:
            if progress_callback is not None:
                progress_callback(self.solver.collapsed_count, total)
        return self.solver.result()

    async def generate_paced(
        self,
        on_step: Callable[[StepResult], None] | None = None,
    ) -> GenerationResult | None:
        """
        Run generation, suspending between batches of steps.

        When pacing is enabled, sleeps `pacing.delay` seconds after every
        `pacing.batch_size` steps; otherwise yields to the event loop once per
        batch. If clear() is called while suspended or from on_step, the run
        ends before another cell is committed and None is returned.
        """
        pacing = self.config.pacing
        delay = pacing.delay if pacing.enabled else 0
        generation = self._generation
        since_pause = 0

        for step in self.solver:
            if on_step is not None:
                on_step(step)
            if generation != self._generation:
                log_run(logger, "CANCELLED", f"during {step.coord}")
                return None

            since_pause += 1
            if since_pause < pacing.batch_size:
                continue
            since_pause = 0

            await asyncio.sleep(delay)
            if generation != self._generation:
                log_run(logger, "CANCELLED", f"after {step.coord}")
                return None

        return self.solver.result()

    def clear(self) -> None:
        """Reset grid, counters and spawned instances; cancel any paced run."""
        self._generation += 1
        self.solver.clear()
        if self._on_clear is not None:
            self._on_clear()

    def regenerate(self, seed: int | None = None) -> GenerationResult:
        """Clear, optionally reseed, and generate again."""
        self.clear()
        if seed is not None:
            self.solver.reseed(seed)
        return self.generate()
