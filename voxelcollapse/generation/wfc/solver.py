"""
Worklist collapse solver.

This is the heart of voxelcollapse - the loop that walks the grid outward
from a start cell and commits one tile per cell.

The algorithm:
1. Seed the frontier (FIFO) with the start coordinate
2. Pop a coordinate; skip it if already assigned
3. Boundary cells take the boundary tile; free cells get a candidate domain
   from their assigned neighbors and a weighted random pick from it
4. Commit: assign, count usage, notify the spawner
5. Queue every unassigned in-bounds neighbor
6. Repeat until the frontier is empty
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator

from voxelcollapse.core.catalog import TileCatalog
from voxelcollapse.core.config import GeneratorConfig, check_config
from voxelcollapse.core.types import Coord
from voxelcollapse.logging_config import log_collapse, log_run, log_usage

from .boundary import BoundaryPolicy
from .grid import CellState, VoxelGrid
from .propagator import ConstraintPropagator
from .selector import Diagnostic, WeightedSelector
from .usage import UsageEntry, UsageTracker

logger = logging.getLogger(__name__)

# Called once per committed cell with (coord, tile_id)
SpawnCallback = Callable[[Coord, str], None]


class SolverState(Enum):
    """The current state of the collapse solver."""
    IDLE = auto()       # Nothing seeded yet (fresh or cleared)
    RUNNING = auto()    # Frontier seeded, more steps may follow
    COMPLETE = auto()   # Frontier drained


@dataclass(frozen=True)
class StepResult:
    """One committed cell."""
    coord: Coord
    tile_id: str
    forced: bool = False     # Taken from the boundary policy
    fallback: bool = False   # Candidate domain was empty


@dataclass(frozen=True)
class GenerationResult:
    """
    Everything a finished (or paused) run produced.

    Cells the frontier never reached stay out of `assignments` and are counted
    in `unassigned_count`; callers must not assume full coverage.
    """
    dimensions: tuple[int, int, int]
    assignments: dict[Coord, str]
    diagnostics: tuple[Diagnostic, ...]
    usage: tuple[UsageEntry, ...]
    unassigned_count: int
    collapsed_count: int
    spawn_failures: tuple[Coord, ...] = ()

    @property
    def is_complete(self) -> bool:
        return self.unassigned_count == 0

    @property
    def fallback_count(self) -> int:
        return len(self.diagnostics)

    def tile_at(self, coord: Coord) -> str | None:
        return self.assignments.get(coord)

    def usage_for(self, tile_id: str) -> UsageEntry | None:
        for entry in self.usage:
            if entry.tile_id == tile_id:
                return entry
        return None

    def layer(self, y: int) -> list[list[str | None]]:
        """Tile ids of one height level, indexed as layer[z][x]."""
        width, _, depth = self.dimensions
        return [
            [self.assignments.get(Coord(x, y, z)) for x in range(width)]
            for z in range(depth)
        ]


class CollapseSolver:
    """
    The worklist collapse algorithm.

    Usage:
        solver = CollapseSolver(catalog, config)
        while (step := solver.step()) is not None:
            ...  # animate step.coord / step.tile_id

    Or iterate it:
        for step in solver:
            ...

    Or for bulk solving:
        result = solver.run()
    """

    def __init__(
        self,
        catalog: TileCatalog,
        config: GeneratorConfig,
        rng: random.Random | None = None,
        spawner: SpawnCallback | None = None,
    ):
        """
        Initialize the solver.

        Args:
            catalog: The tiles to place
            config: Grid size, start, boundary, limits and seed
            rng: Random source; defaults to random.Random(config.seed)
            spawner: Optional callback(coord, tile_id) invoked after each commit

        Raises:
            ConfigError: If the settings are invalid for this catalog
        """
        check_config(config, catalog)

        self.catalog = catalog
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        self.spawner = spawner

        self.grid = VoxelGrid(*config.dimensions)
        self.usage = UsageTracker(
            config.usage_caps(catalog),
            enforce=config.enforce_limits,
            descriptions=config.limit_descriptions(),
        )
        self.boundary = BoundaryPolicy(config.boundary, config.dimensions)
        self.propagator = ConstraintPropagator(catalog, self.grid, self.usage)
        self.selector = WeightedSelector(catalog, self.rng, config.fallback_tile(catalog))

        self.frontier: deque[Coord] = deque()
        self.state = SolverState.IDLE
        self.step_count = 0
        self.diagnostics: list[Diagnostic] = []
        self.spawn_failures: list[Coord] = []

    @property
    def collapsed_count(self) -> int:
        """Number of cells committed this run."""
        return self.step_count

    def _seed(self):
        start = self.config.start_coordinate
        self.grid.mark_queued(start)
        self.frontier.append(start)
        self.state = SolverState.RUNNING
        width, height, depth = self.config.dimensions
        log_run(logger, "STARTED", f"start={start} | size={width}x{height}x{depth}")

    def step(self) -> StepResult | None:
        """
        Collapse the next cell on the frontier.

        Returns the committed cell, or None once the frontier is empty.
        """
        if self.state == SolverState.COMPLETE:
            return None
        if self.state == SolverState.IDLE:
            self._seed()

        while self.frontier:
            coord = self.frontier.popleft()

            # A coordinate is processed at most once
            if self.grid.state(coord) == CellState.ASSIGNED:
                continue

            result = self._collapse(coord)
            self._enqueue_neighbors(coord)
            return result

        self._finish()
        return None

    def __iter__(self) -> Iterator[StepResult]:
        while True:
            result = self.step()
            if result is None:
                return
            yield result

    def run(self) -> GenerationResult:
        """Run the solver until the frontier is empty."""
        for _ in self:
            pass
        return self.result()

    def _collapse(self, coord: Coord) -> StepResult:
        forced = self.boundary.forced_tile(coord)
        if forced is not None:
            self._commit(coord, forced, "boundary")
            return StepResult(coord, forced, forced=True)

        domain = self.propagator.candidate_domain(coord)
        selection = self.selector.choose(domain)
        if selection.diagnostic is not None:
            self.diagnostics.append(selection.diagnostic)

        self._commit(coord, selection.tile_id, "fallback" if selection.fallback else "selected")
        return StepResult(coord, selection.tile_id, fallback=selection.fallback)

    def _commit(self, coord: Coord, tile_id: str, source: str):
        self.grid.assign(coord, tile_id)
        self.usage.record(tile_id)
        self.step_count += 1
        log_collapse(logger, self.step_count, coord, tile_id, source)

        if self.spawner is None:
            return
        # Committed state stands whatever the spawner does
        try:
            self.spawner(coord, tile_id)
        except Exception:
            logger.exception(f"Spawner failed at {coord} for tile '{tile_id}'")
            self.spawn_failures.append(coord)

    def _enqueue_neighbors(self, coord: Coord):
        for _, adjacent in self.grid.neighbors(coord):
            if self.grid.state(adjacent) == CellState.UNASSIGNED:
                self.grid.mark_queued(adjacent)
                self.frontier.append(adjacent)

    def _finish(self):
        self.state = SolverState.COMPLETE
        unassigned = self.grid.size - self.step_count
        log_run(
            logger,
            "COMPLETE",
            f"collapsed={self.step_count} | fallbacks={len(self.diagnostics)} | unassigned={unassigned}",
        )
        if unassigned:
            logger.warning(f"{unassigned} cells were never reached from {self.config.start_coordinate}")
        log_usage(logger, self.usage.summary(self.catalog.ids))

    def result(self) -> GenerationResult:
        """Snapshot of the current run."""
        return GenerationResult(
            dimensions=self.grid.dimensions,
            assignments=self.grid.assignments(),
            diagnostics=tuple(self.diagnostics),
            usage=self.usage.summary(self.catalog.ids),
            unassigned_count=self.grid.size - self.step_count,
            collapsed_count=self.step_count,
            spawn_failures=tuple(self.spawn_failures),
        )

    def reseed(self, seed: int | None):
        """Reseed the random source in place (None = fresh OS entropy)."""
        self.rng.seed(seed)

    def clear(self):
        """Drop all run state: frontier, cell states, counters and diagnostics."""
        self.frontier.clear()
        self.grid.reset()
        self.usage.reset()
        self.diagnostics.clear()
        self.spawn_failures.clear()
        self.step_count = 0
        self.state = SolverState.IDLE
        log_run(logger, "CLEARED")
