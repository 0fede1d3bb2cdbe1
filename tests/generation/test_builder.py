"""Tests for WorldBuilder and the recording spawner."""

import asyncio

import pytest

from voxelcollapse.core import ConfigError, Coord, GeneratorConfig, PacingConfig, StartPolicy
from voxelcollapse.generation import RecordingSpawner, WorldBuilder, load_default_catalog
from voxelcollapse.generation.wfc import CellState, SolverState


@pytest.fixture
def paced_config() -> GeneratorConfig:
    return GeneratorConfig(
        width=5, height=3, depth=5, seed=21,
        pacing=PacingConfig(enabled=True, delay=0.01, batch_size=1),
    )


class TestRecordingSpawner:
    """Test the in-memory spawner."""

    def test_records_asset_or_id(self):
        catalog = load_default_catalog()
        spawner = RecordingSpawner(catalog)

        spawner(Coord(0, 0, 0), "grass")
        spawner(Coord(0, 1, 0), "air")

        assert spawner.instances == {
            Coord(0, 0, 0): "prefabs/Grass",
            Coord(0, 1, 0): "air",
        }
        assert spawner.spawn_count == 2

    def test_clear(self, open_catalog):
        spawner = RecordingSpawner(open_catalog)
        spawner(Coord(1, 1, 1), "a")
        spawner.clear()
        assert spawner.instances == {}


class TestGenerate:
    """Test unpaced generation."""

    def test_generate_fills_world(self, open_catalog, small_config):
        spawner = RecordingSpawner(open_catalog)
        builder = WorldBuilder(open_catalog, small_config, spawner=spawner)

        result = builder.generate()

        assert result.is_complete
        assert spawner.instances == result.assignments
        assert spawner.spawn_count == 75

    def test_progress_callback(self, open_catalog, small_config):
        progress = []
        builder = WorldBuilder(open_catalog, small_config)
        builder.generate(progress_callback=lambda done, total: progress.append((done, total)))

        assert progress[0] == (1, 75)
        assert progress[-1] == (75, 75)
        assert len(progress) == 75

    def test_invalid_config_raises(self, open_catalog):
        config = GeneratorConfig(
            width=3, height=1, depth=3,
            start=StartPolicy.EXPLICIT, start_coord=Coord(9, 0, 0),
        )
        with pytest.raises(ConfigError, match="outside"):
            WorldBuilder(open_catalog, config)

    def test_default_village(self):
        from voxelcollapse.core import load_config
        from voxelcollapse.generation import DEFAULT_CONFIG_PATH

        catalog = load_default_catalog()
        config = load_config(DEFAULT_CONFIG_PATH).with_seed(7)
        result = WorldBuilder(catalog, config).generate()

        assert result.is_complete
        assert result.usage_for("tower").count <= 3
        assert result.usage_for("water").count <= 12
        assert result.usage_for("tree").count <= 15
        # Wall palisade on the X/Z rim, all three levels
        for x in range(12):
            assert result.tile_at(Coord(x, 0, 0)) == "wall"
            assert result.tile_at(Coord(x, 2, 11)) == "wall"


class TestClearAndRegenerate:
    """Test clearing the world."""

    def test_clear_resets_everything(self, open_catalog, small_config):
        spawner = RecordingSpawner(open_catalog)
        builder = WorldBuilder(open_catalog, small_config, spawner=spawner)
        builder.generate()

        builder.clear()

        assert spawner.instances == {}
        assert builder.solver.state == SolverState.IDLE
        assert builder.solver.grid.count(CellState.UNASSIGNED) == 75
        assert builder.solver.usage.total == 0

    def test_custom_on_clear(self, open_catalog, small_config):
        cleared = []
        builder = WorldBuilder(open_catalog, small_config, on_clear=lambda: cleared.append(True))
        builder.clear()
        builder.clear()
        assert cleared == [True, True]

    def test_regenerate_with_seed_reproduces(self, open_catalog, small_config):
        builder = WorldBuilder(open_catalog, small_config)
        first = builder.generate()

        second = builder.regenerate(seed=small_config.seed)

        assert second.assignments == first.assignments

    def test_regenerate_refills_spawner(self, open_catalog, small_config):
        spawner = RecordingSpawner(open_catalog)
        builder = WorldBuilder(open_catalog, small_config, spawner=spawner)
        builder.generate()

        result = builder.regenerate(seed=3)

        assert spawner.instances == result.assignments
        assert spawner.spawn_count == 150


class TestGeneratePaced:
    """Test paced generation on the event loop."""

    @pytest.mark.asyncio
    async def test_unpaced_run_completes(self, open_catalog, small_config):
        steps = []
        builder = WorldBuilder(open_catalog, small_config)

        result = await builder.generate_paced(on_step=steps.append)

        assert result is not None
        assert result.is_complete
        assert len(steps) == 75
        assert {s.coord: s.tile_id for s in steps} == result.assignments

    @pytest.mark.asyncio
    async def test_matches_unpaced_run(self, open_catalog, paced_config):
        paced = await WorldBuilder(open_catalog, paced_config).generate_paced()
        unpaced = WorldBuilder(open_catalog, paced_config).generate()
        assert paced.assignments == unpaced.assignments

    @pytest.mark.asyncio
    async def test_sleeps_after_each_batch(self, open_catalog, monkeypatch):
        delays = []
        real_sleep = asyncio.sleep

        async def fake_sleep(delay):
            delays.append(delay)
            await real_sleep(0)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        config = GeneratorConfig(
            width=5, height=3, depth=5, seed=1,
            pacing=PacingConfig(enabled=True, delay=0.05, batch_size=4),
        )

        result = await WorldBuilder(open_catalog, config).generate_paced()

        assert result.is_complete
        assert len(delays) == 75 // 4
        assert set(delays) == {0.05}

    @pytest.mark.asyncio
    async def test_clear_while_suspended_cancels(self, open_catalog, paced_config):
        steps = []
        spawner = RecordingSpawner(open_catalog)
        builder = WorldBuilder(open_catalog, paced_config, spawner=spawner)

        task = asyncio.create_task(builder.generate_paced(on_step=steps.append))
        while len(steps) < 5:
            await asyncio.sleep(0.005)
        builder.clear()

        assert await task is None
        assert len(steps) < 75
        assert spawner.instances == {}
        assert builder.solver.grid.count(CellState.ASSIGNED) == 0

    @pytest.mark.asyncio
    async def test_clear_from_on_step_stops_mid_batch(self, open_catalog):
        """A clear issued from the step callback must not start a new run."""
        config = GeneratorConfig(
            width=5, height=3, depth=5, seed=21,
            pacing=PacingConfig(enabled=True, delay=0, batch_size=4),
        )
        spawner = RecordingSpawner(open_catalog)
        builder = WorldBuilder(open_catalog, config, spawner=spawner)
        steps = []

        def on_step(step):
            steps.append(step)
            if len(steps) == 2:
                builder.clear()

        result = await builder.generate_paced(on_step=on_step)

        assert result is None
        assert len(steps) == 2
        assert builder.solver.state == SolverState.IDLE
        assert builder.solver.grid.count(CellState.ASSIGNED) == 0
        assert builder.solver.usage.total == 0
        assert spawner.instances == {}

    @pytest.mark.asyncio
    async def test_can_run_again_after_cancel(self, open_catalog, paced_config):
        builder = WorldBuilder(open_catalog, paced_config)
        task = asyncio.create_task(builder.generate_paced())
        await asyncio.sleep(0.02)
        builder.clear()
        await task

        result = builder.generate()
        assert result.is_complete
        assert result.collapsed_count == 75
