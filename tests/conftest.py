"""Shared test fixtures for voxelcollapse."""

import tempfile
from pathlib import Path
from typing import Callable, Iterable

import pytest

from voxelcollapse.core import Direction, GeneratorConfig, Tile, TileCatalog


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="voxelcollapse_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_tile() -> Callable[..., Tile]:
    """Factory for tiles that accept the same set of tiles on every face."""

    def _make(tile_id: str, accepts: Iterable[str] = (), **kwargs) -> Tile:
        accepted = frozenset(accepts)
        return Tile(id=tile_id, connections={d: accepted for d in Direction}, **kwargs)

    return _make


@pytest.fixture
def open_catalog(make_tile) -> TileCatalog:
    """Three tiles that accept each other everywhere; no fallback can ever happen."""
    ids = ["a", "b", "c"]
    return TileCatalog([
        make_tile("a", ids, weight=1.0),
        make_tile("b", ids, weight=2.0),
        make_tile("c", ids, weight=3.0),
    ])


@pytest.fixture
def exclusive_catalog(make_tile) -> TileCatalog:
    """A and B each accept only themselves, on every face."""
    return TileCatalog([
        make_tile("A", ["A"]),
        make_tile("B", ["B"]),
    ])


@pytest.fixture
def asymmetric_catalog(make_tile) -> TileCatalog:
    """A accepts A and B everywhere; B accepts only B."""
    return TileCatalog([
        make_tile("A", ["A", "B"]),
        make_tile("B", ["B"]),
    ])


@pytest.fixture
def small_config() -> GeneratorConfig:
    """A 5x3x5 grid, centered start, seeded."""
    return GeneratorConfig(width=5, height=3, depth=5, seed=12345)
