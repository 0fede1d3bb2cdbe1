"""Tests for the boundary policy."""

from voxelcollapse.core import BoundaryConfig, Coord
from voxelcollapse.generation.wfc import BoundaryPolicy


DIMS = (6, 4, 5)  # width, height, depth


def policy(**kwargs) -> BoundaryPolicy:
    config = BoundaryConfig(enabled=True, tile_id="wall", **kwargs)
    return BoundaryPolicy(config, DIMS)


class TestIsBoundary:
    """Test region classification."""

    def test_x_edges(self):
        p = policy(x_edges=True, z_edges=False)
        assert p.is_boundary(Coord(0, 1, 2))
        assert p.is_boundary(Coord(5, 1, 2))
        assert not p.is_boundary(Coord(1, 1, 2))
        assert not p.is_boundary(Coord(3, 1, 0))

    def test_z_edges(self):
        p = policy(x_edges=False, z_edges=True)
        assert p.is_boundary(Coord(2, 0, 0))
        assert p.is_boundary(Coord(2, 0, 4))
        assert not p.is_boundary(Coord(0, 0, 2))

    def test_y_bottom_and_top(self):
        bottom = policy(x_edges=False, z_edges=False, y_bottom=True)
        top = policy(x_edges=False, z_edges=False, y_top=True)

        assert bottom.is_boundary(Coord(2, 0, 2))
        assert not bottom.is_boundary(Coord(2, 3, 2))
        assert top.is_boundary(Coord(2, 3, 2))
        assert not top.is_boundary(Coord(2, 0, 2))

    def test_thickness(self):
        p = policy(thickness=2, z_edges=False)
        assert p.is_boundary(Coord(1, 0, 2))
        assert p.is_boundary(Coord(4, 0, 2))
        assert not p.is_boundary(Coord(2, 0, 2))
        assert not p.is_boundary(Coord(3, 0, 2))

    def test_zero_thickness_has_no_region(self):
        p = policy(thickness=0, y_bottom=True, y_top=True)
        assert not p.is_boundary(Coord(0, 0, 0))

    def test_nothing_enabled(self):
        p = policy(x_edges=False, z_edges=False)
        assert not p.is_boundary(Coord(0, 0, 0))


class TestForcedTile:
    """Test forced assignment."""

    def test_forced_inside_region(self):
        p = policy()
        assert p.forced_tile(Coord(0, 0, 0)) == "wall"
        assert p.forced_tile(Coord(2, 0, 2)) is None

    def test_disabled_never_forces(self):
        p = BoundaryPolicy(BoundaryConfig(enabled=False, tile_id="wall"), DIMS)
        assert p.is_boundary(Coord(0, 0, 0))
        assert p.forced_tile(Coord(0, 0, 0)) is None

    def test_no_tile_never_forces(self):
        p = BoundaryPolicy(BoundaryConfig(enabled=True, tile_id=None), DIMS)
        assert not p.active
        assert p.forced_tile(Coord(0, 0, 0)) is None
