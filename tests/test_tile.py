import pytest

from slippery.geometry import Point, Rectangle
from slippery.tile import TileId, total_tiles


@pytest.mark.parametrize("zoom", [0, 1, 5, 12])
def test_total_tiles_doubles(zoom):
    assert total_tiles(zoom + 1) == 2 * total_tiles(zoom)


def test_total_tiles_at_zero():
    assert total_tiles(0) == 1


def test_zero_constant():
    assert TileId.ZERO == TileId(0, 0, 0)
    assert TileId.ZERO.valid()


def test_create_clamps_into_grid():
    tile = TileId.create(100, 100, 2)
    assert tile.valid()
    assert tile == TileId(total_tiles(2) - 1, total_tiles(2) - 1, 2)
    assert TileId.create(-5, -5, 3) == TileId(0, 0, 3)


def test_create_keeps_valid_values():
    assert TileId.create(2, 3, 4) == TileId(2, 3, 4)


def test_x_y():
    assert TileId(6, 9, 5).x_y() == (6, 9)


def test_invalid_tile():
    assert not TileId(4, 0, 2).valid()
    assert not TileId(0, 4, 2).valid()


def test_downsample_of_zero_is_none():
    assert TileId.ZERO.downsample() is None


@pytest.mark.parametrize("dx", [0, 1])
@pytest.mark.parametrize("dy", [0, 1])
def test_children_downsample_to_parent(dx, dy):
    parent = TileId(3, 5, 4)
    child = TileId(2 * parent.x + dx, 2 * parent.y + dy, parent.zoom + 1)
    assert child.downsample() == parent


def test_zero_has_no_neighbors():
    assert TileId.ZERO.neighbors() == (None, None, None, None)


def test_neighbors_order_and_round_trip():
    tile = TileId(2, 2, 3)
    north, east, south, west = tile.neighbors()
    assert north == tile.north() and north.south() == tile
    assert east == tile.east() and east.west() == tile
    assert south == tile.south() and south.north() == tile
    assert west == tile.west() and west.east() == tile


def test_edges_have_no_neighbors_beyond():
    last = total_tiles(3) - 1
    corner = TileId(last, last, 3)
    assert corner.east() is None
    assert corner.south() is None
    assert corner.north() is not None and corner.north().valid()


def test_project_steps_by_tile_size():
    tile = TileId(2, 2, 3)
    size = 256.0
    assert tile.east().project(size).x - tile.project(size).x == size
    assert tile.south().project(size).y - tile.project(size).y == size


def test_project_centre_tile_is_at_origin():
    half = total_tiles(4) // 2
    assert TileId(half, half, 4).project(256.0) == Point(0.0, 0.0)


def test_on_viewport_places_tile_at_center():
    tile = TileId(3, 1, 3)
    size = 256.0
    viewport = Rectangle(0.0, 0.0, 800.0, 600.0)
    rect = tile.on_viewport(viewport, size, tile.project(size))
    assert Point(rect.x, rect.y) == viewport.center()
    assert rect.width == size and rect.height == size


def test_on_viewport_offsets_follow_position():
    tile = TileId(3, 1, 3)
    viewport = Rectangle(0.0, 0.0, 800.0, 600.0)
    base = tile.on_viewport(viewport, 256.0, Point(0.0, 0.0))
    shift = Point(10.0, -20.0)
    moved = tile.on_viewport(viewport, 256.0, shift)
    assert Point(base.x, base.y) - Point(moved.x, moved.y) == shift


def test_tile_ids_hashable():
    assert len({TileId(1, 1, 2), TileId(1, 1, 2), TileId(1, 1, 3)}) == 2