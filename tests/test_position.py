import pytest

from slippery.geometry import Point
from slippery.position import Geographic, Mercator
from slippery.tile import TileId


def test_mercator_to_geographic2():
    assert Geographic(0.0, 0.0).as_mercator() == Mercator(0.0, 0.0)
    assert Geographic(0.0, 0.0) == Mercator(0.0, 0.0).as_geographic()
    assert Geographic(90.0, 0.0).as_mercator().east_x == pytest.approx(Mercator(0.5, 0.0).east_x)
    assert Geographic(-180.0, 0.0).as_mercator().east_x == pytest.approx(
        Mercator(-1.0, 0.0).east_x
    )


def test_pixel_space_conversion():
    position = Mercator(1.0, 1.0)
    pixel_space = position.to_pixel_space(256, 1.0)
    converted = Mercator.from_pixel_space(pixel_space, 256, 1.0)
    assert position == converted
    assert pixel_space == Point(256.0, 256.0)


def test_mercator_clamps():
    assert Mercator(5.0, -5.0) == Mercator(1.0, -1.0)


def test_geographic_clamps():
    g = Geographic(200.0, -100.0)
    assert g.longitude == 180.0
    assert g.latitude == -90.0


@pytest.mark.parametrize("lon,lat", [(2.35, 48.85), (-73.98, 40.75), (151.2, -33.87), (0.0, 0.0)])
def test_geographic_round_trip(lon, lat):
    back = Geographic(lon, lat).as_mercator().as_geographic()
    assert back.longitude == pytest.approx(lon)
    assert back.latitude == pytest.approx(lat, abs=1e-9)


def test_north_is_negative_y():
    assert Geographic(0.0, 45.0).as_mercator().north_y < 0.0


def test_tile_id_corners():
    assert Mercator(-1.0, -1.0).tile_id(5) == TileId(0, 0, 5)
    assert Mercator(1.0, 1.0).tile_id(2) == TileId(3, 3, 2)


def test_tile_id_center():
    assert Mercator(0.0, 0.0).tile_id(1) == TileId(1, 1, 1)
    assert Mercator(0.0, 0.0).tile_id(0) == TileId.ZERO


def test_tile_id_is_valid_everywhere():
    for x in (-1.0, -0.3, 0.0, 0.7, 1.0):
        for y in (-1.0, 0.2, 1.0):
            assert Mercator(x, y).tile_id(4).valid()