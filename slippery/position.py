"""Web Mercator projection between geographic and map coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass

from slippery.geometry import Point
from slippery.tile import TileId, total_tiles


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(float(value), low), high)


@dataclass(frozen=True)
class Mercator:
    """A position on the Mercator plane, both axes in [-1, 1] (east and north positive)."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _clamp(self.x, -1.0, 1.0))
        object.__setattr__(self, "y", _clamp(self.y, -1.0, 1.0))

    @property
    def east_x(self) -> float:
        return self.x

    @property
    def north_y(self) -> float:
        return self.y

    def as_geographic(self) -> Geographic:
        return Geographic(
            math.degrees(self.x * math.pi),
            -math.degrees(math.atan(math.sinh(self.y * math.pi))),
        )

    @classmethod
    def from_pixel_space(cls, point: Point, tile_size: int, zoom: float) -> Mercator:
        half_width = 2.0 ** (zoom - 1.0) * tile_size
        return cls(point.x / half_width, point.y / half_width)

    def to_pixel_space(self, tile_size: int, zoom: float) -> Point:
        half_width = 2.0 ** (zoom - 1.0) * tile_size
        return Point(self.x * half_width, self.y * half_width)

    def tile_id(self, zoom: int) -> TileId:
        """The tile that holds this position at the given zoom level."""
        count = total_tiles(zoom)
        x = max(0, math.floor((self.x + 1.0) / 2.0 * count))
        y = max(0, math.floor((self.y + 1.0) / 2.0 * count))
        return TileId.create(x, y, zoom)


@dataclass(frozen=True)
class Geographic:
    """Longitude in [-180, 180] and latitude in [-90, 90], in degrees."""

    lon: float
    lat: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "lon", _clamp(self.lon, -180.0, 180.0))
        object.__setattr__(self, "lat", _clamp(self.lat, -90.0, 90.0))

    @property
    def longitude(self) -> float:
        return self.lon

    @property
    def latitude(self) -> float:
        return self.lat

    def as_mercator(self) -> Mercator:
        return Mercator(
            math.radians(self.lon) / math.pi,
            -math.asinh(math.tan(math.radians(self.lat))) / math.pi,
        )