"""Identification and placement of tiles in the slippy map grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from slippery.geometry import Point, Rectangle


def total_tiles(zoom: int) -> int:
    """Number of tiles along one axis at the given zoom level."""
    return 2**zoom


@dataclass(frozen=True)
class TileId:
    """A tile in the grid, given by column, row and zoom level."""

    x: int
    y: int
    zoom: int

    ZERO: ClassVar[TileId]

    @classmethod
    def create(cls, x: int, y: int, zoom: int) -> TileId:
        """Build a tile id with x and y clamped into the grid of the zoom level."""
        last = total_tiles(zoom) - 1
        return cls(min(max(x, 0), last), min(max(y, 0), last), zoom)

    def x_y(self) -> tuple[int, int]:
        return (self.x, self.y)

    def project(self, tile_size: float) -> Point:
        """Tile's top-left position in pixels on the world bitmap, centred at zero."""
        half = total_tiles(self.zoom) / 2.0
        return Point((self.x - half) * tile_size, (self.y - half) * tile_size)

    def on_viewport(self, viewport: Rectangle, tile_size: float, position: Point) -> Rectangle:
        """Screen rectangle of this tile for a viewport centred on ``position``."""
        offset = self.project(tile_size) - position
        corner = viewport.center() + offset
        return Rectangle(corner.x, corner.y, tile_size, tile_size)

    def downsample(self) -> TileId | None:
        """The tile one zoom level lower that covers this one, if any."""
        if self.zoom == 0:
            return None
        return TileId(self.x // 2, self.y // 2, self.zoom - 1)

    def east(self) -> TileId | None:
        if self.x < total_tiles(self.zoom) - 1:
            return TileId(self.x + 1, self.y, self.zoom)
        return None

    def west(self) -> TileId | None:
        if self.x > 0:
            return TileId(self.x - 1, self.y, self.zoom)
        return None

    def north(self) -> TileId | None:
        if self.y > 0:
            return TileId(self.x, self.y - 1, self.zoom)
        return None

    def south(self) -> TileId | None:
        if self.y < total_tiles(self.zoom) - 1:
            return TileId(self.x, self.y + 1, self.zoom)
        return None

    def neighbors(self) -> tuple[TileId | None, TileId | None, TileId | None, TileId | None]:
        """North, east, south and west neighbours; None where the grid ends."""
        return (self.north(), self.east(), self.south(), self.west())

    def valid(self) -> bool:
        count = total_tiles(self.zoom)
        return 0 <= self.x < count and 0 <= self.y < count


TileId.ZERO = TileId(0, 0, 0)