"""Per-frame collection of tiles to draw, grouped by zoom level."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from slippery.geometry import Rectangle
from slippery.tile import TileId


class DrawCache:
    """Tiles to draw with their image handles and screen rectangles."""

    def __init__(self) -> None:
        self._maps: dict[int, dict[tuple[int, int], tuple[Any, Rectangle]]] = {}

    def __contains__(self, tile_id: TileId) -> bool:
        inner = self._maps.get(tile_id.zoom)
        return inner is not None and tile_id.x_y() in inner

    def insert(
        self, tile_id: TileId, handle: Any, rectangle: Rectangle
    ) -> tuple[Any, Rectangle] | None:
        """Store a tile; returns the entry it replaced, if any."""
        inner = self._maps.setdefault(tile_id.zoom, {})
        previous = inner.get(tile_id.x_y())
        inner[tile_id.x_y()] = (handle, rectangle)
        return previous

    def __iter__(self) -> Iterator[tuple[TileId, tuple[Any, Rectangle]]]:
        """Yield every tile, lowest zoom level first."""
        for zoom in sorted(self._maps):
            for (x, y), entry in self._maps[zoom].items():
                yield TileId.create(x, y, zoom), entry