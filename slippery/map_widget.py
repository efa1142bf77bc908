"""Interactive slippy-map view: viewpoint, input handling and draw lists."""

from __future__ import annotations

import enum
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from slippery.draw_cache import DrawCache
from slippery.geometry import Point, Rectangle
from slippery.position import Geographic, Mercator
from slippery.tile import TileId
from slippery.tile_cache import CacheMessage, LoadTile, TileCache
from slippery.zoom import Zoom

LINE_ZOOM_STEP = 0.5
PIXEL_ZOOM_STEP = 0.01
FLOOD_MARGIN = 128.0
MARKER_SIZE = 16.0
MARKER_FILL = (1.0, 0.1, 0.1)
MARKER_BORDER = (1.0, 0.7, 0.7)
MARKER_BORDER_WIDTH = 2.0
LEFT = "left"


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class Viewpoint:
    """The map position at the centre of the viewport, and the zoom level."""

    position: Mercator
    zoom: Zoom

    def _copy(self) -> Viewpoint:
        return Viewpoint(self.position, Zoom(float(self.zoom)))

    def move_to_mercator(self, mercator: Mercator) -> None:
        self.position = mercator

    def move_to_geographic(self, geographic: Geographic) -> None:
        self.position = geographic.as_mercator()

    def to_pixel_space(self, tile_size: int) -> Point:
        """The viewpoint position in world pixel coordinates."""
        return self.position.to_pixel_space(tile_size, float(self.zoom))

    def position_in_viewport(self, tile_size: int, position: Point, bounds: Rectangle) -> Mercator:
        """The map coordinate under a screen position within ``bounds``."""
        offset = position - bounds.center()
        center = self.to_pixel_space(tile_size)
        return Mercator.from_pixel_space(center + offset, tile_size, float(self.zoom))

    def zoom_on_position(
        self, zoom_amount: float, tile_size: int, position: Point, bounds: Rectangle
    ) -> None:
        """Zoom while keeping the map point under ``position`` in place."""
        offset = position - bounds.center()
        self.position = Mercator.from_pixel_space(
            self.to_pixel_space(tile_size) + offset, tile_size, float(self.zoom)
        )
        self.zoom.zoom_by(zoom_amount)
        self.position = Mercator.from_pixel_space(
            self.to_pixel_space(tile_size) - offset, tile_size, float(self.zoom)
        )

    def zoom_on_center(self, zoom_amount: float) -> None:
        self.zoom.zoom_by(zoom_amount)


@dataclass(frozen=True)
class ScrollLines:
    """Mouse wheel scrolled by a number of lines."""

    y: float


@dataclass(frozen=True)
class ScrollPixels:
    """Mouse wheel or touchpad scrolled by a number of pixels."""

    y: float


@dataclass(frozen=True)
class ButtonPressed:
    button: str = LEFT


@dataclass(frozen=True)
class ButtonReleased:
    button: str = LEFT


@dataclass(frozen=True)
class CursorMoved:
    position: Point


Event = Union[ScrollLines, ScrollPixels, ButtonPressed, ButtonReleased, CursorMoved]


class Interaction(enum.Enum):
    """The mouse cursor the widget asks for."""

    IDLE = "idle"
    GRABBING = "grabbing"


@dataclass
class UpdateResult:
    """What handling one event produced."""

    messages: list[Any] = field(default_factory=list)
    captured: bool = False
    redraw_requested: bool = False


@dataclass(frozen=True)
class TileDraw:
    """A tile image to draw into a screen rectangle."""

    tile_id: TileId
    handle: Any
    rectangle: Rectangle


@dataclass(frozen=True)
class MarkerDraw:
    """A round marker drawn for a geographic position."""

    marker: Geographic
    bounds: Rectangle
    fill: tuple[float, float, float] = MARKER_FILL
    border: tuple[float, float, float] = MARKER_BORDER
    border_width: float = MARKER_BORDER_WIDTH


@dataclass(frozen=True)
class Frame:
    """Everything to draw for one frame; tiles are ordered lowest zoom first."""

    bounds: Rectangle
    tiles: list[TileDraw]
    markers: list[MarkerDraw]


@dataclass(frozen=True)
class _Dragging:
    mercator: Mercator
    cursor: Point


def _position_over(cursor: Point | None, bounds: Rectangle) -> Point | None:
    if cursor is None:
        return None
    inside = (
        bounds.x <= cursor.x < bounds.x + bounds.width
        and bounds.y <= cursor.y < bounds.y + bounds.height
    )
    return cursor if inside else None


class MapWidget:
    """A slippy tile map that handles panning, zooming and clicks."""

    def __init__(
        self,
        cache: TileCache,
        mapper: Callable[[CacheMessage], Any],
        viewpoint: Viewpoint,
    ) -> None:
        self._cache = cache
        self._mapper = mapper
        self.viewpoint = viewpoint._copy()
        self._prev_bounds = Rectangle()
        self._scale = 1.0
        self._visible_tiles: list[tuple[TileId, Rectangle]] = []
        self._markers: Sequence[Geographic] | None = None
        self._on_change: Callable[[Viewpoint], Any] | None = None
        self._on_click: Callable[[Geographic], Any] | None = None
        self._on_hover: Callable[[Geographic], Any] | None = None
        self._cursor_position: Point | None = None
        self._movement: _Dragging | None = None

    def on_viewpoint_change(self, func: Callable[[Viewpoint], Any]) -> MapWidget:
        """Emit ``func(viewpoint)`` when the position or zoom changes."""
        self._on_change = func
        return self

    def on_click(self, func: Callable[[Geographic], Any]) -> MapWidget:
        """Emit ``func(location)`` when a location is left-clicked."""
        self._on_click = func
        return self

    def on_hover(self, func: Callable[[Geographic], Any]) -> MapWidget:
        """Emit ``func(location)`` when the cursor moves over the map."""
        self._on_hover = func
        return self

    def with_markers(self, markers: Sequence[Geographic]) -> MapWidget:
        self._markers = markers
        return self

    def with_scale(self, scale: float) -> MapWidget:
        if scale <= 0:
            raise ValueError("scale must be positive")
        self._scale = float(scale)
        return self

    def flood_tiles(self, viewport: Rectangle) -> list[tuple[TileId, Rectangle]]:
        """Flood-fill outward from the central tile to find tiles that meet ``viewport``."""
        tile_size = self._cache.tile_size()
        view_zoom = float(self.viewpoint.zoom)
        zoom = min(view_zoom, float(self._cache.max_zoom())) + math.log2(self._scale)
        level = _round_half_away(zoom)
        corrected_size = tile_size * 2.0 ** (view_zoom - level)
        central = self.viewpoint.position.tile_id(min(max(level, 0), 255))
        map_center = self.viewpoint.position.to_pixel_space(tile_size, view_zoom)

        seen: set[TileId] = set()
        accepted: list[tuple[TileId, Rectangle]] = []
        stack = [central]
        while stack:
            tile_id = stack.pop()
            if tile_id in seen:
                continue
            seen.add(tile_id)
            rectangle = tile_id.on_viewport(viewport, corrected_size, map_center)
            if not viewport.intersects(rectangle):
                continue
            accepted.append((tile_id, rectangle))
            stack.extend(n for n in reversed(tile_id.neighbors()) if n is not None)
        return accepted

    def update(self, event: Event | None, bounds: Rectangle, cursor: Point | None) -> UpdateResult:
        """Handle one input event (or none) for a widget laid out in ``bounds``."""
        result = UpdateResult()
        initial = self.viewpoint._copy()
        tile_size = self._cache.tile_size()

        if isinstance(event, (ScrollLines, ScrollPixels)) and self._on_change is not None:
            step = LINE_ZOOM_STEP if isinstance(event, ScrollLines) else PIXEL_ZOOM_STEP
            amount = event.y * step
            over = _position_over(cursor, bounds)
            if over is not None:
                self.viewpoint.zoom_on_position(amount, tile_size, over, bounds)
            else:
                self.viewpoint.zoom_on_center(amount)
        elif isinstance(event, ButtonPressed) and event.button == LEFT:
            over = _position_over(cursor, bounds)
            if over is not None:
                self._movement = _Dragging(
                    self.viewpoint.position_in_viewport(tile_size, over, bounds), over
                )
        elif isinstance(event, ButtonReleased) and event.button == LEFT:
            drag = self._movement
            if drag is not None and self._cursor_position is not None:
                here = self._cursor_position
                position = self.viewpoint.position_in_viewport(tile_size, here, bounds)
                if drag.cursor == here and position == drag.mercator and self._on_click:
                    result.messages.append(self._on_click(position.as_geographic()))
            self._movement = None
        elif isinstance(event, CursorMoved):
            self._cursor_position = event.position
            if self._on_hover is not None:
                hovered = self.viewpoint.position_in_viewport(tile_size, event.position, bounds)
                result.messages.append(self._on_hover(hovered.as_geographic()))
            if self._movement is not None and self._on_change is not None:
                grabbed = self._movement.mercator
                under = self.viewpoint.position_in_viewport(tile_size, event.position, bounds)
                current = self.viewpoint.position
                self.viewpoint.position = Mercator(
                    current.x + grabbed.x - under.x,
                    current.y + grabbed.y - under.y,
                )

        changed = self.viewpoint != initial or self._prev_bounds != bounds
        if changed:
            result.captured = True
            result.redraw_requested = True
            if self._on_change is not None:
                result.messages.append(self._on_change(self.viewpoint._copy()))

        if changed or not self._visible_tiles:
            self._visible_tiles = self.flood_tiles(bounds.expand(FLOOD_MARGIN))
            self._prev_bounds = bounds

        for tile_id, _ in self._visible_tiles:
            if self._cache.should_fetch(tile_id):
                result.messages.append(self._mapper(LoadTile(tile_id)))
        return result

    def draw(self, bounds: Rectangle) -> Frame:
        """Build the draw list; missing tiles fall back to loaded lower-zoom tiles."""
        tile_size = self._cache.tile_size()
        zoom = float(self.viewpoint.zoom)
        map_center = self.viewpoint.position.to_pixel_space(tile_size, zoom)

        draw_cache = DrawCache()
        for tile_id, rectangle in reversed(self._visible_tiles):
            handle = self._cache.get(tile_id)
            if handle is not None:
                draw_cache.insert(tile_id, handle, rectangle)
                continue
            backup = tile_id.downsample()
            while backup is not None:
                backup_handle = self._cache.get(backup)
                if backup_handle is not None:
                    if backup not in draw_cache:
                        size = rectangle.width * 2 ** (tile_id.zoom - backup.zoom)
                        projected = backup.on_viewport(bounds, size, map_center)
                        draw_cache.insert(backup, backup_handle, projected)
                    break
                backup = backup.downsample()

        tiles = [TileDraw(tile_id, handle, rect) for tile_id, (handle, rect) in draw_cache]

        markers: list[MarkerDraw] = []
        half = MARKER_SIZE / 2.0
        for marker in self._markers or ():
            position = marker.as_mercator().to_pixel_space(tile_size, zoom)
            location = bounds.center() - (map_center - position)
            markers.append(
                MarkerDraw(
                    marker,
                    Rectangle(location.x - half, location.y - half, MARKER_SIZE, MARKER_SIZE),
                )
            )
        return Frame(bounds, tiles, markers)

    def mouse_interaction(self) -> Interaction:
        return Interaction.GRABBING if self._movement is not None else Interaction.IDLE