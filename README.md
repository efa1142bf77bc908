# slippery

Building blocks for a slippy map. The package covers the Web Mercator
projection, tile addressing, a few ready-made HTTP tile sources and an
asynchronous tile cache. It also has a map widget that does not depend on any
GUI toolkit. The widget turns mouse events into viewpoint changes and works out
which tiles and markers to draw.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Coordinates (`slippery.position`)

The package uses two coordinate systems:

* `Geographic(lon, lat)` holds a longitude in `[-180, 180]` and a latitude in
  `[-90, 90]`, in degrees. Values are clamped on construction. You can read
  them back through `longitude` and `latitude`.
* `Mercator(x, y)` is a position on the projected map. Both axes lie in
  `[-1, 1]` and are clamped. They can also be read through `east_x` and
  `north_y`.

```python
from slippery.position import Geographic

paris = Geographic(2.35, 48.85)
projected = paris.as_mercator()
tile = projected.tile_id(12)        # the tile that holds this point at zoom 12
back = projected.as_geographic()    # approximately (2.35, 48.85)
```

Two methods convert between the projection and the pixel "world bitmap" at a
given zoom level:

* `Mercator.to_pixel_space(tile_size, zoom)`
* `Mercator.from_pixel_space(point, tile_size, zoom)`

Points and rectangles come from `slippery.geometry`:

* `Point` supports `+` and `-`.
* `Rectangle` has `center()`, `area()`, `intersects(other)` and
  `expand(amount)`.

## Zoom levels (`slippery.zoom`)

`Zoom(value)` holds a fractional zoom level between 2 and 26 inclusive. The
default value is 16.

* Building a `Zoom` outside that range raises `InvalidZoom`, which is a
  `ValueError`.
* `zoom_in()` and `zoom_out()` change the level by one. They raise
  `InvalidZoom` when the result would leave the range.
* `zoom_by(amount)` leaves the level unchanged instead of raising.
* `rounded()` gives the nearest whole level.
* `float(zoom)` gives the raw value.

## Tiles (`slippery.tile`)

`TileId(x, y, zoom)` names a tile by column, row and zoom level.

* `TileId.create(x, y, zoom)` clamps the column and row to the grid of that
  zoom level.
* `total_tiles(zoom)` gives the number of tiles along one axis.
* `TileId.ZERO` is the single tile at zoom 0.

A tile offers these methods:

* `north()`, `east()`, `south()` and `west()` return the neighbouring tile, or
  `None` at the edge of the grid. `neighbors()` returns all four.
* `downsample()` returns the lower-zoom tile that covers this one.
* `project(tile_size)` returns the tile's position on the world bitmap.
* `on_viewport(viewport, tile_size, position)` returns where the tile lands on
  screen.
* `valid()` checks that the tile lies inside its grid.

## Tile sources (`slippery.sources`)

The module provides three sources: `OpenStreetMap`, `Geoportal` and `Mapbox`.
Each one builds the request URL for a tile and reports its `attribution()`,
`tile_size()` and `max_zoom()`.

`Mapbox` serves 512-pixel tiles and needs an access token. It takes a
`MapboxStyle` and has an optional `high_resolution` flag:

```python
from slippery.sources import Mapbox, MapboxStyle, OpenStreetMap
from slippery.tile import TileId

osm = OpenStreetMap()
print(osm.tile_url(TileId.create(1, 2, 3)))

mapbox = Mapbox(style=MapboxStyle.DARK, access_token="token")
print(mapbox.tile_url(TileId.create(1, 2, 3)))
```

Follow the terms of use of any tile server you point the package at.

To add a source of your own, subclass `Source` and implement `tile_url` and
`attribution`. Override `tile_size` and `max_zoom` if your server differs from
the defaults:

* `tile_size` is 256 by default.
* `max_zoom` is 19 by default.

## Tile cache (`slippery.tile_cache`)

`TileCache(source)` keeps downloaded tiles for one source as raw image bytes.
It is driven by messages:

* `update(LoadTile(tile_id))` marks the tile as loading. It returns a coroutine
  that downloads the tile, or `None` if the tile is invalid, already cached or
  already on its way.
* Awaiting that coroutine yields either `TileLoaded` or `TileLoadFailed`.
  Feed that message back into `update()`.
* A failed load clears the pending entry, so the tile can be requested again.

```python
import asyncio

from slippery.sources import OpenStreetMap
from slippery.tile import TileId
from slippery.tile_cache import LoadTile, TileCache


async def main():
    cache = TileCache(OpenStreetMap())
    pending = cache.update(LoadTile(TileId.ZERO))
    if pending is not None:
        cache.update(await pending)
    print(cache.get(TileId.ZERO) is not None)


asyncio.run(main())
```

Two more methods query the cache:

* `should_fetch(tile_id)` tells whether a tile is neither cached nor on its
  way.
* `get(tile_id)` returns the cached bytes, if there are any.

Downloads go through a `Fetcher`, which behaves as follows:

* It runs at most six requests at once.
* It sends the user agent `lib-slippery`.
* It raises `FetchError` when a request fails or when it waits more than a
  second for a free slot.

Both `TileCache` and `Fetcher` accept an optional `httpx` transport, for
example a mock transport in tests.

## Map widget (`slippery.map_widget`)

`Viewpoint(position, zoom)` pairs a `Mercator` centre with a `Zoom`. It offers
these methods:

* `move_to_mercator` and `move_to_geographic` move the centre.
* `position_in_viewport` returns the map point under a screen position.
* `zoom_on_position` zooms around a screen position.
* `zoom_on_center` zooms around the centre.

`MapWidget(cache, mapper, viewpoint)` holds no GUI state of its own.

Callbacks are attached with `on_viewpoint_change`, `on_click` and `on_hover`.
Each returns the widget, so the calls can be chained. `with_markers` adds
markers, and `with_scale` sets the tile detail level, which must be positive.

`update(event, bounds, cursor)` takes one event, or `None`, together with the
widget's bounds and the cursor position. The events are `ScrollLines`,
`ScrollPixels`, `ButtonPressed`, `ButtonReleased` and `CursorMoved`. The
method returns an `UpdateResult` that holds:

* the callback messages,
* one `mapper(LoadTile(...))` message for each visible tile that still needs
  fetching,
* flags telling whether the event was captured and whether a redraw is
  needed.

Scrolling and dragging only move the map when an `on_viewpoint_change`
callback is set. A press and release without movement counts as a click.

`draw(bounds)` returns a `Frame` with the following contents:

* `TileDraw` entries, ordered lowest zoom first. Where a tile has not arrived
  yet, the nearest loaded lower-zoom tile is used instead.
* A `MarkerDraw` for each marker.

`mouse_interaction()` reports `Interaction.GRABBING` while dragging and
`Interaction.IDLE` otherwise. `flood_tiles(viewport)` lists the tiles that
cover a rectangle, together with their screen rectangles.

## What the package does not do

* It draws nothing on screen and opens no window. `draw()` only produces a
  `Frame` describing what to paint. Feeding it events and painting its
  contents is left to the application's GUI toolkit.
* It does not decode images. Tiles are kept as the bytes the server returned.
* The tile cache lives in memory only. Nothing is stored on disk between runs.
* There is no command-line program.