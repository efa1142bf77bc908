import asyncio

import httpx
import pytest

from slippery.sources import Mapbox, OpenStreetMap
from slippery.tile import TileId
from slippery.tile_cache import (
    FetchError,
    Fetcher,
    LoadTile,
    TileCache,
    TileLoaded,
    TileLoadFailed,
)


def _ok_transport(seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, content=b"image-bytes")

    return httpx.MockTransport(handler)


def _failing_transport():
    return httpx.MockTransport(lambda request: httpx.Response(404))


def test_source_properties_are_delegated():
    cache = TileCache(OpenStreetMap())
    assert cache.tile_size() == 256
    assert cache.max_zoom() == 19
    assert cache.attribution().text == "OpenStreetMap contributors"
    assert TileCache(Mapbox(access_token="token")).tile_size() == 512


def test_new_tile_should_be_fetched():
    cache = TileCache(OpenStreetMap())
    tile = TileId.create(1, 1, 2)
    assert cache.should_fetch(tile)
    assert cache.get(tile) is None


def test_load_tile_marks_pending():
    cache = TileCache(OpenStreetMap(), transport=_ok_transport())
    tile = TileId.create(1, 1, 2)
    task = cache.update(LoadTile(tile))
    assert task is not None
    task.close()
    assert not cache.should_fetch(tile)
    assert cache.get(tile) is None


def test_duplicate_load_is_ignored():
    cache = TileCache(OpenStreetMap(), transport=_ok_transport())
    tile = TileId.create(0, 0, 1)
    first = cache.update(LoadTile(tile))
    first.close()
    assert cache.update(LoadTile(tile)) is None


def test_invalid_tile_is_not_loaded():
    cache = TileCache(OpenStreetMap())
    invalid = TileId(5, 0, 1)
    assert cache.update(LoadTile(invalid)) is None
    assert cache.should_fetch(invalid)


def test_tile_loaded_stores_handle():
    cache = TileCache(OpenStreetMap())
    tile = TileId.create(3, 2, 3)
    assert cache.update(TileLoaded(tile, b"data")) is None
    assert cache.get(tile) == b"data"
    assert not cache.should_fetch(tile)


def test_failure_does_not_remove_loaded_tile():
    cache = TileCache(OpenStreetMap())
    tile = TileId.create(3, 2, 3)
    cache.update(TileLoaded(tile, b"data"))
    cache.update(TileLoadFailed(tile))
    assert cache.get(tile) == b"data"


def test_unknown_message_raises():
    cache = TileCache(OpenStreetMap())
    with pytest.raises(TypeError):
        cache.update("LoadTile")


@pytest.mark.asyncio
async def test_load_round_trip():
    seen = []
    cache = TileCache(OpenStreetMap(), transport=_ok_transport(seen))
    tile = TileId.create(1, 2, 2)
    result = await cache.update(LoadTile(tile))
    assert result == TileLoaded(tile, b"image-bytes")
    cache.update(result)
    assert cache.get(tile) == b"image-bytes"
    assert str(seen[0].url) == "https://tile.openstreetmap.org/2/1/2.png"
    assert seen[0].headers["User-Agent"] == "lib-slippery"


@pytest.mark.asyncio
async def test_failed_load_allows_retry():
    cache = TileCache(OpenStreetMap(), transport=_failing_transport())
    tile = TileId.create(1, 0, 1)
    result = await cache.update(LoadTile(tile))
    assert result == TileLoadFailed(tile)
    cache.update(result)
    assert cache.should_fetch(tile)
    retry = cache.update(LoadTile(tile))
    assert retry is not None
    retry.close()


@pytest.mark.asyncio
async def test_fetcher_raises_on_http_error():
    fetcher = Fetcher(OpenStreetMap(), transport=_failing_transport())
    with pytest.raises(FetchError):
        await fetcher.fetch_tile(TileId.ZERO)


@pytest.mark.asyncio
async def test_fetcher_times_out_when_busy():
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(200, content=b"late")

    fetcher = Fetcher(
        OpenStreetMap(),
        transport=httpx.MockTransport(handler),
        max_concurrent=1,
        acquire_timeout=0.05,
    )
    first = asyncio.create_task(fetcher.fetch_tile(TileId.ZERO))
    await asyncio.sleep(0.01)
    with pytest.raises(FetchError, match="timed out"):
        await fetcher.fetch_tile(TileId.create(0, 0, 1))
    release.set()
    assert await first == b"late"