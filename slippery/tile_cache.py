"""Cache of raster tiles and the asynchronous fetching that fills it."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, Union

import httpx

from slippery.sources import Attribution, Source
from slippery.tile import TileId

USER_AGENT = "lib-slippery"
MAX_CONCURRENT_FETCHES = 6
ACQUIRE_TIMEOUT = 1.0


class FetchError(Exception):
    """Raised when a tile could not be fetched."""


@dataclass(frozen=True)
class LoadTile:
    """Ask the cache to start loading a tile."""

    tile_id: TileId


@dataclass(frozen=True)
class TileLoaded:
    """A tile finished loading; ``handle`` holds the image bytes."""

    tile_id: TileId
    handle: bytes


@dataclass(frozen=True)
class TileLoadFailed:
    """A tile could not be loaded."""

    tile_id: TileId


CacheMessage = Union[LoadTile, TileLoaded, TileLoadFailed]


class Fetcher:
    """Downloads tiles from a source, limiting how many requests run at once."""

    def __init__(
        self,
        source: Source,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_concurrent: int = MAX_CONCURRENT_FETCHES,
        acquire_timeout: float = ACQUIRE_TIMEOUT,
    ) -> None:
        self.source = source
        self._transport = transport
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._acquire_timeout = acquire_timeout

    async def fetch_tile(self, tile_id: TileId) -> bytes:
        """Fetch the image bytes of a tile, raising FetchError on failure.

        A request that waits too long for a free slot is abandoned, since the
        view has probably moved on and the tile is no longer needed.
        """
        try:
            await asyncio.wait_for(self._semaphore.acquire(), self._acquire_timeout)
        except asyncio.TimeoutError as exc:
            raise FetchError("the semaphore timed out") from exc

        try:
            url = self.source.tile_url(tile_id)
            async with httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT}, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as exc:
            raise FetchError(str(exc)) from exc
        finally:
            self._semaphore.release()


class TileCache:
    """Holds the raster tiles of one source and schedules their loading."""

    def __init__(
        self,
        source: Source,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        # A value of None marks a tile whose download is in progress.
        self._cache: dict[TileId, bytes | None] = {}
        self._fetcher = Fetcher(source, transport=transport)

    def attribution(self) -> Attribution:
        return self._fetcher.source.attribution()

    def tile_size(self) -> int:
        return self._fetcher.source.tile_size()

    def max_zoom(self) -> int:
        return self._fetcher.source.max_zoom()

    def should_fetch(self, tile_id: TileId) -> bool:
        """Whether the tile is neither loaded nor being loaded."""
        return tile_id not in self._cache

    def get(self, tile_id: TileId) -> bytes | None:
        """The loaded image of a tile, or None if it is not available yet."""
        return self._cache.get(tile_id)

    def update(
        self, message: CacheMessage
    ) -> Coroutine[Any, Any, CacheMessage] | None:
        """Apply a message; returns a coroutine to run when a download starts.

        The coroutine resolves to the message that reports the outcome, which
        should be fed back into this method.
        """
        if isinstance(message, TileLoaded):
            self._cache[message.tile_id] = message.handle
        elif isinstance(message, TileLoadFailed):
            if message.tile_id in self._cache and self._cache[message.tile_id] is None:
                del self._cache[message.tile_id]
        elif isinstance(message, LoadTile):
            tile_id = message.tile_id
            if not tile_id.valid() or tile_id in self._cache:
                return None
            self._cache[tile_id] = None
            return self._load(tile_id)
        else:
            raise TypeError(f"unknown cache message: {message!r}")
        return None

    async def _load(self, tile_id: TileId) -> CacheMessage:
        try:
            handle = await self._fetcher.fetch_tile(tile_id)
        except FetchError:
            return TileLoadFailed(tile_id)
        return TileLoaded(tile_id, handle)