"""Slippy map building blocks: Web Mercator projection, tile addressing, tile sources,
an asynchronous tile cache and a toolkit-neutral map widget."""

__version__ = "0.1.0"