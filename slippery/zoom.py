"""Validated map zoom levels."""

from __future__ import annotations

import math
from dataclasses import dataclass

MIN_ZOOM = 2.0
MAX_ZOOM = 26.0
DEFAULT_ZOOM = 16.0


class InvalidZoom(ValueError):
    """Raised when a zoom level falls outside the supported range."""

    def __init__(self, message: str = "invalid zoom level") -> None:
        super().__init__(message)


def _checked(value: float) -> float:
    value = float(value)
    if not MIN_ZOOM <= value <= MAX_ZOOM:
        raise InvalidZoom()
    return value


@dataclass
class Zoom:
    """A fractional zoom level between 2 and 26 inclusive."""

    value: float = DEFAULT_ZOOM

    def __post_init__(self) -> None:
        self.value = _checked(self.value)

    def __float__(self) -> float:
        return self.value

    def rounded(self) -> int:
        """The nearest whole zoom level, halves rounded up."""
        return int(math.floor(self.value + 0.5))

    def zoom_in(self) -> None:
        """Increase the zoom by one level, raising InvalidZoom at the limit."""
        self.value = _checked(self.value + 1.0)

    def zoom_out(self) -> None:
        """Decrease the zoom by one level, raising InvalidZoom at the limit."""
        self.value = _checked(self.value - 1.0)

    def zoom_by(self, zoom_amount: float) -> None:
        """Change the zoom by a relative amount; out-of-range results are ignored."""
        try:
            self.value = _checked(self.value + zoom_amount)
        except InvalidZoom:
            pass