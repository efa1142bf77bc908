"""Plain 2D points and axis-aligned rectangles in screen space."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A point or offset in 2D space."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def area(self) -> float:
        return self.width * self.height

    def intersects(self, other: Rectangle) -> bool:
        """Whether the two rectangles overlap with a non-empty area."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.x + self.width, other.x + other.width)
        bottom = min(self.y + self.height, other.y + other.height)
        return right - left > 0.0 and bottom - top > 0.0

    def expand(self, amount: float) -> Rectangle:
        """Grow the rectangle by ``amount`` on every side."""
        return Rectangle(
            self.x - amount,
            self.y - amount,
            self.width + 2.0 * amount,
            self.height + 2.0 * amount,
        )