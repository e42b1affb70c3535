"""
Axis-aligned rectangle primitives used by the packer and the layout checks.
"""

from typing import NamedTuple

from config import EPSILON


class Rect(NamedTuple):
    """Axis-aligned rectangle with its origin at the lower-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_empty(self, tolerance: float = EPSILON) -> bool:
        return self.width <= tolerance or self.height <= tolerance


def overlaps(a: Rect, b: Rect, tolerance: float = EPSILON) -> bool:
    """
    Check whether two rectangles share interior area.

    Rectangles that only touch along an edge or a corner do not overlap.
    """
    return (a.x < b.right - tolerance and b.x < a.right - tolerance and
            a.y < b.top - tolerance and b.y < a.top - tolerance)


def contains(outer: Rect, inner: Rect, tolerance: float = EPSILON) -> bool:
    """Check whether inner lies completely inside outer (edges may coincide)."""
    return (inner.x >= outer.x - tolerance and
            inner.y >= outer.y - tolerance and
            inner.right <= outer.right + tolerance and
            inner.top <= outer.top + tolerance)


def fits(width: float, height: float, rect: Rect, tolerance: float = EPSILON) -> bool:
    """Check whether a width x height piece fits into rect without rotation."""
    return width <= rect.width + tolerance and height <= rect.height + tolerance


def same(a: float, b: float, tolerance: float = EPSILON) -> bool:
    return abs(a - b) <= tolerance
