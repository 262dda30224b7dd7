"""Transform data structures for coordinate and state representation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Arena meters (center-origin, Y-down)
    - Canvas pixels (top-left origin)
    - Stage pixels (widget space, after zoom and pan)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor):
        return Vec2(self.x * factor, self.y * factor)


# Positions in the document are arena points
Point = Vec2


@dataclass(frozen=True)
class BoundingCircle:
    """Circle enclosing a group of points."""
    center: Vec2
    radius: float
