from __future__ import annotations

from typing import NamedTuple


class Coordinate(NamedTuple):
    """Integer cell position. ``y`` grows upward from the pit floor."""

    x: int = 0
    y: int = 0

    def plus(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x + other.x, self.y + other.y)

    def minus(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x - other.x, self.y - other.y)


ORIGIN = Coordinate(0, 0)
LEFT = Coordinate(-1, 0)
RIGHT = Coordinate(1, 0)
GRAVITY = Coordinate(0, -1)
