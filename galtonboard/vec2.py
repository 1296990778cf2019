"""Small integer 2D vector."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """An immutable pair of integer coordinates."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, other: Vec2) -> Vec2:
        """Component-wise product."""
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x * other.x, self.y * other.y)