"""
Ray class for representing rays in 3D space.

A ray is defined by a start point and a second point it passes
through. The direction is the unit vector from start to end, and
Ray(t) = start + t * direction, so t is a true distance.
"""

from __future__ import annotations
from typing import Optional

from .vec3 import Vec3, Point3


class Ray:
    """A ray from ``start`` through ``end``.

    ``end`` is a point, not a direction. Shadow rays point their end at
    the light, so the light distance is ``(end - start).length()``.
    """

    __slots__ = ('start', 'end', '_direction')

    def __init__(self, start: Point3, end: Point3):
        """Create a ray.

        Args:
            start: The starting point of the ray
            end: Any other point the ray passes through
        """
        self.start = start
        self.end = end
        self._direction: Optional[Vec3] = None

    @classmethod
    def towards(cls, start: Point3, direction: Vec3) -> Ray:
        """Create a ray leaving ``start`` along ``direction``."""
        return cls(start, start + direction)

    @property
    def direction(self) -> Vec3:
        """Unit direction, computed once on first access."""
        if self._direction is None:
            self._direction = (self.end - self.start).normalize()
        return self._direction

    def length(self) -> float:
        """Distance from start to end."""
        return (self.end - self.start).length()

    def at(self, t: float) -> Point3:
        """Get the point along the ray at distance t from the start."""
        return self.start + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(start={self.start}, end={self.end})"
