"""
Light sources for the ray tracer.

Implements:
- Point lights, with an optional radius for soft shadows
- Sun lights (directional). Accepted in scenes but not yet shaded.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .vec3 import Vec3, Point3


class Light:
    """Base class for light sources."""


@dataclass(frozen=True)
class PointLight(Light):
    """A point light source.

    Attributes:
        origin: Position of the light
        strength: Brightness multiplier
        size: Jitter radius used for soft shadows (0 = hard shadows)
    """
    origin: Point3
    strength: float = 1.0
    size: float = 0.0

    def sample_point(self) -> Point3:
        """Pick a point on the light for one soft-shadow sample."""
        if self.size <= 0.0:
            return self.origin
        return self.origin + Vec3.random_unit_vector() * self.size


@dataclass(frozen=True)
class SunLight(Light):
    """A directional light (like the sun).

    TODO: shade sun lights once directional shadow rays are supported;
    until then they contribute nothing.
    """
    direction: Optional[Vec3] = None
    strength: float = 0.0
