"""
Scene container and nearest-hit queries.

A Scene is built once, then shared read-only by every render worker.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .color import Color
from .ray import Ray
from .shapes import SceneObject, RaycastHit
from .lights import Light
from .camera import Camera


@dataclass(frozen=True)
class World:
    """Background settings.

    Attributes:
        color: Color seen where a ray hits nothing
        strength: Reserved brightness multiplier, currently unused
    """
    color: Color
    strength: float = 1.0


@dataclass
class Scene:
    """Objects, lights, camera and world for one render."""
    objects: Sequence[SceneObject]
    lights: Sequence[Light]
    camera: Camera
    world: World = field(default_factory=lambda: World(Color(0, 0, 0)))

    def __post_init__(self):
        # Freeze the collections so workers can share them without locking
        self.objects = tuple(self.objects)
        self.lights = tuple(self.lights)

    def nearest_hit(self, ray: Ray, min_depth: float = 0.0) -> Optional[RaycastHit]:
        """Find the closest intersection among all objects.

        Args:
            ray: The ray to trace
            min_depth: Hits at or closer than this are ignored, used to
                keep secondary rays from hitting the surface they leave

        Returns:
            The hit with the smallest depth, or None
        """
        closest_hit: Optional[RaycastHit] = None
        closest_depth = float('inf')

        for obj in self.objects:
            hit = obj.raycast(ray)
            if hit is not None and min_depth < hit.depth < closest_depth:
                closest_hit = hit
                closest_depth = hit.depth

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)
