"""
Shading engine.

Implements:
- Diffuse (Lambertian) lighting with inverse-square falloff
- Hard shadows, and soft shadows by sampling around a point light
- Mirror reflections with a bounded number of bounces
"""

from __future__ import annotations
import logging
import math
from typing import Optional

from .color import Color
from .ray import Ray
from .scene import Scene
from .shapes import RaycastHit
from .lights import PointLight
from .vec3 import Point3

logger = logging.getLogger(__name__)

# Global brightness multiplier applied to every light
EXPOSURE = 30.0

# Maximum number of extra mirror bounces after the first reflection
MAX_REFLECTIONS = 3

# Secondary rays ignore hits closer than this to their start point
SELF_INTERSECTION_EPSILON = 0.01


class Shader:
    """Computes pixel colors for hits in a scene."""

    def __init__(
        self,
        scene: Scene,
        shadow_samples: int = 0,
        exposure: float = EXPOSURE,
        max_reflections: int = MAX_REFLECTIONS
    ):
        """Create a shader.

        Args:
            scene: The scene being rendered
            shadow_samples: Shadow rays per light (0 = one hard shadow ray)
            exposure: Global brightness multiplier
            max_reflections: Recursion limit for mirror surfaces
        """
        self.scene = scene
        self.shadow_samples = shadow_samples
        self.exposure = exposure
        self.max_reflections = max_reflections
        self.point_lights = [l for l in scene.lights if isinstance(l, PointLight)]

        ignored = len(scene.lights) - len(self.point_lights)
        if ignored:
            logger.info("ignoring %d light(s) without shading support", ignored)

    def shade(self, ray: Ray, hit: RaycastHit) -> Color:
        """Color a primary hit, following mirrors if needed."""
        if hit.material.reflective:
            return self.shade_reflective(ray, hit, self.max_reflections)
        return self.shade_diffuse(hit)

    def shade_diffuse(self, hit: RaycastHit) -> Color:
        """Compute direct lighting at a hit point.

        Each point light contributes ``(max(0, L·N) * strength)² * exposure / d²``,
        scaled by the fraction of shadow rays that reach it.
        """
        lightness = 0.0

        for light in self.point_lights:
            light_vector = light.origin - hit.point
            distance_squared = light_vector.length_squared()
            if distance_squared == 0.0:
                # Surface point sits on the light; it has no direction
                continue
            light_dir = light_vector / math.sqrt(distance_squared)

            l0 = max(0.0, light_dir.dot(hit.normal)) * light.strength
            new_light = (l0 * l0 * self.exposure) / distance_squared

            if new_light > 0.0:
                new_light *= self.light_visibility(hit.point, light)

            lightness += new_light

        return hit.material.color * lightness

    def light_visibility(self, point: Point3, light: PointLight) -> float:
        """Fraction of shadow rays from ``point`` that reach ``light``.

        Returns 0.0 or 1.0 for hard shadows and a multiple of
        ``1 / shadow_samples`` for soft shadows. The caller multiplies the
        light by this fraction, rather than subtracting ``1 / samples``
        from it for every blocked sample, so a partly shadowed light never
        goes negative.
        """
        if self.shadow_samples <= 0 or light.size <= 0.0:
            return 0.0 if self._occluded(point, light.origin) else 1.0

        blocked = 0
        for _ in range(self.shadow_samples):
            if self._occluded(point, light.sample_point()):
                blocked += 1
        return 1.0 - blocked / self.shadow_samples

    def _occluded(self, point: Point3, target: Point3) -> bool:
        """True if any object lies between ``point`` and ``target``."""
        ray = Ray(point, target)
        distance = ray.length()

        for obj in self.scene.objects:
            hit = obj.raycast(ray)
            if hit is not None and SELF_INTERSECTION_EPSILON < hit.depth < distance:
                return True
        return False

    def shade_reflective(self, ray: Ray, hit: RaycastHit, recursion_limit: int) -> Color:
        """Color a mirror hit by tracing the reflected ray.

        Args:
            ray: The ray that arrived at the mirror
            hit: The mirror hit
            recursion_limit: Further mirror bounces still allowed

        Returns:
            Background color if the reflection escapes, the diffuse color
            of what it hits, or the next mirror's color while bounces remain
        """
        reflected = (-ray.direction).reflect(hit.normal)
        bounce_ray = Ray.towards(hit.point, reflected)

        bounce: Optional[RaycastHit] = self.scene.nearest_hit(
            bounce_ray, SELF_INTERSECTION_EPSILON
        )
        if bounce is None:
            return self.scene.world.color

        if bounce.material.reflective and recursion_limit > 0:
            return self.shade_reflective(bounce_ray, bounce, recursion_limit - 1)
        return self.shade_diffuse(bounce)
