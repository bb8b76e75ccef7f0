"""
Geometric shapes for the ray tracer.

Each shape implements the SceneObject protocol with a ``raycast``
method. Every shape reports ``depth`` as the distance along the ray's
unit direction, so hits from different shape types compare directly.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material

# Determinant and distance threshold for ray-triangle tests
TRI_EPSILON = 1e-6

WORLD_UP = Vec3(0.0, 1.0, 0.0)


@dataclass
class RaycastHit:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The outward surface normal at the intersection
        depth: Distance from the ray start along its unit direction
        material: The material of the surface that was hit
    """
    point: Point3
    normal: Vec3
    depth: float
    material: Material


class SceneObject(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    material: Material

    @abstractmethod
    def raycast(self, ray: Ray) -> Optional[RaycastHit]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test

        Returns:
            RaycastHit for the nearest forward intersection, None otherwise
        """
        pass


class Sphere(SceneObject):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Material):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere
            material: Material for shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def raycast(self, ray: Ray) -> Optional[RaycastHit]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation |S + tD - C|² = r² with unit D expands to
        t²(D·D) + 2t(D·(S-C)) + (S-C)·(S-C) - r² = 0.
        Only the near root is used: spheres are opaque, so the far side
        is never directly visible.
        """
        direction = ray.direction
        oc = ray.start - self.center
        a = direction.dot(direction)
        b = 2.0 * direction.dot(oc)
        c = oc.dot(oc) - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if not discriminant >= 0:
            return None

        t = (-b - math.sqrt(discriminant)) / (2.0 * a)
        point = ray.start + direction * t

        # Sphere is behind the ray
        if not (point - ray.start).dot(direction) > 0:
            return None

        normal = (point - self.center) / self.radius
        return RaycastHit(point, normal, t, self.material)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Floor(SceneObject):
    """An infinite horizontal plane at height ``y``, visible from above."""

    def __init__(self, y: float, material: Material):
        self.y = y
        self.material = material

    def raycast(self, ray: Ray) -> Optional[RaycastHit]:
        direction = ray.direction

        # Pointing up or parallel to the plane
        if not direction.y < 0.0:
            return None

        t = (self.y - ray.start.y) / direction.y
        if t <= 0.0:
            return None

        point = ray.start + direction * t
        return RaycastHit(point, WORLD_UP, t, self.material)

    def __repr__(self) -> str:
        return f"Floor(y={self.y})"


class Tri(SceneObject):
    """A triangle with per-vertex normals for smooth shading.

    Vertices are expected in counter-clockwise order seen from the
    front. Back faces are culled: a ray that approaches from the side
    opposite to ``edge0 x edge1`` never hits.
    """

    def __init__(
        self,
        v0: Point3, v1: Point3, v2: Point3,
        n0: Vec3, n1: Vec3, n2: Vec3,
        material: Material
    ):
        """Create a smooth-shaded triangle.

        Args:
            v0, v1, v2: Vertex positions
            n0, n1, n2: Per-vertex normals
            material: Material for shading
        """
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.n0 = n0
        self.n1 = n1
        self.n2 = n2
        self.material = material

        # Pre-compute edges
        self.edge0 = v1 - v0
        self.edge1 = v2 - v0

    @classmethod
    def auto_normal(cls, v0: Point3, v1: Point3, v2: Point3, material: Material) -> Tri:
        """Create a flat-shaded triangle using the face normal at every vertex."""
        normal = (v1 - v0).cross(v2 - v0).normalize()
        return cls(v0, v1, v2, normal, normal, normal, material)

    @property
    def vertices(self) -> tuple[Point3, Point3, Point3]:
        return (self.v0, self.v1, self.v2)

    @property
    def face_normal(self) -> Vec3:
        return self.edge0.cross(self.edge1).normalize()

    def raycast(self, ray: Ray) -> Optional[RaycastHit]:
        """Test ray-triangle intersection using the Möller-Trumbore algorithm."""
        direction = ray.direction
        h = direction.cross(self.edge1)
        a = self.edge0.dot(h)

        # Parallel to the triangle, or seeing its back face
        if not a >= TRI_EPSILON:
            return None

        f = 1.0 / a
        s = ray.start - self.v0
        u = f * s.dot(h)

        if u < 0.0 or u > 1.0:
            return None

        q = s.cross(self.edge0)
        v = f * direction.dot(q)

        if v < 0.0 or u + v > 1.0:
            return None

        t = f * self.edge1.dot(q)
        if t <= TRI_EPSILON:
            return None

        point = ray.start + direction * t

        # Interpolated normal is left unnormalized, shading tolerates it
        normal = self.n0 * (1.0 - u - v) + self.n1 * u + self.n2 * v
        return RaycastHit(point, normal, t, self.material)

    def __repr__(self) -> str:
        return f"Tri({self.v0}, {self.v1}, {self.v2})"
