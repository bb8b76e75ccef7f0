"""Tests for geometric shapes."""

import pytest
import math
from chunktrace.vec3 import Vec3, Point3
from chunktrace.ray import Ray
from chunktrace.color import Color
from chunktrace.materials import Material
from chunktrace.shapes import Sphere, Floor, Tri, RaycastHit

RED = Material(Color(255, 0, 0))
GRAY = Material(Color(128, 128, 128))


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, RED)
        assert sphere.center == Point3(0, 0, 0)
        assert sphere.radius == 1.0
        assert sphere.material is RED

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, RED)
        hit = sphere.raycast(Ray(Point3(0, 0, -5), Point3(0, 0, 0)))

        assert hit is not None
        assert abs(hit.depth - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)
        assert hit.normal == Vec3(0, 0, -1)
        assert hit.material is RED

    def test_depth_is_distance_minus_radius(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, RED)
        start = Point3(2, 3, 6)  # 7 units from the center
        hit = sphere.raycast(Ray(start, Point3(0, 0, 0)))

        assert hit is not None
        assert abs(hit.depth - 6.0) < 1e-9
        assert hit.normal == hit.point.normalize()

    def test_depth_ignores_ray_end_distance(self):
        sphere = Sphere(Point3(0, 0, 10), 2.0, RED)
        short = sphere.raycast(Ray(Point3(0, 0, 0), Point3(0, 0, 0.001)))
        long = sphere.raycast(Ray(Point3(0, 0, 0), Point3(0, 0, 1000)))
        assert abs(short.depth - long.depth) < 1e-9
        assert abs(short.depth - 8.0) < 1e-9

    def test_normal_is_unit(self):
        sphere = Sphere(Point3(1, 2, 3), 2.5, RED)
        hit = sphere.raycast(Ray(Point3(1.5, 2.2, -10), Point3(1.5, 2.2, 0)))
        assert hit is not None
        assert abs(hit.normal.length() - 1.0) < 1e-9

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, RED)
        assert sphere.raycast(Ray(Point3(0, 5, -5), Point3(0, 5, 0))) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0, RED)
        assert sphere.raycast(Ray(Point3(0, 0, 0), Point3(0, 0, 1))) is None

    def test_start_inside_sees_nothing(self):
        # Only the near root is considered, which is behind the start
        sphere = Sphere(Point3(0, 0, 0), 1.0, RED)
        assert sphere.raycast(Ray(Point3(0, 0, 0), Point3(0, 0, 1))) is None


class TestFloor:
    """Test Floor class."""

    def test_straight_down(self):
        floor = Floor(0.0, GRAY)
        hit = floor.raycast(Ray(Point3(2, 3, -1), Point3(2, 2, -1)))

        assert hit is not None
        assert hit.point == Point3(2, 0, -1)
        assert abs(hit.depth - 3.0) < 1e-9
        assert hit.normal == Vec3(0, 1, 0)

    def test_oblique(self):
        floor = Floor(-1.0, GRAY)
        hit = floor.raycast(Ray(Point3(0, 0, 0), Point3(0, -1, 1)))

        assert hit is not None
        assert hit.point == Point3(0, -1, 1)
        assert abs(hit.depth - math.sqrt(2)) < 1e-9

    @pytest.mark.parametrize("end", [
        Point3(0, 2, 0),    # straight up
        Point3(1, 1, 3),    # parallel
        Point3(0.5, 5, 2),  # upward and sideways
    ])
    def test_non_negative_y_never_hits(self, end):
        floor = Floor(0.0, GRAY)
        assert floor.raycast(Ray(Point3(0, 1, 0), end)) is None

    def test_below_floor_looking_down(self):
        floor = Floor(0.0, GRAY)
        assert floor.raycast(Ray(Point3(0, -2, 0), Point3(0, -3, 0))) is None


class TestTri:
    """Test Tri class."""

    def setup_method(self):
        self.v0 = Point3(0, 0, 0)
        self.v1 = Point3(1, 0, 0)
        self.v2 = Point3(0, 1, 0)
        self.centroid = (self.v0 + self.v1 + self.v2) / 3

    def test_auto_normal(self):
        tri = Tri.auto_normal(self.v0, self.v1, self.v2, RED)
        assert tri.n0 == Vec3(0, 0, 1)
        assert tri.n1 == Vec3(0, 0, 1)
        assert tri.n2 == Vec3(0, 0, 1)
        assert tri.face_normal == Vec3(0, 0, 1)

    def test_hit_through_centroid(self):
        n = Vec3(0, 0, 1)
        tri = Tri(self.v0, self.v1, self.v2, n, n, n, RED)
        start = self.centroid + n * 2
        hit = tri.raycast(Ray(start, self.centroid))

        assert hit is not None
        assert hit.point == self.centroid
        assert abs(hit.depth - 2.0) < 1e-9
        assert hit.normal == n
        assert hit.material is RED

    def test_centroid_normal_is_vertex_average(self):
        n0, n1, n2 = Vec3(0, 0, 1), Vec3(1, 0, 0), Vec3(0, 1, 0)
        tri = Tri(self.v0, self.v1, self.v2, n0, n1, n2, RED)
        hit = tri.raycast(Ray(self.centroid + Vec3(0, 0, 1), self.centroid))

        assert hit is not None
        assert hit.normal == (n0 + n1 + n2) / 3

    def test_near_vertex_normal_dominates(self):
        n0, n1, n2 = Vec3(0, 0, 1), Vec3(1, 0, 0), Vec3(0, 1, 0)
        tri = Tri(self.v0, self.v1, self.v2, n0, n1, n2, RED)
        hit = tri.raycast(Ray(Point3(0.9, 0.05, 1), Point3(0.9, 0.05, 0)))

        assert hit is not None
        assert hit.normal.x > 0.8

    def test_back_face_culled(self):
        tri = Tri.auto_normal(self.v0, self.v1, self.v2, RED)
        assert tri.raycast(Ray(self.centroid - Vec3(0, 0, 1), self.centroid)) is None

    def test_parallel_miss(self):
        tri = Tri.auto_normal(self.v0, self.v1, self.v2, RED)
        assert tri.raycast(Ray(Point3(-1, 0.2, 0), Point3(1, 0.2, 0))) is None

    def test_outside_miss(self):
        tri = Tri.auto_normal(self.v0, self.v1, self.v2, RED)
        assert tri.raycast(Ray(Point3(0.8, 0.8, 1), Point3(0.8, 0.8, 0))) is None

    def test_behind_start_miss(self):
        tri = Tri.auto_normal(self.v0, self.v1, self.v2, RED)
        start = self.centroid - Vec3(0, 0, 1)
        # Pointing down -z from below the triangle: it is behind the start
        assert tri.raycast(Ray(start, start - Vec3(0, 0, 1))) is None


class TestRaycastHit:
    """Test RaycastHit record."""

    def test_fields(self):
        hit = RaycastHit(Point3(1, 2, 3), Vec3(0, 1, 0), 2.5, RED)
        assert hit.point == Point3(1, 2, 3)
        assert hit.normal == Vec3(0, 1, 0)
        assert hit.depth == 2.5
        assert hit.material is RED
