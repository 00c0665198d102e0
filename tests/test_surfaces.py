"""Unit tests for sphere, plane and cube intersection.

Tests cover:
- Hits from outside, misses, rays starting inside
- The [t_min, t_max] acceptance window
- Outward unit normals
- Near-parallel rays
"""

import numpy as np
import pytest

from rayviz.ray import Ray
from rayviz.surfaces.cube import Cube
from rayviz.surfaces.infinite_plane import InfinitePlane
from rayviz.surfaces.sphere import Sphere
from rayviz.utils.vector_operations import vec3

INF = float("inf")


class TestSphereIntersection:
    def test_direct_hit(self, diffuse_red):
        """Ray from z=5 toward the origin hits a unit sphere at t=4 with normal +Z."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 1.0, diffuse_red)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(hit.point, [0.0, 0.0, 1.0], atol=1e-12)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0], atol=1e-12)
        assert hit.material is diffuse_red

    def test_miss(self, diffuse_red):
        """A ray passing beside the sphere reports no hit."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 1.0, diffuse_red)
        assert sphere.intersect(Ray(vec3(0.0, 2.0, 5.0), vec3(0.0, 0.0, -1.0)), 0.001, INF) is None

    @pytest.mark.parametrize(
        "origin, direction",
        [
            ((0.3, -0.2, 6.0), (0.0, 0.05, -1.0)),
            ((4.0, 3.0, 2.0), (-4.0, -2.5, -2.0)),
            ((-3.0, 0.5, 0.0), (1.0, 0.0, 0.1)),
        ],
    )
    def test_hit_point_on_surface(self, diffuse_red, origin, direction):
        """Any hit lies on the sphere and its normal is the unit radial vector."""
        center = vec3(0.5, 0.5, -0.5)
        radius = 1.25
        sphere = Sphere(center, radius, diffuse_red)
        hit = sphere.intersect(Ray(vec3(*origin), vec3(*direction)), 0.001, INF)
        assert hit is not None
        assert np.linalg.norm(hit.point - center) == pytest.approx(radius)
        expected_normal = (hit.point - center) / np.linalg.norm(hit.point - center)
        np.testing.assert_allclose(hit.normal, expected_normal, atol=1e-9)
        assert np.linalg.norm(hit.normal) == pytest.approx(1.0)

    def test_origin_inside_uses_far_root(self, diffuse_red):
        """From the center the near root is negative, so the far root is reported."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 2.0, diffuse_red)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(2.0)
        np.testing.assert_allclose(hit.normal, [1.0, 0.0, 0.0])

    def test_window_excludes_far_hits(self, diffuse_red):
        """Hits beyond t_max are rejected."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 1.0, diffuse_red)
        assert sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)), 0.001, 3.5) is None

    def test_unnormalized_direction(self, diffuse_red):
        """t is measured in units of the direction vector."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 1.0, diffuse_red)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -2.0)), 0.001, INF)
        assert hit.t == pytest.approx(2.0)


class TestPlaneIntersection:
    def test_hit_from_above(self, diffuse_red):
        """A ray falling onto the floor hits it with the plane's normal."""
        plane = InfinitePlane(vec3(0.0, -0.5, 0.0), vec3(0.0, 1.0, 0.0), diffuse_red)
        hit = plane.intersect(Ray(vec3(0.0, 1.5, 0.0), vec3(0.0, -1.0, 0.0)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(2.0)
        np.testing.assert_allclose(hit.point, [0.0, -0.5, 0.0])
        np.testing.assert_allclose(hit.normal, [0.0, 1.0, 0.0])

    def test_normal_is_normalized(self, diffuse_red):
        """The stored normal is unit length even when given unnormalized."""
        plane = InfinitePlane(vec3(0.0, 0.0, 0.0), vec3(0.0, 3.0, 0.0), diffuse_red)
        np.testing.assert_allclose(plane.normal, [0.0, 1.0, 0.0])

    def test_parallel_ray_misses(self, diffuse_red):
        """A ray parallel to the plane never hits it."""
        plane = InfinitePlane(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), diffuse_red)
        assert plane.intersect(Ray(vec3(0.0, 1.0, 0.0), vec3(1.0, 0.0, 0.0)), 0.001, INF) is None

    def test_plane_behind_ray(self, diffuse_red):
        """Negative t is outside the window."""
        plane = InfinitePlane(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), diffuse_red)
        assert plane.intersect(Ray(vec3(0.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0)), 0.001, INF) is None


class TestCubeIntersection:
    def test_slab_hit_front_face(self, diffuse_red):
        """Ray along -Z from z=5 at the center of [-1,1]^3 hits at t=4 with normal +Z."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        hit = cube.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])
        np.testing.assert_allclose(hit.point, [0.0, 0.0, 1.0])

    @pytest.mark.parametrize(
        "origin, direction, normal",
        [
            ((5.0, 0.2, 0.1), (-1.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
            ((-5.0, 0.2, 0.1), (1.0, 0.0, 0.0), (-1.0, 0.0, 0.0)),
            ((0.1, 5.0, 0.2), (0.0, -1.0, 0.0), (0.0, 1.0, 0.0)),
            ((0.1, -5.0, 0.2), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0)),
            ((0.3, 0.2, -5.0), (0.0, 0.0, 1.0), (0.0, 0.0, -1.0)),
        ],
    )
    def test_face_normals(self, diffuse_red, origin, direction, normal):
        """The normal is the outward axis of the face the ray enters through."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        hit = cube.intersect(Ray(vec3(*origin), vec3(*direction)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(hit.normal, normal)

    def test_oblique_hit_picks_last_entered_slab(self, diffuse_red):
        """For a diagonal ray the entry face belongs to the slab entered last."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        hit = cube.intersect(Ray(vec3(3.0, 0.5, 5.0), vec3(-1.0, 0.0, -1.0)), 0.001, INF)
        assert hit is not None
        # x slab entered at t=2, z slab at t=4
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_parallel_ray_outside_slab_misses(self, diffuse_red):
        """An axis-parallel ray outside the slab on that axis cannot hit."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        assert cube.intersect(Ray(vec3(0.0, 2.0, 5.0), vec3(0.0, 0.0, -1.0)), 0.001, INF) is None

    def test_miss_beside_box(self, diffuse_red):
        """Slab intervals that do not overlap reject the ray."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        assert cube.intersect(Ray(vec3(3.0, 0.0, 5.0), vec3(-0.1, 0.1, -1.0)), 0.001, INF) is None

    def test_origin_inside_reports_exit_face(self, diffuse_red):
        """From inside the box the exit face and its outward normal are reported."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        hit = cube.intersect(Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0)), 0.001, INF)
        assert hit is not None
        assert hit.t == pytest.approx(1.0)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, -1.0])

    def test_box_behind_ray(self, diffuse_red):
        """A box entirely behind the origin is not hit."""
        cube = Cube(vec3(-1.0, -1.0, -1.0), vec3(1.0, 1.0, 1.0), diffuse_red)
        assert cube.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, 1.0)), 0.001, INF) is None

    def test_from_center(self, diffuse_red):
        """from_center builds the box spanning center +/- size/2."""
        cube = Cube.from_center(vec3(1.0, 2.0, 3.0), 2.0, diffuse_red)
        np.testing.assert_allclose(cube.min, [0.0, 1.0, 2.0])
        np.testing.assert_allclose(cube.max, [2.0, 3.0, 4.0])
