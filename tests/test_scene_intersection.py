"""Unit tests for scene-level ray queries.

Tests cover:
- Object and light table management (add, clear, capacity)
- nearest_hit across spheres and planes, including exact ties
- is_occluded for shadow rays
- Per-object normal dispatch
"""

import pytest
import taichi as ti


def _run_nearest_hit(origin, direction):
    """Run nearest_hit in a kernel and return (hit, time, object_index)."""
    from pointtracer.core.ray import Ray, vec3
    from pointtracer.scene.intersection import nearest_hit

    hit = ti.field(dtype=ti.i32, shape=())
    time = ti.field(dtype=ti.f32, shape=())
    index = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
    ):
        ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz).normalized())
        rec = nearest_hit(ray)
        hit[None] = rec.hit
        time[None] = rec.time
        index[None] = rec.object_index

    test_kernel(*origin, *direction)
    return hit[None], time[None], index[None]


def _run_is_occluded(origin, direction):
    from pointtracer.core.ray import Ray, vec3
    from pointtracer.scene.intersection import is_occluded

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
    ):
        ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz).normalized())
        result[None] = is_occluded(ray)

    test_kernel(*origin, *direction)
    return result[None]


GREY = (0.5, 0.5, 0.5)


class TestSceneTables:
    """Tests for adding and clearing table rows."""

    def test_add_and_count(self):
        from pointtracer.scene.intersection import (
            add_plane,
            add_point_light,
            add_sphere,
            get_light_count,
            get_object_count,
        )

        assert add_sphere((0.0, 0.0, 30.0), 5.0, GREY) == 0
        assert add_plane((0.0, -6.0, 0.0), (0.0, -1.0, 0.0), GREY, 0.2) == 1
        assert add_point_light((0.0, 2.0, -4.0), (1.0, 1.0, 1.0), 0.8) == 0

        assert get_object_count() == 2
        assert get_light_count() == 1

    def test_rows_store_kind_and_material(self):
        from pointtracer.scene.intersection import (
            PLANE_KIND,
            SPHERE_KIND,
            add_plane,
            add_sphere,
            object_diffuse,
            object_kinds,
            object_radii,
            object_specular,
        )

        add_sphere((0.0, 0.0, 30.0), 5.0, (0.25, 0.75, 0.4), 0.5)
        add_plane((0.0, -6.0, 0.0), (0.0, -1.0, 0.0), (1.0, 0.0, 0.0), 0.2)

        assert object_kinds[0] == SPHERE_KIND
        assert object_kinds[1] == PLANE_KIND
        assert object_radii[0] == pytest.approx(5.0)
        assert object_specular[0] == pytest.approx(0.5)
        assert object_diffuse[1][0] == pytest.approx(1.0)

    def test_clear_scene(self):
        from pointtracer.scene.intersection import (
            add_point_light,
            add_sphere,
            clear_scene,
            get_light_count,
            get_object_count,
        )

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_point_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), 1.0)
        clear_scene()

        assert get_object_count() == 0
        assert get_light_count() == 0

    def test_light_capacity(self):
        from pointtracer.scene.intersection import MAX_LIGHTS, add_point_light

        for _ in range(MAX_LIGHTS):
            add_point_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), 1.0)

        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_point_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), 1.0)


class TestNearestHit:
    """Tests for nearest_hit."""

    def test_empty_scene_misses(self):
        hit, _, index = _run_nearest_hit((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 0
        assert index == -1

    def test_nearest_wins_regardless_of_order(self):
        """Test that a nearer object added later is still reported."""
        from pointtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_sphere((0.0, 0.0, 10.0), 1.0, GREY)

        hit, t, index = _run_nearest_hit((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert index == 1
        assert abs(t - 10.0) < 1e-3

    def test_exact_tie_prefers_first_added(self):
        from pointtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)

        hit, _, index = _run_nearest_hit((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert index == 0

    def test_plane_in_front_of_sphere(self):
        """Test mixing shape kinds in one table."""
        from pointtracer.scene.intersection import add_plane, add_sphere

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_plane((0.0, 0.0, 5.0), (0.0, 0.0, 1.0), GREY)

        hit, t, index = _run_nearest_hit((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert index == 1
        assert abs(t - 6.0) < 1e-4

    def test_plane_facing_away_is_skipped(self):
        from pointtracer.scene.intersection import add_plane, add_sphere

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_plane((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), GREY)

        hit, _, index = _run_nearest_hit((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert index == 0


class TestIsOccluded:
    """Tests for shadow ray queries."""

    def test_empty_scene_not_occluded(self):
        assert _run_is_occluded((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 0

    def test_blocker_occludes(self):
        from pointtracer.scene.intersection import add_sphere

        add_sphere((0.0, 10.0, 0.0), 1.0, GREY)
        assert _run_is_occluded((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 1

    def test_object_behind_does_not_occlude(self):
        from pointtracer.scene.intersection import add_sphere

        add_sphere((0.0, -10.0, 0.0), 1.0, GREY)
        assert _run_is_occluded((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 0


class TestObjectNormal:
    """Tests for object_normal dispatch."""

    def test_sphere_and_plane_normals(self):
        from pointtracer.core.ray import vec3
        from pointtracer.scene.intersection import add_plane, add_sphere, object_normal

        add_sphere((0.0, 0.0, 30.0), 5.0, GREY)
        add_plane((0.0, -6.0, 0.0), (0.0, -1.0, 0.0), GREY)

        normals = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            normals[0] = object_normal(0, vec3(5.0, 0.0, 30.0))
            normals[1] = object_normal(1, vec3(3.0, -6.0, 12.0))

        test_kernel()
        assert normals[0][0] == pytest.approx(1.0, abs=1e-6)
        assert normals[1][1] == pytest.approx(-1.0, abs=1e-6)
