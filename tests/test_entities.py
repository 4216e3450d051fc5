"""Tests for transform math and entity helpers."""

import math

import pytest

from spatial.entities import (
    Entity,
    Transform,
    cross,
    cylindrical_to_cartesian,
    forward_axis,
    look_at,
    normalize_vector,
    rotation_from_basis,
    rotation_matrix,
    spherical_to_cartesian,
)


class TestVectorHelpers:
    def test_normalize(self):
        assert normalize_vector((3.0, 0.0, 4.0)) == pytest.approx((0.6, 0.0, 0.8))

    def test_normalize_zero_vector(self):
        assert normalize_vector((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_cross_right_handed(self):
        assert cross((1.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == (0.0, 0.0, 1.0)


class TestCoordinateConversions:
    def test_spherical_equator(self):
        assert spherical_to_cartesian(800, math.pi / 2, 0) == pytest.approx((0.0, 0.0, 800.0))
        assert spherical_to_cartesian(800, math.pi / 2, math.pi / 2) == pytest.approx(
            (800.0, 0.0, 0.0), abs=1e-9
        )

    def test_spherical_north_pole(self):
        assert spherical_to_cartesian(10, 0, 1.3) == pytest.approx((0.0, 10.0, 0.0))

    def test_cylindrical(self):
        assert cylindrical_to_cartesian(1250, 0, 75) == pytest.approx((0.0, 75.0, 1250.0))
        assert cylindrical_to_cartesian(2, math.pi / 2, 0) == pytest.approx((2.0, 0.0, 0.0), abs=1e-12)


class TestLookAt:
    def test_forward_along_z_is_identity(self):
        assert look_at((0, 0, 0), (0, 0, 5)) == pytest.approx((0.0, 0.0, 0.0))

    def test_forward_along_x(self):
        rotation = look_at((0, 0, 0), (10, 0, 0))
        assert rotation == pytest.approx((0.0, math.pi / 2, 0.0))

    def test_forward_backward(self):
        rotation = look_at((0, 0, 0), (0, 0, -1))
        assert forward_axis(rotation) == pytest.approx((0.0, 0.0, -1.0), abs=1e-12)

    @pytest.mark.parametrize(
        "position,target",
        [
            ((0, 0, 0), (1, 2, 3)),
            ((100, -50, 20), (-30, 40, 900)),
            ((5, 5, 5), (10, 4, -2)),
            ((-800, 0, 300), (-1600, 0, 600)),
        ],
    )
    def test_forward_axis_points_at_target(self, position, target):
        expected = normalize_vector(tuple(t - p for p, t in zip(position, target)))
        assert forward_axis(look_at(position, target)) == pytest.approx(expected, abs=1e-9)

    def test_forward_parallel_to_up_is_nudged(self):
        rotation = look_at((0, 0, 0), (0, 5, 0))
        assert all(math.isfinite(angle) for angle in rotation)
        assert forward_axis(rotation) == pytest.approx((0.0, 1.0, 0.0), abs=1e-3)

    def test_coincident_points_face_z(self):
        assert forward_axis(look_at((1, 1, 1), (1, 1, 1))) == pytest.approx((0.0, 0.0, 1.0))

    def test_matrix_round_trip(self):
        rotation = (0.3, -0.7, 1.1)
        assert rotation_from_basis(*rotation_matrix(rotation)) == pytest.approx(rotation)


class TestEntity:
    def test_defaults(self):
        entity = Entity(index=3)
        assert entity.transform == Transform()

    def test_setters_update_transform(self):
        entity = Entity(index=0)
        entity.set_position((1.0, 2.0, 3.0))
        entity.set_rotation((0.1, 0.2, 0.3))
        assert entity.transform == Transform((1.0, 2.0, 3.0), (0.1, 0.2, 0.3))

    def test_transform_to_dict(self):
        assert Transform((1.0, 2.0, 3.0)).to_dict() == {
            "position": [1.0, 2.0, 3.0],
            "rotation": [0.0, 0.0, 0.0],
        }
