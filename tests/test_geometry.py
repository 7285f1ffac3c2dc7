import math

import pytest

from heartbeat.geometry import (
    BASIS_X,
    BASIS_Y,
    BASIS_Z,
    GRAVITY,
    ZERO,
    SphereCollider,
    Vec3,
)


class _Anchor:
    def __init__(self, position):
        self.position = position

    def world_position(self):
        return self.position


def test_gravity_matches_world_constant():
    assert GRAVITY == Vec3(0, -9.8, 0)


def test_length_of_pythagorean_vector():
    assert Vec3(3, 4, 0).length() == pytest.approx(5.0)


@pytest.mark.parametrize("vec", [Vec3(1, 2, 3), Vec3(-7, 0.5, 2), Vec3(0, 0, 9)])
def test_normalized_has_unit_length(vec):
    unit = vec.normalized()
    assert unit.length() == pytest.approx(1.0)
    assert unit.dot(vec) == pytest.approx(vec.length())


def test_normalized_zero_stays_zero():
    assert ZERO.normalized() == ZERO


def test_dot_of_basis_vectors():
    assert BASIS_X.dot(BASIS_Y) == 0
    assert BASIS_Z.dot(BASIS_Z) == 1


def test_dot_with_self_is_length_squared():
    vec = Vec3(2, -3, 6)
    assert vec.dot(vec) == pytest.approx(vec.length() ** 2)


def test_arithmetic_round_trip():
    a = Vec3(1.5, -2, 4)
    b = Vec3(0.25, 3, -1)
    assert (a + b) - b == a
    assert (a * 2) / 2 == a
    assert 2 * a == a * 2
    assert -(-a) == a
    assert list(a) == [1.5, -2, 4]


def test_collider_without_parent_uses_offset():
    collider = SphereCollider(offset=Vec3(1, 2, 3))
    assert collider.world_position() == Vec3(1, 2, 3)


def test_collider_follows_parent():
    anchor = _Anchor(Vec3(10, 0, -5))
    collider = SphereCollider(offset=Vec3(0, 1, 0), parent=anchor)
    assert collider.world_position() == Vec3(10, 1, -5)
    anchor.position = Vec3(0, 0, 0)
    assert collider.world_position() == Vec3(0, 1, 0)


def test_spheres_touching_intersect():
    a = SphereCollider(radius=1.0, offset=Vec3(0, 0, 0))
    b = SphereCollider(radius=1.0, offset=Vec3(2, 0, 0))
    assert a.intersects(b)
    assert b.intersects(a)


def test_spheres_apart_do_not_intersect():
    a = SphereCollider(radius=1.0, offset=Vec3(0, 0, 0))
    b = SphereCollider(radius=1.0, offset=Vec3(2.5, 0, 0))
    assert not a.intersects(b)


def test_colliders_hash_by_identity():
    a = SphereCollider()
    b = SphereCollider()
    assert len({a, b}) == 2
    assert math.isclose(a.radius, b.radius)