import math
import random

import pytest

from heartbeat.geometry import BASIS_Z, ZERO, Vec3
from heartbeat.global_values import GlobalValues
from heartbeat.sweat import Sweat


class FakePlayer:
    def __init__(self, position=ZERO):
        self.position = position

    def world_position(self):
        return self.position


@pytest.fixture
def values(tmp_path):
    store = GlobalValues(tmp_path)
    store.add_value("Sweat", "NumSweat", 5)
    store.add_value("Sweat", "velocityY", 0.1)
    store.add_value("Sweat", "Radius", 240)
    store.add_value("Sweat", "AccelerationY", 0.4)
    store.add_value("Sweat", "SmallerScale", 0.25)
    return store


def norm(q):
    return math.sqrt(sum(c * c for c in q))


@pytest.mark.parametrize("seed", range(10))
def test_starts_above_player_with_bounded_offset(values, seed):
    player = FakePlayer(Vec3(3.0, 0.0, -2.0))
    sweat = Sweat(values, player, BASIS_Z, random.Random(seed))
    assert sweat.position.y == pytest.approx(1.5)
    assert -0.7 - 1e-9 <= sweat.position.x - 3.0 <= 0.6 + 1e-9
    assert -0.5 - 1e-9 <= sweat.position.z + 2.0 <= -0.1 + 1e-9
    assert sweat.velocity.y == 0.1
    assert sweat.velocity.z == pytest.approx(-1.0 / 50.0)


def test_rotation_is_unit_and_untilts_while_falling(values):
    sweat = Sweat(values, FakePlayer(), BASIS_Z, random.Random(1))
    assert norm(sweat.rotation) == pytest.approx(1.0)
    assert abs(sweat.rotation[0]) < 0.99
    for _ in range(5):
        sweat.update(0.1)
        assert norm(sweat.rotation) == pytest.approx(1.0)
        assert 0.0 <= sweat.scale <= 1.0
    assert abs(sweat.rotation[0]) == pytest.approx(1.0)


def test_moves_by_velocity_each_update(values):
    sweat = Sweat(values, FakePlayer(), BASIS_Z, random.Random(2))
    start = sweat.position
    sweat.update(0.0)
    assert sweat.position.y == pytest.approx(start.y + 0.1)
    assert sweat.position.z == pytest.approx(start.z - 1.0 / 50.0)


def test_falls_below_floor_and_stops(values):
    sweat = Sweat(values, FakePlayer(), BASIS_Z, random.Random(3))
    for _ in range(500):
        sweat.update(0.1)
        if not sweat.is_active:
            break
    assert not sweat.is_active
    assert sweat.position.y <= -0.5
    frozen = sweat.position
    sweat.update(0.1)
    assert sweat.position == frozen


def test_zero_direction_gives_identity_rotation(values):
    sweat = Sweat(values, FakePlayer(), ZERO, random.Random(4))
    assert sweat.rotation == (1.0, 0.0, 0.0, 0.0)
    assert sweat.velocity.x == 0.0 and sweat.velocity.z == 0.0