"""Drops of sweat that fly off a tired player."""

from __future__ import annotations

import math
import random
from typing import Any, Optional

from heartbeat.geometry import Vec3
from heartbeat.global_values import GlobalValues

Quaternion = tuple[float, float, float, float]

IDENTITY: Quaternion = (1.0, 0.0, 0.0, 0.0)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _angle_axis(axis: Vec3, angle: float) -> Quaternion:
    unit = axis.normalized()
    if unit.length() == 0.0:
        return IDENTITY
    half = angle / 2.0
    sin = math.sin(half)
    return (math.cos(half), unit.x * sin, unit.y * sin, unit.z * sin)


def _slerp(a: Quaternion, b: Quaternion, t: float) -> Quaternion:
    dot = sum(p * q for p, q in zip(a, b))
    if dot < 0.0:
        b = tuple(-q for q in b)
        dot = -dot
    if dot > 0.9995:
        mixed = [p + (q - p) * t for p, q in zip(a, b)]
        norm = math.sqrt(sum(c * c for c in mixed))
        return tuple(c / norm for c in mixed)
    theta = math.acos(dot)
    sin_theta = math.sin(theta)
    wa = math.sin((1.0 - t) * theta) / sin_theta
    wb = math.sin(t * theta) / sin_theta
    return tuple(wa * p + wb * q for p, q in zip(a, b))


class Sweat:
    """A drop that starts above the player, tilts back and falls away.

    ``player`` needs ``world_position()``. The drop moves by its velocity
    once per update; it is deactivated once it falls below -0.5.
    """

    START_HEIGHT = 1.5

    def __init__(
        self,
        values: GlobalValues,
        player: Any,
        direction: Vec3,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.values = values
        rng = rng or random.Random()
        angle = math.radians(values.get_value("Sweat", "Radius", 0))
        unit = direction.normalized()
        axis = Vec3(-unit.z, unit.y, unit.x)
        self.initial_rotation = _angle_axis(axis, angle)
        self.rotation = self.initial_rotation

        self.offset = Vec3(
            (rng.randrange(15) - 7) * 0.1,
            self.START_HEIGHT,
            (rng.randrange(5) - 5) * 0.1,
        )
        drift = -unit / 50.0
        self.velocity = Vec3(drift.x, values.get_value("Sweat", "velocityY", 0.0), drift.z)
        self.position = player.world_position() + self.offset
        self.scale = 1.0
        self.is_active = True

    def update(self, dt: float) -> None:
        """Fall, untilt and shrink; deactivate once below the floor."""
        if not self.is_active:
            return
        values = self.values
        acceleration = values.get_value("Sweat", "AccelerationY", 0.0)
        self.velocity = Vec3(
            self.velocity.x, self.velocity.y - acceleration * dt, self.velocity.z
        )
        vy = self.velocity.y
        t = _clamp01((vy + values.get_value("Sweat", "velocityY", 0.0)) / 0.2)
        self.rotation = _slerp(self.initial_rotation, IDENTITY, 1.0 - t)
        self.scale = _clamp01((vy + values.get_value("Sweat", "SmallerScale", 0.0)) / 0.2)
        self.position = self.position + self.velocity
        if self.position.y <= -0.5:
            self.is_active = False