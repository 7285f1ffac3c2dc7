"""The player's hearts: orbiting, thrown, stuck to enemies and called back."""

from __future__ import annotations

import enum
import math
from typing import Any, Optional

from heartbeat.enemy import Enemy, EnemyBehavior
from heartbeat.geometry import BASIS_Y, GRAVITY, ZERO, SphereCollider, Vec3
from heartbeat.global_values import GlobalValues
from heartbeat.hp import HPState


class HeartState(enum.Enum):
    """What a heart is currently doing."""

    FOLLOW = enum.auto()
    ATTACKING = enum.auto()
    ON_GROUND = enum.auto()
    ATTACH = enum.auto()
    BEAT_ATTACK = enum.auto()
    COMEBACK = enum.auto()
    LOST = enum.auto()


def _register_defaults(values: GlobalValues) -> None:
    values.add_value("Heart", "CamebackTime", 3.0)
    values.add_value("Heart", "CamebackSpeed", 5.0)
    values.add_value("Heart", "StartOffset", 1.5)
    values.add_value("Heart", "AttackSpeed", 6.0)
    values.add_value("Heart", "HeightOffset", 1.0)
    values.add_value("Heart", "ColliderRadius", 1.0)
    values.add_value("Heart", "ToFollowDistance", 1.0)
    values.add_value("Animation", "HeartbeatCycle", 0.5)
    values.add_value("Animation", "HeartBeatAmplitude", 0.5)
    values.add_value("Animation", "HeartbeatMinCycle", 0.2)
    values.add_value("Animation", "AngleLapCycle", 6.0)
    values.add_value("Animation", "DistanceOffset", Vec3(0.0, 1.0, 1.5))
    values.add_value("Animation", "HeartBaseScale", 1.0)


def _rotate_y(vector: Vec3, angle: float) -> Vec3:
    cos, sin = math.cos(angle), math.sin(angle)
    return Vec3(
        vector.x * cos + vector.z * sin,
        vector.y,
        -vector.x * sin + vector.z * cos,
    )


class Heart:
    """A heart that orbits its parent (the player) until it is thrown.

    ``position`` is relative to ``parent`` when one is set, otherwise it is
    in world space. ``player`` needs ``world_position()``; ``hp_manager``
    needs ``hp``, ``max_hitpoint`` and ``set_state``; ``beat_manager``, when
    given, needs ``set_next_heart``.
    """

    def __init__(
        self,
        values: GlobalValues,
        hp_manager: Any,
        player: Any = None,
        beat_manager: Any = None,
        parent: Any = None,
        angle_offset: float = 0.0,
    ) -> None:
        _register_defaults(values)
        self.values = values
        self.hp_manager = hp_manager
        self.player = player
        self.beat_manager = beat_manager
        self.parent: Optional[Any] = parent if parent is not None else player
        self.angle_offset = angle_offset

        self.position = ZERO
        self.velocity = ZERO
        self.scale = 1.0
        self.is_active = True
        self.state = HeartState.FOLLOW

        self.heartbeat_timer = 0.0
        self.heartbeat_amplitude = 0.05
        self.base_scale = 1.0
        self.angle_timer = 0.0
        self.parametric = 0.0
        self.distance_offset = Vec3(0.0, 1.0, 1.5)
        self.on_ground_timer = 0.0
        self.destruction_count = 0.0

        self.collider = SphereCollider(
            radius=0.12,
            parent=self,
            group="Heart",
            active=False,
            on_collision_enter=self.on_collision_enter,
        )

    def world_position(self) -> Vec3:
        if self.parent is None:
            return self.position
        return self.parent.world_position() + self.position

    def update(self, dt: float) -> None:
        """Advance the heart by ``dt`` seconds."""
        if not self.is_active:
            return
        if self.hp_manager.hp <= 0:
            self.is_active = False

        self.beat_normal(dt)

        values = self.values
        lap = values.get_value("Animation", "AngleLapCycle", 0.0)
        self.angle_timer += dt
        self.angle_timer = math.fmod(self.angle_timer, lap) if lap else 0.0

        state = self.state
        if state is HeartState.FOLLOW:
            self.parametric = self.angle_timer / lap if lap else 0.0
            angle = self.parametric * 2.0 * math.pi
            self.distance_offset = values.get_value(
                "Animation", "DistanceOffset", self.distance_offset
            )
            self.position = _rotate_y(self.distance_offset, angle + self.angle_offset)
        elif state is HeartState.ATTACKING:
            self.velocity = self.velocity + GRAVITY * dt
            self.position = self.position + self.velocity * dt
            if self.position.y <= 0:
                self.state = HeartState.ON_GROUND
                self.position = Vec3(self.position.x, 0.0, self.position.z)
                self.collider.active = False
        elif state is HeartState.ON_GROUND:
            self.on_ground_timer += dt
            if self.on_ground_timer >= values.get_value("Heart", "CamebackTime", 0.0):
                self.state = HeartState.COMEBACK
        elif state is HeartState.COMEBACK:
            self._come_back_update(dt)
        elif state is HeartState.LOST:
            self.is_active = False

    def _come_back_update(self, dt: float) -> None:
        if self.player is None:
            return
        player_position = self.player.world_position()
        to_player = player_position - self.position
        speed = self.values.get_value("Heart", "CamebackSpeed", 0.0)
        self.position = self.position + to_player.normalized() * speed * dt
        if to_player.length() < self.values.get_value("Heart", "ToFollowDistance", 0.0):
            self.state = HeartState.FOLLOW
            self.on_ground_timer = 0.0
            self.destruction_count = 0.0
            self.position = self.position - player_position
            self.parent = self.player
            self.hp_manager.set_state(HPState.RECOVERY)

    def beat_normal(self, dt: float) -> None:
        """Pulse the heart's scale, faster as the player's hit points drop."""
        values = self.values
        base_cycle = values.get_value("Animation", "HeartbeatCycle", 0.0)
        min_cycle = values.get_value("Animation", "HeartbeatMinCycle", 0.0)
        span = self.hp_manager.max_hitpoint - 1
        ratio = (self.hp_manager.hp - 1) / span if span else 1.0
        cycle = min_cycle + (base_cycle - min_cycle) * ratio

        self.heartbeat_timer += dt
        if cycle > 0:
            self.heartbeat_timer = math.fmod(self.heartbeat_timer, cycle)
            self.parametric = self.heartbeat_timer / cycle
        else:
            self.heartbeat_timer = 0.0
            self.parametric = 0.0
        self.base_scale = values.get_value("Animation", "HeartBaseScale", 0.0)
        self.heartbeat_amplitude = values.get_value("Animation", "HeartBeatAmplitude", 0.0)
        fraction = self.parametric - math.floor(self.parametric)
        self.scale = self.base_scale - self.heartbeat_amplitude * fraction

    def throw(self, world_position: Vec3, direction: Vec3) -> None:
        """Launch the heart from ``world_position`` along ``direction``."""
        values = self.values
        self.parent = None
        start_offset = values.get_value("Heart", "StartOffset", 0.0)
        speed = values.get_value("Heart", "AttackSpeed", 0.0)
        height = values.get_value("Heart", "HeightOffset", 0.0)
        self.position = world_position + direction * start_offset + BASIS_Y * height
        launch = direction * speed
        self.velocity = Vec3(launch.x, 1.0, launch.z)
        self.collider.active = True
        self.state = HeartState.ATTACKING

    def beat_attack(self) -> None:
        self.state = HeartState.BEAT_ATTACK

    def stop_beat(self) -> None:
        self.state = HeartState.ATTACH

    def come_back(self) -> None:
        """Detach and start flying back to the player."""
        self.state = HeartState.COMEBACK
        self.position = self.world_position()
        self.parent = None

    def lost(self) -> None:
        """Mark the heart as lost; it disappears on the next update."""
        self.state = HeartState.LOST

    def on_collision_enter(self, other: SphereCollider) -> None:
        """Stick to an enemy whose hit collider the heart touches."""
        if other.group != "EnemyHit":
            return
        enemy = other.parent
        if not isinstance(enemy, Enemy) or enemy.behavior is EnemyBehavior.DOWN:
            return
        local = self.world_position() - enemy.world_position()
        self.parent = enemy
        self.position = local
        self.state = HeartState.ATTACH
        self.collider.active = False
        if self.beat_manager is not None:
            self.beat_manager.set_next_heart(self)