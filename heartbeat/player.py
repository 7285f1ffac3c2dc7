"""The player: moves, throws hearts, drives beats and reacts to hits."""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass
from typing import Any, Optional

from heartbeat.bullet import Heart, HeartState
from heartbeat.geometry import BASIS_Z, ONE, ZERO, SphereCollider, Vec3
from heartbeat.global_values import GlobalValues
from heartbeat.hp import HPState
from heartbeat.sweat import Sweat

Quaternion = tuple[float, float, float, float]

_IDENTITY: Quaternion = (1.0, 0.0, 0.0, 0.0)


class PlayerState(enum.Enum):
    """What the player is currently doing."""

    MOVE = enum.auto()
    BEATING = enum.auto()
    THROWING = enum.auto()
    KNOCK_BACK = enum.auto()
    DEAD = enum.auto()


@dataclass(frozen=True)
class Controls:
    """One frame of input: the attack button and the movement stick and keys.

    ``up``, ``down``, ``left`` and ``right`` override the stick's axes.
    """

    attack_triggered: bool = False
    attack_pressed: bool = False
    attack_released: bool = False
    stick: tuple[float, float] = (0.0, 0.0)
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False


def ease_out_cubic(t: float) -> float:
    """Easing used for the knock-back strength."""
    return 1.0 - (1.0 - t) ** 10.0


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _mul(a: Quaternion, b: Quaternion) -> Quaternion:
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return (
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    )


def _angle_axis(axis: Vec3, angle: float) -> Quaternion:
    unit = axis.normalized()
    half = angle / 2.0
    sin = math.sin(half)
    return (math.cos(half), unit.x * sin, unit.y * sin, unit.z * sin)


def _rotate(q: Quaternion, v: Vec3) -> Vec3:
    w, x, y, z = q
    conj = (w, -x, -y, -z)
    _, rx, ry, rz = _mul(_mul(q, (0.0, v.x, v.y, v.z)), conj)
    return Vec3(rx, ry, rz)


def _look_forward(direction: Vec3) -> Quaternion:
    unit = direction.normalized()
    if unit.length() == 0.0:
        return _IDENTITY
    yaw = math.atan2(unit.x, unit.z)
    pitch = -math.asin(max(-1.0, min(1.0, unit.y)))
    return _mul(_angle_axis(Vec3(0.0, 1.0, 0.0), yaw), _angle_axis(Vec3(1.0, 0.0, 0.0), pitch))


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


def _register_defaults(values: GlobalValues) -> None:
    values.add_value("Player", "BeatIntervalBase", 1.0)
    values.add_value("Player", "BeatIntervalMin", 0.1)
    values.add_value("Enemy", "BeatingDamage", 20)
    values.add_value("Player", "NumBullets", 3)
    values.add_value("Player", "Speed", 3.0)
    values.add_value("Player", "ThrowTime", 0.3)
    values.add_value("Player", "TurnAroundSpeed", 0.2)
    values.add_value("Player", "ColliderRadius", 1.0)
    values.add_value("Player", "NockbackTime", 0.5)
    values.add_value("Player", "MaxNockbackStrength", 10.0)
    values.add_value("Player", "InvincibleTime", 2.0)
    values.add_value("Sweat", "NumSweat", 5)
    values.add_value("Sweat", "velocityY", 0.1)
    values.add_value("Sweat", "Radius", 240)
    values.add_value("Sweat", "AccelerationY", 0.4)
    values.add_value("Sweat", "SmallerScale", 0.25)
    values.add_value("DeadAnimation", "BeatScale", 0.5)
    values.add_value("DeadAnimation", "DownCount", 1.0)


class Player:
    """The player character and the hearts that orbit it.

    ``hp_manager`` needs ``hp``, ``max_hitpoint``, ``set_state`` and
    ``reset_max_hp``; ``beat_manager`` needs ``empty_pair``, ``start_beat``,
    ``beating`` and ``pause_beat``; ``collision_manager``, when given, needs
    ``register(group, collider)``. When the death animation ends,
    ``game_over_requested`` becomes true.
    """

    def __init__(
        self,
        values: GlobalValues,
        hp_manager: Any,
        beat_manager: Any,
        collision_manager: Optional[Any] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        _register_defaults(values)
        self.values = values
        self.hp_manager = hp_manager
        self.beat_manager = beat_manager
        self.collision_manager = collision_manager
        self.rng = rng or random.Random()

        self.position = ZERO
        self.rotation: Quaternion = _IDENTITY
        self.scale = ONE
        self.velocity = ZERO
        self.input = (0.0, 0.0)
        self.state = PlayerState.MOVE

        self.release_button = False
        self.unrelease_once = False
        self._attack_held = False
        self.attack_frame = 0.0
        self.beating_timer = 0.0

        self.knock_back_frame = 0.0
        self.damage_source_position = Vec3(0.0, 0.0, 1.0)
        self.is_invincible = False
        self.invincible_frame = 0.0

        self.axis_of_rotation: Quaternion = _IDENTITY
        self.down_frame = 0.0
        self.last_beat = False
        self.game_over_requested = False

        self.bullets: list[Heart] = []
        self.sweats: list[Sweat] = []

        self.hit_collider = SphereCollider(
            radius=values.get_value("Player", "ColliderRadius", 1.0),
            offset=Vec3(0.0, 1.0, 0.0),
            parent=self,
            group="Player",
            on_collision_enter=self.on_collision,
        )

    def world_position(self) -> Vec3:
        return self.position

    @property
    def forward(self) -> Vec3:
        """The direction the player faces."""
        return _rotate(self.rotation, BASIS_Z)

    # ----- frame -----

    def begin(self, controls: Controls) -> None:
        """Read this frame's input."""
        self.release_button = False
        self.input = (0.0, 0.0)
        self._attack_held = False
        if controls.attack_triggered:
            self.attack_frame = 0.0
        elif controls.attack_pressed:
            self._attack_held = True
        elif controls.attack_released:
            self.attack_frame = 0.0
            if not self.unrelease_once:
                self.release_button = True
            else:
                self.unrelease_once = False

        x, y = controls.stick
        if controls.up:
            y = 1.0
        if controls.down:
            y = -1.0
        if controls.left:
            x = -1.0
        if controls.right:
            x = 1.0
        self.input = (x, y)

    def update(self, dt: float) -> None:
        """Advance the player, its hearts and its sweat by ``dt`` seconds."""
        if self._attack_held:
            self.attack_frame += dt

        state = self.state
        if state is PlayerState.MOVE:
            self.move(dt)
            self.invincible_update(dt)
        elif state is PlayerState.BEATING:
            self.beating(dt)
        elif state is PlayerState.THROWING:
            self.state = PlayerState.MOVE
        elif state is PlayerState.KNOCK_BACK:
            self.knock_back(dt)
            self.invincible_update(dt)
        elif state is PlayerState.DEAD:
            self.dead(dt)

        self.hit_collider.radius = self.values.get_value("Player", "ColliderRadius", 1.0)

        for bullet in self.bullets:
            bullet.update(dt)
        for sweat in self.sweats:
            sweat.update(dt)
        self.sweats = [sweat for sweat in self.sweats if sweat.is_active]

        if self.hp_manager.hp <= 0 and self.state is not PlayerState.DEAD:
            self.state = PlayerState.DEAD
            self.last_beat = True
            self.axis_of_rotation = self.rotation

    def is_visible(self) -> bool:
        """Whether the mesh is drawn this frame; it blinks while invincible."""
        if self.is_invincible:
            return int(self.invincible_frame * 10) % 2 == 0
        return True

    # ----- states -----

    def move(self, dt: float) -> None:
        """Walk, turn towards the walk direction, and start a beat or a throw."""
        values = self.values
        x, y = self.input
        direction = Vec3(x, 0.0, y)
        self.velocity = direction * values.get_value("Player", "Speed", 0.0)
        self.position = self.position + self.velocity * dt
        if self.velocity != ZERO:
            target = _look_forward(self.velocity.normalized())
            turn = values.get_value("Player", "TurnAroundSpeed", 0.0)
            self.rotation = _slerp(self.rotation, target, turn)

        throw_time = values.get_value("Player", "ThrowTime", 0.0)
        if self.attack_frame >= throw_time and not self.beat_manager.empty_pair():
            self.set_beat()
        elif self.release_button:
            self.throw_heart()

    def set_beat(self) -> None:
        """Enter the beat state and make every held heart beat."""
        self.state = PlayerState.BEATING
        self.beating_timer = 0.0
        self.beat_manager.start_beat()

    def beating(self, dt: float) -> None:
        """Beat at an interval that shrinks with the hit points."""
        values = self.values
        self.beating_timer += dt
        base = values.get_value("Player", "BeatIntervalBase", 0.0)
        minimum = values.get_value("Player", "BeatIntervalMin", 0.0)
        max_hp = self.hp_manager.max_hitpoint
        ratio = self.hp_manager.hp / max_hp if max_hp else 1.0
        interval = minimum + (base - minimum) * ratio
        if self.beating_timer >= interval:
            self.beating_timer = math.fmod(self.beating_timer, interval) if interval > 0 else 0.0
            self.beat_manager.beating()
        kill_all = self.beat_manager.empty_pair()
        if self.release_button or kill_all:
            self.state = PlayerState.MOVE
            self.beat_manager.pause_beat()
            if kill_all:
                self.unrelease_once = True

    def throw_heart(self) -> None:
        """Throw the first orbiting heart, if at least two hit points remain."""
        self.state = PlayerState.THROWING
        for bullet in self.bullets:
            if bullet.state is HeartState.FOLLOW and self.hp_manager.hp >= 2:
                bullet.throw(self.world_position(), self.forward)
                self.hp_manager.set_state(HPState.DAMAGE)
                self.add_sweat()
                return

    def knock_back(self, dt: float) -> None:
        """Slide away from the damage source with an easing strength."""
        values = self.values
        self.knock_back_frame += dt
        duration = values.get_value("Player", "NockbackTime", 0.0)
        t = self.knock_back_frame / duration if duration else 1.0
        eased = ease_out_cubic(t)
        direction = (self.position - self.damage_source_position).normalized()
        direction = Vec3(direction.x, 0.0, direction.z)
        strength = values.get_value("Player", "MaxNockbackStrength", 0.0)
        self.position = self.position + direction * (strength * eased * dt)
        if self.knock_back_frame >= duration:
            self.knock_back_frame = 0.0
            self.state = PlayerState.MOVE

    def add_sweat(self) -> None:
        """Spray sweat when at half hit points or below."""
        if self.hp_manager.hp <= self.hp_manager.max_hitpoint // 2:
            count = self.values.get_value("Sweat", "NumSweat", 0)
            direction = self.forward
            for _ in range(count):
                self.sweats.append(Sweat(self.values, self, direction, self.rng))

    def invincible_update(self, dt: float) -> None:
        """Count down the invincibility after a hit."""
        self.invincible_frame += dt
        limit = self.values.get_value("Player", "InvincibleTime", 0.0)
        if self.invincible_frame >= limit:
            self.is_invincible = False
            self.invincible_frame = limit

    def dead(self, dt: float) -> None:
        """Play one last beat, then fall over and ask for the game-over scene."""
        values = self.values
        self.invincible_frame = 0.0
        if self.last_beat:
            self.down_frame += dt
            beat = values.get_value("DeadAnimation", "BeatScale", 0.0)
            size = 1.0 + beat * (1.0 - _clamp01(self.down_frame / 0.1))
            self.scale = Vec3(size, size, size)
            if self.down_frame >= values.get_value("DeadAnimation", "DownCount", 0.0):
                self.last_beat = False
                self.down_frame = 0.0
                self.scale = ONE
        else:
            z_rotation = _angle_axis(BASIS_Z, math.radians(80.0))
            combined = _mul(self.axis_of_rotation, z_rotation)
            self.down_frame = _clamp01(self.down_frame + dt)
            self.rotation = _slerp(self.axis_of_rotation, combined, self.down_frame)
            self.game_over_requested = True

    # ----- setup and callbacks -----

    def reset_hitpoint(self, hitpoint: int) -> None:
        """Recreate the hearts (at least two) and reset the hit points to match."""
        hitpoint = max(hitpoint, 2)
        self.bullets = []
        for i in range(hitpoint):
            bullet = Heart(
                self.values,
                self.hp_manager,
                player=self,
                beat_manager=self.beat_manager,
                parent=self,
                angle_offset=2.0 * math.pi * i / hitpoint,
            )
            self.bullets.append(bullet)
            if self.collision_manager is not None:
                self.collision_manager.register("Heart", bullet.collider)
        self.hp_manager.reset_max_hp(hitpoint)

    def on_collision(self, other: SphereCollider) -> None:
        """Lose a heart and get knocked back when an enemy's melee lands."""
        if other.group != "EnemyMelee" or self.is_invincible:
            return
        for bullet in self.bullets:
            if bullet.state is HeartState.FOLLOW:
                bullet.lost()
                self.hp_manager.set_state(HPState.DAMAGE)
                self.damage_source_position = other.world_position()
                self.state = PlayerState.KNOCK_BACK
                self.is_invincible = True
                self.invincible_frame = 0.0
                break