"""Ghost enemies: a small state machine driven by hits, beats and time."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from heartbeat.geometry import BASIS_Z, ZERO, SphereCollider, Vec3
from heartbeat.global_values import GlobalValues


class EnemyBehavior(enum.Enum):
    """What an enemy is currently doing."""

    SPAWN = enum.auto()
    APPROACH = enum.auto()
    ATTACK = enum.auto()
    BEATING = enum.auto()
    DAMAGED_HEART = enum.auto()
    DAMAGED_BEAT = enum.auto()
    DOWN = enum.auto()
    REVIVE = enum.auto()
    ERASE = enum.auto()


_INERT = (EnemyBehavior.DOWN, EnemyBehavior.ERASE, EnemyBehavior.REVIVE)


@dataclass
class EnemyContext:
    """What every enemy shares: tuning values, managers, target and speed.

    ``target_player`` needs a ``world_position()`` method; ``hp_manager``
    needs ``hp`` and ``max_hitpoint``.
    """

    values: GlobalValues = field(default_factory=GlobalValues)
    beat_manager: Any = None
    hp_manager: Any = None
    target_player: Any = None
    approach_speed: float = 0.0


def _register_defaults(values: GlobalValues) -> None:
    values.add_value("Heart", "AttackDamage", 30)
    values.add_value("Enemy", "HP", 100)
    values.add_value("Enemy", "BeatingDamage", 20)
    values.add_value("Enemy", "BeatHitDamage", 5)
    values.add_value("Enemy", "RevivedHitpoint", 30)
    values.add_value("Enemy", "NockbackMag", 3.0)
    values.add_value("Enemy", "NockbackFriction", 0.8)
    values.add_value("Enemy", "StartAttackDistance", 1.0)
    values.add_value("Enemy", "AbsorptionTime", 3.0)
    values.add_value("Enemy", "AbsorptionAmount", 20)
    values.add_value("Enemy", "ToDeadDuration", 5.0)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class Enemy:
    """A ghost that spawns, approaches the player, attacks and can be beaten.

    Behaviour changes asked for with ``request`` take effect at the start
    of the next ``update``.
    """

    GHOST_HEIGHT = 1.0

    def __init__(
        self,
        context: EnemyContext,
        position: Vec3 = ZERO,
        forward: Vec3 = BASIS_Z,
    ) -> None:
        self.context = context
        values = context.values
        _register_defaults(values)

        self.position = position
        self.forward = forward.normalized()
        self.velocity = ZERO
        self.scale = 1.0
        self.is_active = True

        self.max_hitpoint: int = values.get_value("Enemy", "HP", 0)
        self.hitpoint: int = self.max_hitpoint
        self.marked_count = 0
        self.marking_timer = 0.0
        self.marker_percentage = 1.0
        self.attacked = False
        self.behavior_timer = 0.0
        self.wave_time = 0.0
        self.initial_y = self.GHOST_HEIGHT
        self.ghost_y = self.GHOST_HEIGHT
        self.tilt = 0.0
        self._tilt_start = 0.0
        self.is_beating_anima = False

        ghost_offset = Vec3(0.0, self.ghost_y, 0.0)
        self.hit_collider = SphereCollider(
            radius=0.5, offset=ghost_offset, parent=self, group="EnemyHit",
            active=True, on_collision_enter=self.on_hit,
        )
        self.melee_collider = SphereCollider(
            radius=0.5, offset=ghost_offset, parent=self, group="EnemyMelee",
            active=False, on_collision_enter=self.on_attack,
        )
        self.beat_collider = SphereCollider(
            radius=3.0, parent=self, group="Beat", active=False,
        )

        B = EnemyBehavior
        self._handlers: dict[EnemyBehavior, tuple[Callable[[], None], Callable[[float], None]]] = {
            B.SPAWN: (self._spawn_init, self._spawn_update),
            B.APPROACH: (self._approach_init, self._approach_update),
            B.ATTACK: (self._attack_init, self._attack_update),
            B.BEATING: (self._timer_init, self._beating_update),
            B.DAMAGED_HEART: (self._timer_init, self._damaged_heart_update),
            B.DAMAGED_BEAT: (self._timer_init, self._damaged_beat_update),
            B.DOWN: (self._down_init, self._down_update),
            B.REVIVE: (self._revive_init, self._revive_update),
            B.ERASE: (self._erase_init, self._erase_update),
        }
        self._behavior = B.SPAWN
        self._requested: Optional[EnemyBehavior] = None
        self._spawn_init()

    # ----- public API -----

    @property
    def behavior(self) -> EnemyBehavior:
        """The behaviour currently running."""
        return self._behavior

    @property
    def has_marker(self) -> bool:
        """Whether hearts are stuck to this enemy."""
        return self.marked_count > 0

    def world_position(self) -> Vec3:
        return self.position

    def request(self, behavior: EnemyBehavior) -> None:
        """Ask for a behaviour change, applied on the next update."""
        if not isinstance(behavior, EnemyBehavior):
            raise TypeError(f"expected EnemyBehavior, not {type(behavior).__name__}")
        self._requested = behavior

    def begin(self) -> None:
        """Start of frame: the beat wave only lasts one frame."""
        self.beat_collider.active = False

    def update(self, dt: float) -> None:
        """Advance the enemy by ``dt`` seconds."""
        if self._requested is not None:
            self._behavior = self._requested
            self._requested = None
            self._handlers[self._behavior][0]()
        self._handlers[self._behavior][1](dt)

        self._normal_animation(dt)

        values = self.context.values
        marking_time = values.get_value("Enemy", "AbsorptionTime", 0.0)
        if self.marked_count and self._behavior is not EnemyBehavior.BEATING:
            self.marking_timer += dt
            if marking_time:
                self.marker_percentage = 1.0 - self.marking_timer / marking_time

        if self.marking_timer >= marking_time:
            self.marking_timer = 0.0
            if self.context.beat_manager is not None:
                self.context.beat_manager.recovery(self)
            amount = values.get_value("Enemy", "AbsorptionAmount", 0)
            self.hitpoint = min(self.max_hitpoint, self.hitpoint + amount * self.marked_count)
            self.marked_count = 0

        if (
            self.hitpoint <= 0
            and self._behavior not in _INERT
            and not self.is_beating_anima
        ):
            self.request(EnemyBehavior.DOWN)

    def on_hit(self, other: SphereCollider) -> None:
        """Called when something enters the hit collider."""
        values = self.context.values
        if other.group == "Heart":
            if self._behavior is EnemyBehavior.DOWN:
                return
            self.hitpoint -= values.get_value("Heart", "AttackDamage", 0)
            self.marked_count += 1
            self.marking_timer = 0.0
            heart_velocity = getattr(other.parent, "velocity", None)
            if isinstance(heart_velocity, Vec3):
                flat = Vec3(heart_velocity.x, 0.0, heart_velocity.z)
                self.velocity = flat.normalized() * values.get_value("Enemy", "NockbackMag", 0.0)
            else:
                self.velocity = ZERO
            if self.context.beat_manager is not None:
                self.context.beat_manager.set_next_enemy(self)
            if self._behavior is not EnemyBehavior.BEATING:
                self.request(
                    EnemyBehavior.DAMAGED_HEART if self.hitpoint > 0 else EnemyBehavior.DOWN
                )
        elif other.group == "Beat":
            if other is self.beat_collider:
                return
            if self._behavior is EnemyBehavior.DOWN and self.behavior_timer > 1.0:
                self.request(EnemyBehavior.REVIVE)
                return
            self.hitpoint -= values.get_value("Enemy", "BeatHitDamage", 0)
            if self._behavior is not EnemyBehavior.BEATING:
                self.request(
                    EnemyBehavior.DAMAGED_BEAT if self.hitpoint > 0 else EnemyBehavior.DOWN
                )

    def on_attack(self, other: SphereCollider) -> None:
        """Called when the melee collider touches something: one hit per swing."""
        self.attacked = True
        self.melee_collider.active = False

    def start_beat(self) -> None:
        self.request(EnemyBehavior.BEATING)

    def beating(self) -> None:
        """Take a beat's damage and send out a beat wave."""
        self.hitpoint -= self.context.values.get_value("Enemy", "BeatingDamage", 0)
        self.beat_collider.active = True

    def pause_beat(self) -> None:
        self.request(EnemyBehavior.APPROACH)
        self.beat_collider.active = False

    # ----- animations -----

    def _set_ghost_y(self, y: float) -> None:
        self.ghost_y = y
        offset = Vec3(0.0, y, 0.0)
        self.hit_collider.offset = offset
        self.melee_collider.offset = offset

    def _normal_animation(self, dt: float) -> None:
        if self._behavior not in _INERT:
            self.wave_time += dt
            self._set_ghost_y(self.initial_y + 0.2 * math.sin(self.wave_time))

    def _beating_animation(self) -> None:
        self.scale = 1.0 + 0.5 * (1.0 - _clamp01(self.behavior_timer / 0.1))
        if self.behavior_timer >= 0.1:
            self.is_beating_anima = False
            self.scale = 1.0

    def _down_animation(self) -> None:
        self.tilt = self._tilt_start - math.pi / 2 * _clamp01(self.behavior_timer)

    def _revive_animation(self) -> None:
        self.tilt = self._tilt_start + math.pi / 2 * _clamp01(self.behavior_timer / 3.0)

    # ----- behaviours -----

    def _timer_init(self) -> None:
        self.behavior_timer = 0.0

    def _spawn_init(self) -> None:
        self.behavior_timer = 0.0

    def _spawn_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer >= 3.0:
            self.request(EnemyBehavior.APPROACH)

    def _approach_init(self) -> None:
        self.hit_collider.active = True
        self.scale = 1.0

    def _approach_update(self, dt: float) -> None:
        target = self.context.target_player
        if target is None:
            return
        distance = target.world_position() - self.world_position()
        attack_distance = self.context.values.get_value("Enemy", "StartAttackDistance", 0.0)
        if distance.length() <= attack_distance:
            self.request(EnemyBehavior.ATTACK)
            return
        direction = distance.normalized()
        self.velocity = direction * self.context.approach_speed
        self.position = self.position + self.velocity * dt
        self.forward = direction

    def _attack_init(self) -> None:
        self.behavior_timer = 0.0
        self.attacked = False
        self.melee_collider.active = True

    def _attack_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer < 1.0:
            self.melee_collider.active = False
        elif self.behavior_timer < 1.5:
            self.melee_collider.active = True
        elif self.behavior_timer > 3.0:
            self.melee_collider.active = False
            self.request(EnemyBehavior.APPROACH)

    def _hp_ratio(self) -> float:
        manager = self.context.hp_manager
        if manager is None or not manager.max_hitpoint:
            return 1.0
        return manager.hp / manager.max_hitpoint

    def _beating_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.is_beating_anima:
            self._beating_animation()
            return
        values = self.context.values
        base = values.get_value("Player", "BeatIntervalBase", 0.0)
        minimum = values.get_value("Player", "BeatIntervalMin", 0.0)
        interval = minimum + (base - minimum) * self._hp_ratio()
        if self.behavior_timer >= interval:
            self.behavior_timer = math.fmod(self.behavior_timer, interval) if interval > 0 else 0.0
            self.is_beating_anima = True

    def _damaged_heart_update(self, dt: float) -> None:
        self.behavior_timer += dt
        self._beating_animation()
        if self.behavior_timer >= 1.0:
            self.request(EnemyBehavior.APPROACH)
        self.velocity = self.velocity * self.context.values.get_value("Enemy", "NockbackFriction", 0.0)
        self.position = self.position + self.velocity * dt

    def _damaged_beat_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer >= 1.0:
            self.request(EnemyBehavior.APPROACH)

    def _down_init(self) -> None:
        if self.marked_count and self.context.beat_manager is not None:
            self.context.beat_manager.enemy_down(self)
        self.marked_count = 0
        self.behavior_timer = 0.0
        self.beat_collider.active = False
        self.melee_collider.active = False
        self.hit_collider.active = True
        self._tilt_start = self.tilt

    def _down_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer <= 1.0:
            self._down_animation()
        if self.behavior_timer >= 3.0:
            self.request(EnemyBehavior.ERASE)

    def _revive_init(self) -> None:
        self.hit_collider.active = False
        self.behavior_timer = 0.0
        self.hitpoint = self.context.values.get_value("Enemy", "RevivedHitpoint", 0)
        self._tilt_start = self.tilt

    def _revive_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer >= 3.0:
            self.request(EnemyBehavior.APPROACH)
        else:
            self._revive_animation()

    def _erase_init(self) -> None:
        self.hit_collider.active = False
        self.behavior_timer = 0.0

    def _erase_update(self, dt: float) -> None:
        self.behavior_timer += dt
        if self.behavior_timer >= 3.0:
            self.is_active = False