"""Owns the live enemies and hands their colliders to the collision world."""

from __future__ import annotations

from typing import Any, Iterator, Optional

from heartbeat.enemy import Enemy, EnemyContext
from heartbeat.geometry import Vec3


class EnemyManager:
    """Creates, updates and removes enemies.

    ``collision_manager``, when set, must provide ``register(group, collider)``.
    """

    def __init__(self, context: EnemyContext, collision_manager: Optional[Any] = None) -> None:
        self.context = context
        self.collision_manager = collision_manager
        self._enemies: list[Enemy] = []

    @property
    def enemies(self) -> tuple[Enemy, ...]:
        return tuple(self._enemies)

    def __len__(self) -> int:
        return len(self._enemies)

    def __iter__(self) -> Iterator[Enemy]:
        return iter(self._enemies)

    def begin(self) -> None:
        for enemy in self._enemies:
            enemy.begin()

    def update(self, dt: float) -> None:
        """Update every enemy, then drop those no longer active."""
        for enemy in self._enemies:
            enemy.update(dt)
        self._enemies = [enemy for enemy in self._enemies if enemy.is_active]

    def create_enemy(self, position: Vec3, forward: Vec3) -> Enemy:
        """Spawn an enemy and register its colliders."""
        enemy = Enemy(self.context, position, forward)
        self._enemies.append(enemy)
        if self.collision_manager is not None:
            self.collision_manager.register("EnemyHit", enemy.hit_collider)
            self.collision_manager.register("Beat", enemy.beat_collider)
            self.collision_manager.register("EnemyMelee", enemy.melee_collider)
        return enemy

    def clear(self) -> None:
        self._enemies.clear()