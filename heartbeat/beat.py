"""Pairs enemies with the hearts stuck to them and drives their beats."""

from __future__ import annotations

from typing import Any, Callable, Optional


class BeatManager:
    """Keeps enemy/heart pairs made when a heart hits an enemy.

    A pair is formed once both an enemy and a heart have been announced
    with ``set_next_enemy`` and ``set_next_heart``, in either order.
    Enemies need ``start_beat``, ``beating`` and ``pause_beat``; hearts need
    ``beat_attack``, ``stop_beat``, ``come_back`` and ``lost``.
    """

    def __init__(self) -> None:
        self._next_enemy: Optional[Any] = None
        self._next_heart: Optional[Any] = None
        self._enemy_hearts: dict[Any, list[Any]] = {}
        self._heart_enemy: dict[Any, Any] = {}

    def set_next_enemy(self, enemy: Any) -> None:
        self._next_enemy = enemy
        self._make_pair()

    def set_next_heart(self, heart: Any) -> None:
        self._next_heart = heart
        self._make_pair()

    def empty_pair(self) -> bool:
        """True when no enemy holds a heart."""
        return not self._enemy_hearts

    def start_beat(self) -> None:
        """Put every paired enemy into its beat and every heart into attack."""
        for enemy, heart in self._pairs():
            enemy.start_beat()
            heart.beat_attack()

    def beating(self) -> None:
        """Make each paired enemy beat once, however many hearts it holds."""
        for enemy in list(self._enemy_hearts):
            enemy.beating()

    def pause_beat(self) -> None:
        """Stop the beat for every pair."""
        for enemy, heart in self._pairs():
            enemy.pause_beat()
            heart.stop_beat()

    def enemy_down(self, enemy: Any) -> None:
        """Send an enemy's hearts back to the player when it is knocked down."""
        self._release(enemy, lambda heart: heart.come_back())

    def recovery(self, enemy: Any) -> None:
        """Lose an enemy's hearts when it has held them too long."""
        self._release(enemy, lambda heart: heart.lost())

    def _pairs(self) -> list[tuple[Any, Any]]:
        return [
            (enemy, heart)
            for enemy, hearts in self._enemy_hearts.items()
            for heart in hearts
        ]

    def _release(self, enemy: Any, action: Callable[[Any], None]) -> None:
        hearts = self._enemy_hearts.pop(enemy, None)
        if hearts is None:
            return
        for heart in hearts:
            action(heart)
            self._heart_enemy.pop(heart, None)

    def _make_pair(self) -> None:
        if self._next_enemy is None or self._next_heart is None:
            return
        enemy, heart = self._next_enemy, self._next_heart
        self._enemy_hearts.setdefault(enemy, []).append(heart)
        self._heart_enemy.setdefault(heart, enemy)
        self._next_enemy = None
        self._next_heart = None