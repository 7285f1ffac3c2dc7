"""The main game scene, the collision world it uses and a headless runner."""

from __future__ import annotations

import argparse
import itertools
import logging
import random
import weakref
from pathlib import Path
from typing import Optional, Sequence, Union

from heartbeat.beat import BeatManager
from heartbeat.enemy import EnemyContext
from heartbeat.enemy_manager import EnemyManager
from heartbeat.geometry import SphereCollider
from heartbeat.global_values import GlobalValues
from heartbeat.hp import PlayerHPManager
from heartbeat.player import Controls, Player
from heartbeat.scenes import GameOverScene, MenuScene
from heartbeat.timeline import DEFAULT_DIRECTORY, Timeline

logger = logging.getLogger(__name__)

# Group pairs tested every frame: melee on the player, beats on enemies,
# hearts on enemies.
COLLISION_PAIRS = (
    ("Player", "EnemyMelee"),
    ("EnemyHit", "Beat"),
    ("EnemyHit", "Heart"),
)

GAME_OVER_FADE_SECONDS = 2.0


class CollisionWorld:
    """Named groups of sphere colliders, tested against each other on demand.

    Colliders are held weakly: once their owner is gone they drop out.
    A pair fires ``on_collision_enter`` on both colliders only on the frame
    it starts to overlap; inactive colliders never overlap.
    """

    def __init__(self) -> None:
        self._groups: dict[str, list[weakref.ref]] = {}
        self._touching: set[tuple[int, int]] = set()

    def register(self, group: str, collider: SphereCollider) -> None:
        """Add ``collider`` to ``group`` and tag it with the group's name."""
        collider.group = group
        self._groups.setdefault(group, []).append(weakref.ref(collider))

    def colliders(self, group: str) -> list[SphereCollider]:
        """The live colliders of ``group``, in registration order."""
        live = (ref() for ref in self._groups.get(group, ()))
        return [collider for collider in live if collider is not None]

    def update(self) -> None:
        """Forget colliders whose owners are gone."""
        live_ids: set[int] = set()
        for refs in self._groups.values():
            alive = [ref for ref in refs if ref() is not None]
            refs[:] = alive
            for ref in alive:
                collider = ref()
                if collider is not None:
                    live_ids.add(id(collider))
        self._touching = {
            pair for pair in self._touching
            if pair[0] in live_ids and pair[1] in live_ids
        }

    def collide(
        self, group_a: str, group_b: str
    ) -> list[tuple[SphereCollider, SphereCollider]]:
        """Test two groups (or one group with itself); return the new contacts."""
        first = self.colliders(group_a)
        if group_a == group_b:
            pairs = itertools.combinations(first, 2)
        else:
            pairs = itertools.product(first, self.colliders(group_b))

        entered = []
        for a, b in pairs:
            if a is b:
                continue
            key = (min(id(a), id(b)), max(id(a), id(b)))
            if a.active and b.active and a.intersects(b):
                if key not in self._touching:
                    self._touching.add(key)
                    entered.append((a, b))
            else:
                self._touching.discard(key)

        for a, b in entered:
            if a.on_collision_enter is not None:
                a.on_collision_enter(b)
            if b.on_collision_enter is not None:
                b.on_collision_enter(a)
        return entered


class GameScene:
    """The playing field: the player, the enemy waves and their collisions."""

    def __init__(
        self,
        values: Optional[GlobalValues] = None,
        timeline_directory: Union[str, Path] = DEFAULT_DIRECTORY,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.values = values if values is not None else GlobalValues()
        self.values.import_json_all()

        self.collisions = CollisionWorld()
        self.beat_manager = BeatManager()
        self.hp_manager = PlayerHPManager()
        self.hp_manager.initialize(self.values)

        self.context = EnemyContext(
            values=self.values,
            beat_manager=self.beat_manager,
            hp_manager=self.hp_manager,
        )
        self.enemy_manager = EnemyManager(self.context, self.collisions)

        self.player = Player(
            self.values, self.hp_manager, self.beat_manager, self.collisions, rng
        )
        self.collisions.register("Player", self.player.hit_collider)
        self.context.target_player = self.player

        self.timeline = Timeline(timeline_directory, self.enemy_manager, self.player)
        try:
            self.timeline.load_all()
        except FileNotFoundError as error:
            logger.warning("failed to open timeline file: %s", error)
        self.timeline.start()

    def begin(self, controls: Controls) -> None:
        """Start of frame: read input and reset one-frame states."""
        self.player.begin(controls)
        self.enemy_manager.begin()

    def update(self, dt: float) -> None:
        """Advance the waves, the player and the enemies by ``dt`` seconds."""
        self.timeline.update(dt)
        self.player.update(dt)
        self.enemy_manager.update(dt)
        self.collisions.update()

    def late_update(self) -> None:
        """Resolve this frame's collisions."""
        for group_a, group_b in COLLISION_PAIRS:
            self.collisions.collide(group_a, group_b)

    def next_scene(self) -> Optional[MenuScene]:
        """The game-over scene once the player has fallen, otherwise None."""
        if not self.player.game_over_requested:
            return None
        return GameOverScene(self.values, self.timeline.directory)


def _summary(scene: object, frames: int) -> str:
    if isinstance(scene, GameScene):
        timeline = scene.timeline
        total = len(timeline.waves)
        wave = total if timeline.is_end_wave_all() else timeline.now_wave + 1
        return (
            f"scene=GameScene frames={frames} wave={wave}/{total} "
            f"hp={scene.hp_manager.hp} enemies={len(scene.enemy_manager)}"
        )
    return f"scene={type(scene).__name__} frames={frames}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game without input for a number of fixed-length frames."""
    parser = argparse.ArgumentParser(
        prog="heartbeat", description="Run the game headless for a number of frames."
    )
    parser.add_argument("--frames", type=int, default=600, help="frames to run")
    parser.add_argument("--dt", type=float, default=1.0 / 60.0, help="seconds per frame")
    parser.add_argument(
        "--timeline", type=Path, default=DEFAULT_DIRECTORY, help="timeline directory"
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)
    if args.frames < 0:
        parser.error("--frames must not be negative")
    if args.dt <= 0:
        parser.error("--dt must be positive")

    scene: object = GameScene(
        timeline_directory=args.timeline, rng=random.Random(args.seed)
    )
    for _ in range(args.frames):
        if isinstance(scene, GameScene):
            scene.begin(Controls())
            scene.update(args.dt)
            scene.late_update()
            following = scene.next_scene()
        else:
            following = scene.update(False)
        if following is not None:
            scene = following

    print(_summary(scene, args.frames))
    return 0