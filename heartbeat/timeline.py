"""Enemy waves loaded from JSON and released over time."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from heartbeat.geometry import BASIS_Z, ZERO, Vec3

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY = Path("./Resources/GameScene/Timeline")
SETTINGS_FILE = "Timeline.json"
WAVE_SUBDIRECTORY = "WaveData"


@dataclass
class PopData:
    """One enemy spawn: when, where and facing which way."""

    delay: float = 0.0
    translate: Vec3 = ZERO
    forward: Vec3 = BASIS_Z


@dataclass
class WaveData:
    """A wave: the player's hit points, the enemies' speed and the spawns."""

    player_hitpoint: int = 0
    enemy_approach_speed: float = 0.0
    pop_data: list[PopData] = field(default_factory=list)


def _vec(raw: Any) -> Vec3:
    return Vec3(float(raw[0]), float(raw[1]), float(raw[2]))


def load_wave_file(path: Union[str, Path]) -> WaveData:
    """Read one wave file.

    ``PopData`` is an object keyed ``"00"``, ``"01"``, ... in spawn order.
    Raises ``OSError`` if the file cannot be read and ``KeyError`` if an
    entry is missing.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as stream:
        root = json.load(stream)

    wave = WaveData()
    if "PlayerHitPoint" in root:
        wave.player_hitpoint = int(root["PlayerHitPoint"])
    if "EnemyApproachSpeed" in root:
        wave.enemy_approach_speed = float(root["EnemyApproachSpeed"])

    data = root["PopData"]
    for number in range(len(data)):
        entry = data[f"{number:02}"]
        wave.pop_data.append(
            PopData(
                delay=float(entry["Delay"]),
                translate=_vec(entry["Translate"]),
                forward=_vec(entry["Forward"]),
            )
        )
    logger.info("loaded wave data '%s'", path)
    return wave


class Timeline:
    """Plays the waves one after another.

    A wave's spawns are released once the wave's timer passes their delay;
    the next wave starts when every spawn is out and no enemy is left.
    ``enemy_manager`` needs ``create_enemy``, ``clear``, ``__len__`` and a
    ``context`` with ``approach_speed``; ``player`` needs ``reset_hitpoint``.
    """

    def __init__(
        self,
        directory: Union[str, Path] = DEFAULT_DIRECTORY,
        enemy_manager: Optional[Any] = None,
        player: Optional[Any] = None,
    ) -> None:
        self.directory = Path(directory)
        self.enemy_manager = enemy_manager
        self.player = player
        self.waves: list[WaveData] = []
        self.timer = 0.0
        self.now_wave: Optional[int] = None
        self.next_pop = 0
        self.editor_active = False
        self.demo_play = False

    @property
    def settings_path(self) -> Path:
        return self.directory / SETTINGS_FILE

    @property
    def wave_directory(self) -> Path:
        return self.directory / WAVE_SUBDIRECTORY

    @property
    def current_wave(self) -> Optional[WaveData]:
        """The wave being played, or None once every wave is done."""
        if self.is_end_wave_all():
            return None
        return self.waves[self.now_wave]

    def load_all(self) -> None:
        """Load every wave named in the settings file, in order.

        A missing settings file raises ``FileNotFoundError``; a wave file
        that cannot be opened is skipped with a warning.
        """
        with self.settings_path.open(encoding="utf-8") as stream:
            root = json.load(stream)
        for name in root["WaveFiles"]:
            try:
                wave = load_wave_file(self.wave_directory / str(name))
            except OSError as error:
                logger.warning("failed to open wave file '%s': %s", name, error)
                continue
            self.waves.append(wave)

    def start(self) -> None:
        """Begin with the first wave."""
        self.now_wave = 0
        if not self.is_end_wave_all():
            self.reset_now_wave()

    def is_end_wave_all(self) -> bool:
        """True before ``start`` and after the last wave."""
        return self.now_wave is None or self.now_wave >= len(self.waves)

    def _no_enemies(self) -> bool:
        return self.enemy_manager is None or len(self.enemy_manager) == 0

    def update(self, dt: float) -> None:
        """Advance the timer and release the spawns that are due."""
        if self.editor_active and not self.demo_play:
            return
        if self.is_end_wave_all():
            return
        self.timer += dt
        wave = self.waves[self.now_wave]
        if self.next_pop >= len(wave.pop_data) and self._no_enemies():
            self.now_wave += 1
            self.reset_now_wave()
            if self.is_end_wave_all():
                return
            wave = self.waves[self.now_wave]

        while self.next_pop < len(wave.pop_data):
            pop = wave.pop_data[self.next_pop]
            if pop.delay > self.timer:
                break
            if self.enemy_manager is not None:
                self.enemy_manager.create_enemy(pop.translate, pop.forward)
            self.next_pop += 1

    def reset_now_wave(self) -> None:
        """Restart the current wave: first spawn, hit points and speed."""
        wave = self.current_wave
        if wave is not None:
            self.next_pop = 0
            if self.player is not None:
                self.player.reset_hitpoint(wave.player_hitpoint)
            if self.enemy_manager is not None:
                self.enemy_manager.context.approach_speed = wave.enemy_approach_speed
        self.timer = 0.0

    def reset_wave(self, index: int) -> None:
        """Remove every enemy and jump to wave ``index``."""
        if not 0 <= index <= len(self.waves):
            raise IndexError(f"wave index {index} out of range")
        if self.enemy_manager is not None:
            self.enemy_manager.clear()
        self.now_wave = index
        self.reset_now_wave()