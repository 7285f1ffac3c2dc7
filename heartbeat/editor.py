"""Editing of the timeline's waves and spawns, and saving them back."""

from __future__ import annotations

import enum
import json
import math
from pathlib import Path
from typing import Optional

from heartbeat.geometry import BASIS_Y, BASIS_Z, Vec3
from heartbeat.timeline import PopData, Timeline, WaveData

GROUND_HEIGHT = 1.0
PICK_DISTANCE = 1.0


class EditType(enum.Enum):
    """What a click on the ground does."""

    CREATE = enum.auto()
    EDIT = enum.auto()
    DELETE = enum.auto()


def ray_to_ground(origin: Vec3, direction: Vec3) -> Vec3:
    """Where a ray meets the editing plane ``y == 1``."""
    along = direction.dot(BASIS_Y)
    if along == 0.0:
        raise ValueError("ray is parallel to the ground")
    t = (GROUND_HEIGHT - origin.dot(BASIS_Y)) / along
    return origin + direction * t


def _dump(data: object) -> str:
    return json.dumps(data, indent="\t", sort_keys=True)


class TimelineEditor:
    """Edits the waves of a timeline: one wave and one spawn are selected."""

    def __init__(self, timeline: Timeline) -> None:
        self.timeline = timeline
        self.edit_type = EditType.CREATE
        self.edit_wave: Optional[int] = None
        self.selected: Optional[int] = None
        self.nearest: Optional[int] = None
        self.forward_angle = 0.0
        self.demoplay_edit_wave = False

    def _wave(self) -> WaveData:
        if self.edit_wave is None:
            raise LookupError("no wave selected")
        return self.timeline.waves[self.edit_wave]

    def _selected_pop(self) -> PopData:
        if self.selected is None:
            raise LookupError("no spawn selected")
        return self._wave().pop_data[self.selected]

    def sort_all_waves(self) -> None:
        """Order every wave's spawns by delay, keeping ties in place."""
        for wave in self.timeline.waves:
            wave.pop_data.sort(key=lambda pop: pop.delay)

    def export_json_all(self) -> list[Path]:
        """Write the settings file and one file per wave; return their paths."""
        self.sort_all_waves()
        timeline = self.timeline
        timeline.wave_directory.mkdir(parents=True, exist_ok=True)
        names = [f"{number:02}.json" for number in range(len(timeline.waves))]
        timeline.settings_path.write_text(_dump({"WaveFiles": names}), encoding="utf-8")
        written = [timeline.settings_path]

        for name, wave in zip(names, timeline.waves):
            pops = {
                f"{number:02}": {
                    "Delay": pop.delay,
                    "Translate": list(pop.translate),
                    "Forward": list(pop.forward),
                }
                for number, pop in enumerate(wave.pop_data)
            }
            document = {
                "PlayerHitPoint": wave.player_hitpoint,
                "EnemyApproachSpeed": wave.enemy_approach_speed,
                "PopData": pops,
            }
            path = timeline.wave_directory / name
            path.write_text(_dump(document), encoding="utf-8")
            written.append(path)
        return written

    def resize_waves(self, count: int) -> None:
        """Grow or shrink the wave list; drop the selection if it falls off."""
        count = max(count, 0)
        waves = self.timeline.waves
        del waves[count:]
        waves.extend(WaveData() for _ in range(count - len(waves)))
        if self.edit_wave is not None and self.edit_wave >= len(waves):
            self.select_wave(None)

    def select_wave(self, wave: Optional[int]) -> None:
        """Choose the wave to edit, or none; the spawn selection is cleared."""
        if wave is not None and not 0 <= wave < len(self.timeline.waves):
            raise IndexError(f"wave index {wave} out of range")
        self.edit_wave = wave
        self.select(None)

    def select(self, index: Optional[int]) -> None:
        """Choose a spawn of the edited wave and read its facing angle."""
        if index is not None:
            pops = self._wave().pop_data
            if not 0 <= index < len(pops):
                raise IndexError(f"spawn index {index} out of range")
        self.selected = index
        if index is not None:
            cosine = BASIS_Z.dot(self._wave().pop_data[index].forward)
            self.forward_angle = math.degrees(math.acos(min(max(cosine, -1.0), 1.0)))

    def add_pop(self, position: Vec3) -> PopData:
        """Add a spawn on the floor below ``position``, facing +Z."""
        pop = PopData(0.0, Vec3(position.x, 0.0, position.z), BASIS_Z)
        self._wave().pop_data.append(pop)
        return pop

    def remove_pop(self, index: int) -> None:
        """Delete a spawn of the edited wave and clear the selection."""
        pops = self._wave().pop_data
        if not 0 <= index < len(pops):
            raise IndexError(f"spawn index {index} out of range")
        self.select(None)
        del pops[index]

    def move_pop(self, index: int, delta: Vec3) -> None:
        """Shift a spawn of the edited wave by ``delta``."""
        pop = self._wave().pop_data[index]
        pop.translate = pop.translate + delta

    def nearest_index(self, point: Vec3) -> Optional[int]:
        """The first spawn whose marker is within reach of ``point``."""
        self.nearest = None
        if self.edit_wave is None:
            return None
        for number, pop in enumerate(self._wave().pop_data):
            if ((pop.translate + BASIS_Y) - point).length() < PICK_DISTANCE:
                self.nearest = number
                break
        return self.nearest

    def set_forward_angle(self, degrees: float) -> None:
        """Turn the selected spawn to face ``degrees`` about the Y axis."""
        pop = self._selected_pop()
        self.forward_angle = degrees
        radians = math.radians(degrees)
        pop.forward = Vec3(math.sin(radians), 0.0, math.cos(radians))

    def run_demoplay(self) -> None:
        """Play the waves from the first, or from the edited one if asked."""
        if self.edit_wave is None:
            return
        self.timeline.demo_play = True
        self.sort_all_waves()
        self.timeline.reset_wave(self.edit_wave if self.demoplay_edit_wave else 0)

    def stop_demoplay(self) -> None:
        """Stop playing and remove the enemies it spawned."""
        self.timeline.demo_play = False
        if self.timeline.enemy_manager is not None:
            self.timeline.enemy_manager.clear()