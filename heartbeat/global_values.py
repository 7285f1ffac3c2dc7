"""Named groups of tunable values, saved to and loaded from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from heartbeat.geometry import Vec3

Item = Union[int, float, Vec3]

DEFAULT_DIRECTORY = Path("./Resources/GlobalValues")


def _check_item(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, Vec3)):
        raise TypeError(
            f"value must be int, float or Vec3, not {type(value).__name__}"
        )


def _encode(value: Item) -> Any:
    if isinstance(value, Vec3):
        return [value.x, value.y, value.z]
    return value


class GlobalValues:
    """Store of int, float and Vec3 values grouped by name.

    Each group is saved as ``<directory>/<group>.json`` holding a single
    object keyed by the group name.
    """

    def __init__(self, directory: Union[str, Path] = DEFAULT_DIRECTORY) -> None:
        self.directory = Path(directory)
        self._groups: dict[str, dict[str, Item]] = {}

    def create_group(self, group: str) -> None:
        """Make sure a group exists, even if it holds nothing."""
        self._groups.setdefault(group, {})

    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when group or key is missing."""
        return self._groups.get(group, {}).get(key, default)

    def set_value(self, group: str, key: str, value: Item) -> None:
        """Store a value, replacing any previous one."""
        _check_item(value)
        self._groups.setdefault(group, {})[key] = value

    def add_value(self, group: str, key: str, value: Item) -> None:
        """Store a value only if the key is not already present."""
        _check_item(value)
        self._groups.setdefault(group, {}).setdefault(key, value)

    def export_json(self, group: str) -> Path:
        """Write one group to its JSON file and return the file's path."""
        if group not in self._groups:
            raise KeyError(f"can't find group name '{group}'")
        items = {key: _encode(value) for key, value in sorted(self._groups[group].items())}
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{group}.json"
        path.write_text(json.dumps({group: items}, indent=4) + "\n", encoding="utf-8")
        return path

    def import_json(self, path: Union[str, Path]) -> None:
        """Load one group file; an unreadable file is ignored."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            return
        root = json.loads(text)
        group = path.stem
        if group not in root:
            raise KeyError(f"file '{path}' has no group '{group}'")
        for key, raw in root[group].items():
            if isinstance(raw, bool):
                continue
            if isinstance(raw, int):
                self.set_value(group, key, raw)
            elif isinstance(raw, float):
                self.set_value(group, key, raw)
            elif isinstance(raw, list) and len(raw) == 3:
                self.set_value(group, key, Vec3(*(float(part) for part in raw)))

    def import_json_all(self) -> None:
        """Load every ``.json`` file in the directory, if it exists."""
        if not self.directory.exists():
            return
        for entry in sorted(self.directory.iterdir()):
            if entry.suffix == ".json" and entry.is_file():
                self.import_json(entry)