"""The player's hit points, which double as the number of hearts held."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class HPState(enum.Enum):
    """A change applied to the player's hit points."""

    NONE = enum.auto()
    RECOVERY = enum.auto()
    DAMAGE = enum.auto()


@dataclass
class PlayerHPManager:
    """Tracks current and maximum hit points."""

    hp: int = 0
    max_hitpoint: int = 0

    def initialize(self, values) -> None:
        """Take the starting hit points from the ``Player/NumBullets`` value."""
        values.add_value("Player", "NumBullets", 10)
        self.hp = values.get_value("Player", "NumBullets")

    def set_state(self, state: HPState) -> None:
        """Apply a recovery (+1) or damage (-1); NONE changes nothing."""
        if state is HPState.RECOVERY:
            self.hp += 1
        elif state is HPState.DAMAGE:
            self.hp -= 1

    def reset_max_hp(self, hitpoint: int) -> None:
        """Set both current and maximum hit points."""
        self.hp = hitpoint
        self.max_hitpoint = hitpoint