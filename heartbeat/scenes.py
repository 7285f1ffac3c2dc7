"""Title, tutorial and game-over screens: each waits for Enter to start a game."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from heartbeat.global_values import GlobalValues
from heartbeat.timeline import DEFAULT_DIRECTORY


class MenuScene:
    """A still screen that starts a new game when Enter is pressed."""

    name = "Menu"
    TRANSITION_SECONDS = 1.0

    def __init__(
        self,
        values: Optional[GlobalValues] = None,
        timeline_directory: Union[str, Path] = DEFAULT_DIRECTORY,
    ) -> None:
        self.values = values if values is not None else GlobalValues()
        self.values.import_json_all()
        self.timeline_directory = Path(timeline_directory)

    def update(self, enter_pressed: bool):
        """Return a fresh game scene if Enter was pressed, otherwise None."""
        if not enter_pressed:
            return None
        from heartbeat.game import GameScene

        return GameScene(self.values, self.timeline_directory)


class TitleScene(MenuScene):
    """The opening screen."""

    name = "Title"


class GameOverScene(MenuScene):
    """Shown after the player has fallen."""

    name = "GameOver"


class TutorialScene(MenuScene):
    """The how-to-play screen."""

    name = "Tutorial"