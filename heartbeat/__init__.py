"""Headless game logic for a wave-based arcade game: hearts, beats, ghosts, timelines and scenes."""

__version__ = "0.1.0"