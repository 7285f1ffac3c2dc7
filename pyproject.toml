[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "heartbeat"
version = "0.1.0"
description = "Game logic for a wave-based arcade game: throw hearts at ghosts, beat in sync, survive the waves."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "arcade", "simulation", "timeline", "waves", "headless"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
heartbeat = "heartbeat.game:main"

[tool.hatch.build.targets.wheel]
packages = ["heartbeat"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
