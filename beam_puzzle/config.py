"""Resource directories and persisted player progress."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "beam_puzzle"
CONFIG_FILENAME = "save_data.json"

LEVEL_ENV_VAR = "BEAM_PUZZLE_LEVEL_ROOT"
CONFIG_ENV_VAR = "BEAM_PUZZLE_CONFIG_DIR"

# Logical screen size in grid units of 64.
LOGICAL_WIDTH = 64 * 11
LOGICAL_HEIGHT = 64 * 15


@dataclass(frozen=True)
class GameDirectories:
    """Bundle with resolved directories used by the game."""

    level_root: Path
    config_dir: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parent / "levels"


def _default_config_dir() -> Path:
    return Path(user_config_dir(APP_NAME))


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> GameDirectories:
    """Resolve the level and config directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if the level directory
        does not exist. The config directory is created lazily on save.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _default_level_root())
    config_dir = _read_directory(CONFIG_ENV_VAR, _default_config_dir())

    if check_exists and not level_root.exists():
        raise FileNotFoundError(f"Level directory does not exist: {level_root}")

    return GameDirectories(level_root=level_root, config_dir=config_dir)


@dataclass
class GameConfig:
    """Window settings and the furthest level the player has opened."""

    width: int = LOGICAL_WIDTH
    height: int = LOGICAL_HEIGHT
    fullscreen: bool = False
    max_level: int = 1

    def increase_max_level(self, level: int) -> bool:
        """Raise ``max_level`` to ``level``; return whether it changed."""

        if level > self.max_level:
            self.max_level = level
            return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        return cls(
            width=int(data.get("width", LOGICAL_WIDTH)),
            height=int(data.get("height", LOGICAL_HEIGHT)),
            fullscreen=bool(data.get("fullscreen", False)),
            max_level=max(1, int(data.get("max_level", 1))),
        )

    @staticmethod
    def default_path(directories: Optional[GameDirectories] = None) -> Path:
        directories = directories or resolve_directories(check_exists=False)
        return directories.config_dir / CONFIG_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GameConfig":
        """Read the config file, falling back to defaults when it is unusable."""

        path = Path(path) if path is not None else cls.default_path()
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
            config = cls.from_dict(data)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Failed to read config %s: %s; using defaults", path, exc)
            return cls()
        logger.debug("Loaded config from %s", path)
        return config

    def save(self, path: Optional[Path] = None) -> Path:
        path = Path(path) if path is not None else self.default_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.debug("Saved config to %s", path)
        return path


__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "GameConfig",
    "GameDirectories",
    "LEVEL_ENV_VAR",
    "LOGICAL_HEIGHT",
    "LOGICAL_WIDTH",
    "resolve_directories",
]
