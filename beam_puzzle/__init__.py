"""Beam Puzzle package."""

from .beam import BeamSimulator
from .drag import TileDragController
from .game import BeamGame, GameState, PageAction, SoundEffect
from .grid import LevelLoadError, LevelLoader, TileGrid
from .tiles import BeamDirection, Tile

__all__ = [
    "BeamDirection",
    "BeamGame",
    "BeamSimulator",
    "GameState",
    "LevelLoadError",
    "LevelLoader",
    "PageAction",
    "SoundEffect",
    "Tile",
    "TileDragController",
    "TileGrid",
]
