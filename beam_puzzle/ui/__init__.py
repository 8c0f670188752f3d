"""User interface package for the beam puzzle."""

from .layout import Viewport, compute_viewport, tile_color
from .main import BeamPuzzleApp, bootstrap_directories, main, run

__all__ = [
    "BeamPuzzleApp",
    "Viewport",
    "bootstrap_directories",
    "compute_viewport",
    "main",
    "run",
    "tile_color",
]
