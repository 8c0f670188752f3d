"""Shared fixtures for the beam puzzle tests.

Grids are written as rows of characters so the board layout stays readable
in the test body. The back layer defaults to track everywhere.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, Generator, Iterable, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beam_puzzle.grid import LevelLoader, TileGrid
from beam_puzzle.tiles import BeamDirection, Tile

LEGEND: Dict[str, Tile] = {
    ".": Tile.EMPTY_PIECE,
    "#": Tile.WALL_BLOCKER,
    "^": Tile.RAY_SOURCE_UP,
    "v": Tile.RAY_SOURCE_DOWN,
    "<": Tile.RAY_SOURCE_LEFT,
    ">": Tile.RAY_SOURCE_RIGHT,
    "o": Tile.GEM_RED,
    "g": Tile.GEM_GREEN,
    "1": Tile.RAY_TELEPORT_1,
    "2": Tile.RAY_TELEPORT_2,
    "=": Tile.PASS_HORIZONTAL,
    "H": Tile.PASS_VERTICAL,
    "a": Tile.MOVABLE_TOP_LEFT,
    "b": Tile.MOVABLE_TOP_RIGHT,
    "c": Tile.MOVABLE_BOTTOM_LEFT,
    "d": Tile.MOVABLE_BOTTOM_RIGHT,
    "A": Tile.IMMOVABLE_TOP_LEFT,
    "B": Tile.IMMOVABLE_TOP_RIGHT,
    "C": Tile.IMMOVABLE_BOTTOM_LEFT,
    "D": Tile.IMMOVABLE_BOTTOM_RIGHT,
}

# Back layer legend: "." is track, " " has no track.
BACK_LEGEND: Dict[str, Tile] = {
    ".": Tile.FLOOR_1,
    " ": Tile.EMPTY_PIECE,
    "#": Tile.SOLID,
}

SOURCES: Dict[BeamDirection, Tile] = {
    BeamDirection.UP: Tile.RAY_SOURCE_UP,
    BeamDirection.DOWN: Tile.RAY_SOURCE_DOWN,
    BeamDirection.LEFT: Tile.RAY_SOURCE_LEFT,
    BeamDirection.RIGHT: Tile.RAY_SOURCE_RIGHT,
}

PACKAGE_LEVELS = ROOT / "beam_puzzle" / "levels"


def _encode(rows: Sequence[str], legend: Dict[str, Tile]) -> bytes:
    return bytes(legend[char].value for row in rows for char in row)


def level_bytes(
    front: Sequence[str],
    back: Optional[Sequence[str]] = None,
    solution: Optional[Sequence[str]] = None,
) -> bytes:
    width, height = len(front[0]), len(front)
    back = back or ["." * width] * height
    header = bytes((0, width, height, 1 if solution else 0))
    solution_bytes = _encode(solution, LEGEND) if solution else bytes(width * height)
    return header + _encode(back, BACK_LEGEND) + _encode(front, LEGEND) + solution_bytes


def make_grid(front: Sequence[str], back: Optional[Sequence[str]] = None) -> TileGrid:
    return TileGrid.from_bytes(level_bytes(front, back))


def settle(simulator, times: Iterable[float], steps: int = 500) -> int:
    """Run the simulator at each time and return the last gem count."""

    gems = 0
    for now in times:
        gems = simulator.update(steps, now)
    return gems


@pytest.fixture
def grid_factory():
    return make_grid


@pytest.fixture
def package_loader() -> LevelLoader:
    return LevelLoader(PACKAGE_LEVELS)


@pytest.fixture
def headless_pygame(monkeypatch: pytest.MonkeyPatch) -> Generator[object, None, None]:
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    pygame = pytest.importorskip("pygame")
    try:
        yield pygame
    finally:
        pygame.quit()
