"""Tile codes and beam directions shared by the puzzle engine."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Optional, Tuple


class BeamDirection(Enum):
    """Travel direction of the beam in grid coordinates (y grows downwards)."""

    UP = (0, -1)
    LEFT = (-1, 0)
    DOWN = (0, 1)
    RIGHT = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @property
    def is_vertical(self) -> bool:
        return self in (BeamDirection.UP, BeamDirection.DOWN)

    def reverse(self) -> "BeamDirection":
        mapping = {
            BeamDirection.UP: BeamDirection.DOWN,
            BeamDirection.DOWN: BeamDirection.UP,
            BeamDirection.LEFT: BeamDirection.RIGHT,
            BeamDirection.RIGHT: BeamDirection.LEFT,
        }
        return mapping[self]


class Tile(IntEnum):
    """Every tile known to the level format.

    The value of each member is the byte stored in level files, so members
    must never be renumbered. Unused codes (2, 12, 13, 17, 18, 28, 30, 31,
    32) are gaps left by retired tiles.
    """

    EMPTY_PIECE = 0
    WALL_TERMINATOR_TOP = 1
    WALL_HORIZONTAL = 3
    WALL_VERTICAL = 4
    WALL_TURN_TOP_LEFT = 5
    WALL_TURN_TOP_RIGHT = 6
    PASS_HORIZONTAL = 7
    PASS_VERTICAL = 8
    RAY_VERTICAL = 9
    RAY_HORIZONTAL = 10
    RAY_CROSS = 11
    WALL_TERMINATOR_LEFT = 14
    WALL_BLOCKER = 15
    WALL_TERMINATOR_RIGHT = 16
    WALL_TURN_BOTTOM_LEFT = 19
    WALL_TURN_BOTTOM_RIGHT = 20
    RAY_TELEPORT_1 = 21
    RAY_SOURCE_UP = 22
    RAY_SOURCE_RIGHT = 23
    IMMOVABLE_TOP_LEFT = 24
    IMMOVABLE_TOP_RIGHT = 25
    MOVABLE_TOP_LEFT = 26
    MOVABLE_TOP_RIGHT = 27
    WALL_TERMINATOR_BOTTOM = 29
    WALL_T_LEFT = 33
    WALL_T_RIGHT = 34
    RAY_TELEPORT_2 = 35
    RAY_SOURCE_DOWN = 36
    RAY_SOURCE_LEFT = 37
    IMMOVABLE_BOTTOM_LEFT = 38
    IMMOVABLE_BOTTOM_RIGHT = 39
    MOVABLE_BOTTOM_LEFT = 40
    MOVABLE_BOTTOM_RIGHT = 41
    FLOOR_4 = 42
    FLOOR_5 = 43
    FLOOR_6 = 44
    FLOOR_7 = 45
    SOLID = 46
    WALL_T_DOWN = 47
    WALL_T_UP = 48
    GEM_RED = 49
    GEM_GREEN = 50
    GEM_YELLOW = 51
    GEM_PURPLE = 52
    FLOOR_1 = 53
    FLOOR_2 = 54
    FLOOR_3 = 55

    @classmethod
    def from_code(cls, code: int) -> Optional["Tile"]:
        """Return the tile for a raw byte, or ``None`` for an unused code."""

        return _BY_CODE.get(code)

    def is_movable(self) -> bool:
        return self in MOVABLE_TILES

    def is_ray_source(self) -> bool:
        return self in _SOURCE_DIRECTIONS

    def is_ray_blocker(self, direction: BeamDirection) -> bool:
        if direction.is_vertical:
            if self is Tile.PASS_HORIZONTAL:
                return True
        elif self is Tile.PASS_VERTICAL:
            return True
        return self in WALL_TILES

    def is_a_gem(self) -> bool:
        return self in GEM_TILES

    def is_teleport(self) -> bool:
        return self in TELEPORT_TILES

    def is_corner(self) -> bool:
        return self in _REFLECTIONS

    def source_direction(self) -> BeamDirection:
        """Emission direction of a ray source tile."""

        try:
            return _SOURCE_DIRECTIONS[self]
        except KeyError as exc:
            raise ValueError(f"{self.name} is not a ray source") from exc

    def reflect(self, direction: BeamDirection) -> Optional[BeamDirection]:
        """Outgoing direction after hitting this corner, ``None`` for a dead end."""

        return _REFLECTIONS.get(self, {}).get(direction)


_BY_CODE: Dict[int, Tile] = {tile.value: tile for tile in Tile}

MOVABLE_TILES: FrozenSet[Tile] = frozenset(
    {
        Tile.MOVABLE_TOP_LEFT,
        Tile.MOVABLE_TOP_RIGHT,
        Tile.MOVABLE_BOTTOM_LEFT,
        Tile.MOVABLE_BOTTOM_RIGHT,
    }
)

WALL_TILES: FrozenSet[Tile] = frozenset(
    {
        Tile.WALL_BLOCKER,
        Tile.WALL_HORIZONTAL,
        Tile.WALL_VERTICAL,
        Tile.WALL_T_DOWN,
        Tile.WALL_T_UP,
        Tile.WALL_T_LEFT,
        Tile.WALL_T_RIGHT,
        Tile.WALL_TERMINATOR_TOP,
        Tile.WALL_TERMINATOR_BOTTOM,
        Tile.WALL_TERMINATOR_LEFT,
        Tile.WALL_TERMINATOR_RIGHT,
        Tile.WALL_TURN_TOP_LEFT,
        Tile.WALL_TURN_TOP_RIGHT,
        Tile.WALL_TURN_BOTTOM_LEFT,
        Tile.WALL_TURN_BOTTOM_RIGHT,
    }
)

GEM_TILES: FrozenSet[Tile] = frozenset(
    {Tile.GEM_RED, Tile.GEM_GREEN, Tile.GEM_YELLOW, Tile.GEM_PURPLE}
)

TELEPORT_TILES: FrozenSet[Tile] = frozenset({Tile.RAY_TELEPORT_1, Tile.RAY_TELEPORT_2})

_SOURCE_DIRECTIONS: Dict[Tile, BeamDirection] = {
    Tile.RAY_SOURCE_UP: BeamDirection.UP,
    Tile.RAY_SOURCE_DOWN: BeamDirection.DOWN,
    Tile.RAY_SOURCE_LEFT: BeamDirection.LEFT,
    Tile.RAY_SOURCE_RIGHT: BeamDirection.RIGHT,
}

_TOP_LEFT = {BeamDirection.UP: BeamDirection.RIGHT, BeamDirection.LEFT: BeamDirection.DOWN}
_TOP_RIGHT = {BeamDirection.RIGHT: BeamDirection.DOWN, BeamDirection.UP: BeamDirection.LEFT}
_BOTTOM_LEFT = {BeamDirection.DOWN: BeamDirection.RIGHT, BeamDirection.LEFT: BeamDirection.UP}
_BOTTOM_RIGHT = {BeamDirection.DOWN: BeamDirection.LEFT, BeamDirection.RIGHT: BeamDirection.UP}

# Movable and immovable corners of the same orientation reflect identically.
_REFLECTIONS: Dict[Tile, Dict[BeamDirection, BeamDirection]] = {
    Tile.MOVABLE_TOP_LEFT: _TOP_LEFT,
    Tile.IMMOVABLE_TOP_LEFT: _TOP_LEFT,
    Tile.MOVABLE_TOP_RIGHT: _TOP_RIGHT,
    Tile.IMMOVABLE_TOP_RIGHT: _TOP_RIGHT,
    Tile.MOVABLE_BOTTOM_LEFT: _BOTTOM_LEFT,
    Tile.IMMOVABLE_BOTTOM_LEFT: _BOTTOM_LEFT,
    Tile.MOVABLE_BOTTOM_RIGHT: _BOTTOM_RIGHT,
    Tile.IMMOVABLE_BOTTOM_RIGHT: _BOTTOM_RIGHT,
}


__all__ = [
    "BeamDirection",
    "GEM_TILES",
    "MOVABLE_TILES",
    "TELEPORT_TILES",
    "Tile",
    "WALL_TILES",
]
