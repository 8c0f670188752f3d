"""Pointer driven movement of movable pieces along their tracks."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .grid import TileGrid
from .tiles import Tile

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]
Cell = Tuple[int, int]

CELL_SIZE = 64.0
HALF_CELL = CELL_SIZE / 2.0
# A single pointer event may cross several cells; each crossing is checked.
DRAG_SUBSTEPS = 15

HIT_RIGHT = 0x01
HIT_LEFT = 0x02
HIT_DOWN = 0x04
HIT_UP = 0x08


def cell_at(grid: TileGrid, pos: Vector, cell_size: float = CELL_SIZE) -> Optional[Cell]:
    """Grid cell under a logical pointer position, ``None`` when off the grid."""

    if pos[0] < 0 or pos[1] < 0:
        return None
    x = int(pos[0] // cell_size)
    y = int(pos[1] // cell_size)
    if not grid.inside(x, y):
        return None
    return x, y


@dataclass
class TileMove:
    """A grabbed piece: its tile, current logical cell and the drag anchor."""

    tile: Tile
    x: int
    y: int
    grab_pos: Vector
    last_pos: Vector

    @property
    def cell(self) -> Cell:
        return self.x, self.y

    def offset(self) -> Vector:
        return self.last_pos[0] - self.grab_pos[0], self.last_pos[1] - self.grab_pos[1]


@dataclass(frozen=True)
class DragResult:
    """Outcome of one pointer move while a piece is held."""

    offset: Vector
    collided: bool
    cell: Cell
    hit: int = 0
    moved: int = 0


class TileDragController:
    """Grabs, slides and drops movable pieces on a grid."""

    def __init__(self, grid: TileGrid, cell_size: float = CELL_SIZE):
        self.grid = grid
        self.cell_size = float(cell_size)
        self.grabbed: Optional[TileMove] = None

    @property
    def is_dragging(self) -> bool:
        return self.grabbed is not None

    def press(self, pos: Vector) -> bool:
        """Pick up the movable piece under ``pos``; return whether one was grabbed."""

        cell = cell_at(self.grid, pos, self.cell_size)
        if cell is None or self.grabbed is not None:
            return False
        tile = self.grid.front_tile(*cell)
        logger.debug("Piece at %s is %s (movable=%s)", cell, tile.name, tile.is_movable())
        if not tile.is_movable():
            return False
        self.grid.set_front_tile(cell[0], cell[1], Tile.EMPTY_PIECE)
        start = (float(pos[0]), float(pos[1]))
        self.grabbed = TileMove(tile=tile, x=cell[0], y=cell[1], grab_pos=start, last_pos=start)
        return True

    def release(self) -> bool:
        """Drop the held piece at its current logical cell."""

        move = self.grabbed
        if move is None:
            return False
        self.grid.set_front_tile(move.x, move.y, move.tile)
        self.grabbed = None
        logger.debug("Dropped %s at %s", move.tile.name, move.cell)
        return True

    def visual_offset(self) -> Vector:
        if self.grabbed is None:
            return 0.0, 0.0
        return self.grabbed.offset()

    def _blocked(self, x: int, y: int) -> bool:
        grid = self.grid
        if not grid.inside(x, y):
            return True
        if grid.front_tile(x, y) is not Tile.EMPTY_PIECE:
            return True
        return grid.back_tile(x, y) is Tile.EMPTY_PIECE

    def move(self, pos: Vector) -> DragResult:
        """Slide the held piece towards ``pos``."""

        move = self.grabbed
        if move is None:
            return DragResult(offset=(0.0, 0.0), collided=False, cell=(-1, -1))

        size = self.cell_size
        half = size / 2.0
        old_cell = move.cell
        hit = 0
        moved = 0
        target = (float(pos[0]), float(pos[1]))
        for _ in range(DRAG_SUBSTEPS):
            move.last_pos = target
            dx, dy = move.offset()
            if dx > 0 and self._blocked(move.x + 1, move.y):
                dx = 0.0
                hit |= HIT_RIGHT
            elif dx < 0 and self._blocked(move.x - 1, move.y):
                dx = 0.0
                hit |= HIT_LEFT
            if dy > 0 and self._blocked(move.x, move.y + 1):
                dy = 0.0
                hit |= HIT_DOWN
            elif dy < 0 and self._blocked(move.x, move.y - 1):
                dy = 0.0
                hit |= HIT_UP

            gx, gy = move.grab_pos
            if dx > half:
                move.x += 1
                dx -= size
                gx += size
                moved |= HIT_RIGHT
            elif dx < -half:
                move.x -= 1
                dx += size
                gx -= size
                moved |= HIT_LEFT
            if dy > half:
                move.y += 1
                dy -= size
                gy += size
                moved |= HIT_DOWN
            elif dy < -half:
                move.y -= 1
                dy += size
                gy -= size
                moved |= HIT_UP
            move.grab_pos = (gx, gy)
            move.last_pos = (gx + dx, gy + dy)

        if self.grid.front_tile(move.x, move.y) is not Tile.EMPTY_PIECE:
            move.x, move.y = old_cell

        return DragResult(
            offset=move.offset(),
            collided=bool(moved & hit),
            cell=move.cell,
            hit=hit,
            moved=moved,
        )

    @contextmanager
    def placed_for_simulation(self) -> Iterator[Optional[TileMove]]:
        """Temporarily put the held piece back on the grid at its current cell."""

        move = self.grabbed
        if move is None:
            yield None
            return
        self.grid.set_front_tile(move.x, move.y, move.tile)
        try:
            yield move
        finally:
            self.grid.set_front_tile(move.x, move.y, Tile.EMPTY_PIECE)


__all__ = [
    "CELL_SIZE",
    "DRAG_SUBSTEPS",
    "DragResult",
    "HALF_CELL",
    "TileDragController",
    "TileMove",
    "cell_at",
]
