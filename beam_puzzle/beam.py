"""Beam propagation across the front layer of a level."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .effects import TileEffect
from .grid import TileGrid
from .tiles import BeamDirection, Tile

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

# Seconds the visible beam waits at every turn or teleport.
TRANSITION_PAUSE = 0.075
# Step budget used during play; larger than any path on a legal grid.
RUN_TO_COMPLETION_STEPS = 500
# Seconds per cell while the solved beam is replayed.
SOLUTION_STEP_SECONDS = 0.05
PUNCH_STRENGTH = 40.0


@dataclass(frozen=True)
class RayTransition:
    """A cell where the beam paused, stamped with the time it first got there."""

    x: int
    y: int
    time_entered: float


def find_start(grid: TileGrid) -> Optional[Tuple[int, int, BeamDirection]]:
    """First ray source in row-major order with its emission direction."""

    for x, y in grid.cells():
        tile = grid.front_tile(x, y)
        if tile.is_ray_source():
            return x, y, tile.source_direction()
    return None


def find_teleports(grid: TileGrid) -> Dict[Tile, Tuple[Cell, Cell]]:
    """Teleport symbols that appear exactly twice, mapped to both cells."""

    found: Dict[Tile, List[Cell]] = defaultdict(list)
    for x, y in grid.cells():
        tile = grid.front_tile(x, y)
        if tile.is_teleport():
            found[tile].append((x, y))
    return {tile: (cells[0], cells[1]) for tile, cells in found.items() if len(cells) == 2}


def move_ray(grid: TileGrid, x: int, y: int, direction: BeamDirection) -> Cell:
    """Step one cell, wrapping around the grid edges."""

    dx, dy = direction.vector
    return (x + dx) % grid.width, (y + dy) % grid.height


class BeamSimulator:
    """Recomputes the ray layer of a grid and counts the gems it crosses."""

    def __init__(self, grid: TileGrid):
        self.grid = grid
        self._transitions: List[RayTransition] = []
        self.last_gem_count = 0
        self._warned_no_source = False

    @property
    def transitions(self) -> Tuple[RayTransition, ...]:
        return tuple(self._transitions)

    def reset(self) -> None:
        self._transitions = []
        self.last_gem_count = 0
        self.grid.clear_ray()

    def _start(self) -> Tuple[int, int, BeamDirection]:
        start = find_start(self.grid)
        if start is not None:
            return start
        if not self._warned_no_source:
            logger.warning("No ray source on the grid, starting the beam at (0, 0) facing up")
            self._warned_no_source = True
        return 0, 0, BeamDirection.UP

    def _find_transition(self, x: int, y: int) -> Optional[RayTransition]:
        for transition in self._transitions:
            if transition.x == x and transition.y == y:
                return transition
        return None

    def update(self, max_steps: int, now: float) -> int:
        """Trace the beam for at most ``max_steps`` cells.

        Returns the number of gems crossed during this call.
        """

        grid = self.grid
        last_ray = grid.ray_snapshot()
        grid.clear_ray()

        x, y, direction = self._start()
        teleports = find_teleports(grid)
        new_transitions: List[RayTransition] = []
        gems = 0

        # The source itself blocks, so start one cell out.
        x, y = move_ray(grid, x, y, direction)
        for _ in range(max(0, max_steps)):
            tile = grid.front_tile(x, y)
            show_ray = True
            if tile.is_ray_blocker(direction):
                break
            if tile.is_a_gem():
                if grid.ray_tile(x, y) is Tile.EMPTY_PIECE:
                    gems += 1
                    if last_ray[grid.offset(x, y)] == Tile.EMPTY_PIECE:
                        dx, dy = direction.vector
                        grid.set_effect(
                            x, y, TileEffect.punch(now, (dx * PUNCH_STRENGTH, dy * PUNCH_STRENGTH))
                        )
            elif tile.is_ray_source():
                break
            elif tile.is_corner():
                reflected = tile.reflect(direction)
                if reflected is None:
                    break
                direction = reflected
                show_ray = False
            elif tile in teleports:
                first, second = teleports[tile]
                x, y = second if (x, y) == first else first
                show_ray = False

            if show_ray:
                if grid.ray_tile(x, y) is not Tile.EMPTY_PIECE:
                    grid.set_ray_tile(x, y, Tile.RAY_CROSS)
                elif direction.is_vertical:
                    grid.set_ray_tile(x, y, Tile.RAY_VERTICAL)
                else:
                    grid.set_ray_tile(x, y, Tile.RAY_HORIZONTAL)
            else:
                transition = self._find_transition(x, y)
                if transition is None:
                    new_transitions.append(RayTransition(x, y, now))
                    break
                new_transitions.append(transition)
                if now - transition.time_entered < TRANSITION_PAUSE:
                    break

            x, y = move_ray(grid, x, y, direction)

        self._transitions = new_transitions
        self.last_gem_count = gems
        return gems


__all__ = [
    "BeamSimulator",
    "PUNCH_STRENGTH",
    "RUN_TO_COMPLETION_STEPS",
    "RayTransition",
    "SOLUTION_STEP_SECONDS",
    "TRANSITION_PAUSE",
    "find_start",
    "find_teleports",
    "move_ray",
]
