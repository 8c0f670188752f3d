"""Frame level game logic for one play page: beam, drag, solve and progression."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .beam import RUN_TO_COMPLETION_STEPS, SOLUTION_STEP_SECONDS, BeamSimulator
from .config import GameConfig
from .drag import TileDragController, Vector, cell_at
from .effects import TileEffect
from .grid import LevelLoader, TileGrid

logger = logging.getLogger(__name__)

INTRO_SECONDS = 2.5
SOLUTION_HOLD_SECONDS = 3.0
FADE_SPEED = 1.7  # overlay alpha per second
HOVER_PUNCH = (5.0, 5.0)
FADE_IN_SCALE = 3.0
FADE_IN_SECONDS = 1.0


class GameState(Enum):
    SHOWING_NEW_LEVEL = "showing_new_level"
    PLAYING = "playing"
    SHOWING_SOLUTION = "showing_solution"
    IN_GAME_MENU = "in_game_menu"


class PageName(Enum):
    MAIN_MENU = "main_menu"
    SETTINGS = "settings"


class ActionKind(Enum):
    NONE = "none"
    EXIT = "exit"
    VISIT_PAGE = "visit_page"
    BACK = "back"
    SET_FULL_SCREEN = "set_full_screen"
    OPEN_LEVEL = "open_level"


@dataclass(frozen=True)
class PageAction:
    """What the host should do in response to an interaction."""

    kind: ActionKind = ActionKind.NONE
    page: Optional[PageName] = None
    level: Optional[int] = None
    fullscreen: Optional[bool] = None

    @classmethod
    def none(cls) -> "PageAction":
        return NO_ACTION

    @classmethod
    def visit(cls, page: PageName) -> "PageAction":
        return cls(kind=ActionKind.VISIT_PAGE, page=page)

    @classmethod
    def open_level(cls, level: int) -> "PageAction":
        return cls(kind=ActionKind.OPEN_LEVEL, level=level)

    @classmethod
    def set_full_screen(cls, fullscreen: bool) -> "PageAction":
        return cls(kind=ActionKind.SET_FULL_SCREEN, fullscreen=fullscreen)


NO_ACTION = PageAction()
EXIT_ACTION = PageAction(kind=ActionKind.EXIT)
BACK_ACTION = PageAction(kind=ActionKind.BACK)


class SoundEffect(Enum):
    PING = "ping"
    GEM = "gem"
    GEM_SOLVED = "gem_solved"


@dataclass(frozen=True)
class FrameResult:
    """Everything the renderer and audio need to know about one frame."""

    state: GameState
    gems_crossed: int
    total_gems: int
    solved: bool
    sounds: Tuple[SoundEffect, ...] = ()
    actions: Tuple[PageAction, ...] = ()


def apply_action(action: PageAction, config: GameConfig) -> bool:
    """Persist the parts of a page action that belong in the config.

    Returns whether the config changed.
    """

    if action.kind is ActionKind.OPEN_LEVEL and action.level is not None:
        return config.increase_max_level(action.level)
    if action.kind is ActionKind.SET_FULL_SCREEN and action.fullscreen is not None:
        if config.fullscreen != action.fullscreen:
            config.fullscreen = action.fullscreen
            return True
    return False


class BeamGame:
    """High level manager for a level page, driven one frame at a time.

    Per frame the host forwards pointer events first and then calls
    :meth:`tick`, so the beam always sees the grid after the drag.
    """

    def __init__(self, loader: LevelLoader, level_no: int = 1):
        self.loader = loader
        self.level_no = level_no
        self.state = GameState.SHOWING_NEW_LEVEL
        self.state_started = 0.0
        self.grid: TileGrid = loader.load(level_no)
        self.simulator = BeamSimulator(self.grid)
        self.drag = TileDragController(self.grid)
        self.last_gem_count = 0
        self.pointer_pos: Vector = (0.0, 0.0)
        self._last_hover: Optional[Tuple[int, int]] = None
        self._pending_sounds: List[SoundEffect] = []

    # ------------------------------------------------------------------
    # Level lifecycle
    def _load(self, level_no: int, now: float) -> None:
        self.level_no = level_no
        self.grid = self.loader.load(level_no)
        self.simulator = BeamSimulator(self.grid)
        self.drag = TileDragController(self.grid)
        self.last_gem_count = 0
        self._last_hover = None
        self._set_state(GameState.SHOWING_NEW_LEVEL, now)
        self.grid.tile_movable_effect(TileEffect.hide())

    def enter(self, now: float = 0.0) -> None:
        """(Re)start the current level from its file."""

        self._load(self.level_no, now)

    def _set_state(self, state: GameState, now: float) -> None:
        if state is not self.state:
            logger.debug("Game state %s -> %s at %.3f", self.state.name, state.name, now)
        self.state = state
        self.state_started = now

    @property
    def total_gems(self) -> int:
        return self.grid.count_jewels()

    def overlay_alpha(self, now: float) -> float:
        """Opacity of the full screen fade drawn over the level."""

        elapsed = now - self.state_started
        if self.state is GameState.SHOWING_NEW_LEVEL:
            return max(1.0 - elapsed * FADE_SPEED, 0.0)
        if self.state is GameState.SHOWING_SOLUTION and elapsed > SOLUTION_HOLD_SECONDS:
            return min((elapsed - SOLUTION_HOLD_SECONDS) * FADE_SPEED, 1.0)
        return 0.0

    # ------------------------------------------------------------------
    # Frame update
    def tick(self, now: float) -> FrameResult:
        sounds = self._pending_sounds
        self._pending_sounds = []
        actions: List[PageAction] = []
        solved = False

        if self.state is GameState.SHOWING_SOLUTION:
            steps = int((now - self.state_started) / SOLUTION_STEP_SECONDS)
            gems = self.simulator.update(steps, now)
            if gems > self.last_gem_count:
                sounds.append(SoundEffect.GEM_SOLVED)
            solved = True
        elif self.drag.is_dragging:
            with self.drag.placed_for_simulation():
                gems = self.simulator.update(RUN_TO_COMPLETION_STEPS, now)
            if gems > self.last_gem_count:
                sounds.append(SoundEffect.GEM)
        else:
            gems = self.simulator.update(RUN_TO_COMPLETION_STEPS, now)
            total = self.total_gems
            solved = total > 0 and gems == total
            if self.state is GameState.PLAYING and solved:
                logger.info("Level %s solved at %.2fs", self.level_no, now)
                self._set_state(GameState.SHOWING_SOLUTION, now)
        self.last_gem_count = gems

        self._tickle_hovered_piece(now)

        if self.state is GameState.SHOWING_NEW_LEVEL and now - self.state_started > INTRO_SECONDS:
            self.grid.tile_movable_effect(
                TileEffect.sized_fade_in(now, FADE_IN_SCALE, FADE_IN_SECONDS)
            )
            self._set_state(GameState.PLAYING, now)
        elif self.state is GameState.SHOWING_SOLUTION and self.overlay_alpha(now) >= 1.0:
            actions.append(self._advance_level(now))

        return FrameResult(
            state=self.state,
            gems_crossed=gems,
            total_gems=self.total_gems,
            solved=solved,
            sounds=tuple(sounds),
            actions=tuple(actions),
        )

    def _advance_level(self, now: float) -> PageAction:
        next_level = self.level_no + 1
        if not self.loader.exists(next_level):
            logger.info("No level after %s, returning to the menu", self.level_no)
            self._set_state(GameState.IN_GAME_MENU, now)
            return BACK_ACTION
        self._load(next_level, now)
        return PageAction.open_level(next_level)

    def _tickle_hovered_piece(self, now: float) -> None:
        cell = cell_at(self.grid, self.pointer_pos)
        if cell is not None and cell != self._last_hover:
            if self.grid.front_tile(*cell).is_movable():
                self.grid.set_effect(cell[0], cell[1], TileEffect.punch(now, HOVER_PUNCH))
        self._last_hover = cell

    # ------------------------------------------------------------------
    # Input
    def pointer_press(self, pos: Vector) -> PageAction:
        self.pointer_pos = pos
        if self.state is GameState.PLAYING:
            self.drag.press(pos)
        return NO_ACTION

    def pointer_release(self, pos: Vector) -> PageAction:
        self.pointer_pos = pos
        self.drag.release()
        return NO_ACTION

    def pointer_move(self, pos: Vector) -> PageAction:
        self.pointer_pos = pos
        if self.drag.is_dragging:
            result = self.drag.move(pos)
            if result.collided:
                self._pending_sounds.append(SoundEffect.PING)
        return NO_ACTION

    def key_escape(self, now: float = 0.0) -> PageAction:
        if self.state is GameState.PLAYING:
            self._set_state(GameState.IN_GAME_MENU, now)
        elif self.state is GameState.IN_GAME_MENU:
            self._set_state(GameState.PLAYING, now)
        return NO_ACTION

    # ------------------------------------------------------------------
    # In-game menu choices
    def menu_continue(self, now: float = 0.0) -> PageAction:
        if self.state is GameState.IN_GAME_MENU:
            self._set_state(GameState.PLAYING, now)
        return NO_ACTION

    def menu_settings(self) -> PageAction:
        return PageAction.visit(PageName.SETTINGS)

    def menu_main_menu(self) -> PageAction:
        return BACK_ACTION

    def menu_exit(self) -> PageAction:
        return EXIT_ACTION


__all__ = [
    "ActionKind",
    "BeamGame",
    "FrameResult",
    "GameState",
    "PageAction",
    "PageName",
    "SoundEffect",
    "apply_action",
]
