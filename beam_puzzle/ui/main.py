"""Interactive pygame host for the beam puzzle."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional, Sequence, Tuple

import pygame

from ..config import (
    LOGICAL_HEIGHT,
    LOGICAL_WIDTH,
    GameConfig,
    GameDirectories,
    resolve_directories,
)
from ..effects import apply_tile_effect
from ..game import ActionKind, BeamGame, GameState, PageAction, PageName, apply_action
from ..grid import LevelLoadError, LevelLoader
from ..tiles import Tile
from . import layout

logger = logging.getLogger(__name__)


def bootstrap_directories() -> GameDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Beam Puzzle UI bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  config: {directories.config_dir}\n"
        "Set the environment variables to point to custom directories if needed."
    )
    print(message)
    return directories


class BeamPuzzleApp:
    """Pygame driven application for the beam puzzle."""

    def __init__(
        self,
        *,
        directories: Optional[GameDirectories] = None,
        config: Optional[GameConfig] = None,
        level_no: Optional[int] = None,
    ) -> None:
        self.directories = directories or resolve_directories()
        self.config_path = self.directories.config_dir / "save_data.json"
        self.config = config or GameConfig.load(self.config_path)
        self.loader = LevelLoader(self.directories.level_root)

        pygame.init()
        pygame.display.set_caption("Beam Puzzle")
        self.screen_flags = pygame.RESIZABLE
        if self.config.fullscreen:
            self.screen_flags |= pygame.FULLSCREEN
        self.screen = pygame.display.set_mode((self.config.width, self.config.height), self.screen_flags)
        self.canvas = pygame.Surface((LOGICAL_WIDTH, LOGICAL_HEIGHT), 0, 32)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(pygame.font.get_default_font(), 32)

        self.game = BeamGame(self.loader, level_no if level_no is not None else self.config.max_level)
        self.entered_at = time.perf_counter()
        self.game.enter(0.0)
        self.running = True

    # ------------------------------------------------------------------
    # Time and coordinates
    def time_in_page(self) -> float:
        return time.perf_counter() - self.entered_at

    def _viewport(self) -> layout.Viewport:
        return layout.compute_viewport(self.screen.get_size())

    def _logical(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        return self._viewport().to_logical(pos)

    # ------------------------------------------------------------------
    # Actions
    def handle_action(self, action: PageAction) -> None:
        if action.kind is ActionKind.NONE:
            return
        logger.debug("Page action %s", action)
        if apply_action(action, self.config):
            self.config.save(self.config_path)
        if action.kind in (ActionKind.EXIT, ActionKind.BACK):
            self.running = False
        elif action.kind is ActionKind.OPEN_LEVEL:
            self.entered_at = time.perf_counter()
            self.game.state_started = 0.0
        elif action.kind is ActionKind.SET_FULL_SCREEN:
            self._toggle_fullscreen(bool(action.fullscreen))
        elif action.kind is ActionKind.VISIT_PAGE:
            if action.page is PageName.SETTINGS:
                # The only setting the viewer offers is the full screen toggle.
                self.handle_action(PageAction.set_full_screen(not self.config.fullscreen))
            else:
                logger.info("Page %s is not available in this viewer", action.page)

    def _toggle_fullscreen(self, fullscreen: bool) -> None:
        flags = pygame.RESIZABLE | (pygame.FULLSCREEN if fullscreen else 0)
        self.screen = pygame.display.set_mode((self.config.width, self.config.height), flags)

    def _menu_rects(self) -> List[pygame.Rect]:
        width, height = layout.MENU_BUTTON_SIZE
        left = (LOGICAL_WIDTH - width) // 2
        return [pygame.Rect(left, 260 + index * 200, width, height) for index in range(len(layout.MENU_ITEMS))]

    def _menu_click(self, pos: Tuple[float, float]) -> PageAction:
        choices = (
            lambda: self.game.menu_continue(self.time_in_page()),
            self.game.menu_settings,
            self.game.menu_main_menu,
            self.game.menu_exit,
        )
        for rect, choice in zip(self._menu_rects(), choices):
            if rect.collidepoint(int(pos[0]), int(pos[1])):
                return choice()
        return PageAction.none()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.handle_action(self.game.key_escape(self.time_in_page()))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            pos = self._logical(event.pos)
            if self.game.state is GameState.IN_GAME_MENU:
                self.handle_action(self._menu_click(pos))
            else:
                self.handle_action(self.game.pointer_press(pos))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.handle_action(self.game.pointer_release(self._logical(event.pos)))
        elif event.type == pygame.MOUSEMOTION:
            self.handle_action(self.game.pointer_move(self._logical(event.pos)))
        elif event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.set_mode(event.size, self.screen_flags)

    # ------------------------------------------------------------------
    # Drawing
    def _draw_tile(self, tile: Tile, rect: Tuple[float, float, float, float], alpha: float) -> None:
        if tile is Tile.EMPTY_PIECE or alpha <= 0.0:
            return
        x, y, w, h = rect
        surface = pygame.Surface((max(1, int(w)), max(1, int(h))), pygame.SRCALPHA)
        color = layout.tile_color(tile)
        surface.fill((*color, int(255 * min(alpha, 1.0))))
        self.canvas.blit(surface, (int(x), int(y)))

    def _draw_ray(self, ray: Tile, x: int, y: int) -> None:
        size = layout.TILE_SIZE
        cx, cy = x * size + size // 2, y * size + size // 2
        if ray in (Tile.RAY_HORIZONTAL, Tile.RAY_CROSS):
            pygame.draw.line(self.canvas, layout.BEAM_COLOR, (x * size, cy), ((x + 1) * size, cy), 6)
        if ray in (Tile.RAY_VERTICAL, Tile.RAY_CROSS):
            pygame.draw.line(self.canvas, layout.BEAM_COLOR, (cx, y * size), (cx, (y + 1) * size), 6)

    def draw(self, now: float) -> None:
        grid = self.game.grid
        size = float(layout.TILE_SIZE)
        self.canvas.fill(layout.BACKGROUND_COLOR)
        for x, y in grid.cells():
            cell_rect = (x * size, y * size, size, size)
            self._draw_tile(grid.back_tile(x, y), cell_rect, 1.0)
            self._draw_ray(grid.ray_tile(x, y), x, y)
            pos, tile_size, alpha = apply_tile_effect(
                grid.effect(x, y), now, (x * size, y * size), (size, size), 1.0
            )
            self._draw_tile(grid.front_tile(x, y), (*pos, *tile_size), alpha)

        move = self.game.drag.grabbed
        if move is not None:
            dx, dy = self.game.drag.visual_offset()
            scaled = size * layout.DRAG_SCALE
            left = move.x * size + dx - (scaled - size) / 2.0
            top = move.y * size + dy - (scaled - size) / 2.0
            self._draw_tile(move.tile, (left, top, scaled, scaled), 1.0)

        if self.game.state is GameState.IN_GAME_MENU:
            for rect, label in zip(self._menu_rects(), layout.MENU_ITEMS):
                pygame.draw.rect(self.canvas, layout.MENU_COLOR, rect, border_radius=12)
                text = self.font.render(label, True, layout.TEXT_COLOR)
                self.canvas.blit(text, text.get_rect(center=rect.center))

        fade = self.game.overlay_alpha(now)
        if fade > 0.0:
            overlay = pygame.Surface((LOGICAL_WIDTH, LOGICAL_HEIGHT), pygame.SRCALPHA)
            overlay.fill((*layout.SOLID_COLOR, int(255 * fade)))
            self.canvas.blit(overlay, (0, 0))

        viewport = self._viewport()
        target = (int(LOGICAL_WIDTH * viewport.scale), int(LOGICAL_HEIGHT * viewport.scale))
        self.screen.fill(layout.BACKGROUND_COLOR)
        self.screen.blit(pygame.transform.smoothscale(self.canvas, target), viewport.offset)
        pygame.display.flip()

    # ------------------------------------------------------------------
    # Main loop
    def step(self) -> None:
        for event in pygame.event.get():
            self.handle_event(event)
        now = self.time_in_page()
        frame = self.game.tick(now)
        for sound in frame.sounds:
            logger.debug("Sound %s", sound.name)
        for action in frame.actions:
            self.handle_action(action)
        self.draw(self.time_in_page())

    def run(self) -> None:
        while self.running:
            self.step()
            self.clock.tick(60)
        pygame.quit()


def run(level_no: Optional[int] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = BeamPuzzleApp(level_no=level_no)
    app.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Beam Puzzle UI launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource directories and exit without launching the UI.",
    )
    parser.add_argument("--list-levels", action="store_true", help="List available level numbers and exit.")
    parser.add_argument("--level", type=int, default=None, help="Start at this level instead of the saved one.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    try:
        directories = bootstrap_directories() if args.info else resolve_directories()
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if args.info:
        return 0

    if args.list_levels:
        levels = LevelLoader(directories.level_root).available_levels()
        print("Available levels: " + ", ".join(str(number) for number in levels))
        return 0

    try:
        run(args.level)
    except (FileNotFoundError, LevelLoadError) as exc:
        print(f"Cannot start the game: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    sys.exit(main())
