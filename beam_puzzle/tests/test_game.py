import shutil
from pathlib import Path

import pytest

from conftest import PACKAGE_LEVELS
from beam_puzzle.config import GameConfig
from beam_puzzle.effects import EffectKind
from beam_puzzle.game import (
    BACK_ACTION,
    EXIT_ACTION,
    ActionKind,
    BeamGame,
    GameState,
    PageAction,
    PageName,
    SoundEffect,
    apply_action,
)
from beam_puzzle.grid import LevelLoader
from beam_puzzle.tiles import Tile


def start_playing(loader: LevelLoader, level: int = 1) -> BeamGame:
    game = BeamGame(loader, level)
    game.enter(0.0)
    frame = game.tick(2.6)
    assert frame.state is GameState.PLAYING
    return game


def solve_level_one(game: BeamGame) -> None:
    """Drag the mirror of level 1 from (2, 2) to (3, 1) and let go."""

    game.pointer_press((160.0, 160.0))
    game.pointer_move((224.0, 160.0))
    game.pointer_move((224.0, 96.0))
    assert game.drag.grabbed.cell == (3, 1)

    assert game.tick(3.0).sounds == ()
    frame = game.tick(3.1)
    assert frame.gems_crossed == 1
    assert SoundEffect.GEM in frame.sounds
    assert not frame.solved
    assert frame.state is GameState.PLAYING

    game.pointer_release((224.0, 96.0))
    frame = game.tick(3.2)
    assert frame.solved
    assert frame.state is GameState.SHOWING_SOLUTION


def test_new_level_hides_pieces_then_fades_them_in(package_loader: LevelLoader):
    game = BeamGame(package_loader, 1)
    game.enter(0.0)

    assert game.state is GameState.SHOWING_NEW_LEVEL
    assert game.grid.effect(2, 2).kind is EffectKind.HIDE
    assert game.overlay_alpha(0.0) == 1.0

    frame = game.tick(1.0)
    assert frame.state is GameState.SHOWING_NEW_LEVEL
    assert frame.total_gems == 1
    assert frame.gems_crossed == 0
    assert game.overlay_alpha(1.0) == 0.0

    frame = game.tick(2.6)
    effect = game.grid.effect(2, 2)
    assert frame.state is GameState.PLAYING
    assert effect.kind is EffectKind.SIZED_FADE_IN
    assert effect.started == 2.6
    assert effect.start_scale == 3.0


def test_solving_opens_next_level(package_loader: LevelLoader):
    game = start_playing(package_loader)
    solve_level_one(game)

    sounds = []
    for step in range(1, 19):
        sounds.extend(game.tick(3.2 + step * 0.1).sounds)
    assert SoundEffect.GEM_SOLVED in sounds
    assert game.state is GameState.SHOWING_SOLUTION
    assert game.overlay_alpha(5.0) == 0.0

    frame = game.tick(7.0)

    assert frame.actions == (PageAction.open_level(2),)
    assert game.level_no == 2
    assert frame.state is GameState.SHOWING_NEW_LEVEL
    assert game.grid.width == 6


def test_last_level_returns_to_menu(tmp_path: Path):
    shutil.copy(PACKAGE_LEVELS / "level1.mp", tmp_path / "level1.mp")
    game = start_playing(LevelLoader(tmp_path))
    solve_level_one(game)

    frame = game.tick(7.0)

    assert frame.actions == (BACK_ACTION,)
    assert game.state is GameState.IN_GAME_MENU
    assert game.level_no == 1


def test_solved_board_waits_for_intro(package_loader: LevelLoader):
    game = BeamGame(package_loader, 0)
    game.enter(0.0)

    frame = game.tick(1.0)
    assert frame.solved
    assert frame.state is GameState.SHOWING_NEW_LEVEL

    game.tick(2.6)
    assert game.tick(2.7).state is GameState.SHOWING_SOLUTION


def test_slamming_a_piece_pings(package_loader: LevelLoader):
    game = start_playing(package_loader)

    game.pointer_press((160.0, 160.0))
    game.pointer_move((260.0, 160.0))

    frame = game.tick(3.0)
    assert frame.sounds[0] is SoundEffect.PING
    assert game.drag.grabbed.cell == (3, 2)
    assert game.tick(3.1).sounds.count(SoundEffect.PING) == 0


def test_hovering_a_piece_tickles_it(package_loader: LevelLoader):
    game = start_playing(package_loader)

    game.pointer_move((170.0, 150.0))
    game.tick(2.7)

    effect = game.grid.effect(2, 2)
    assert effect.kind is EffectKind.PUNCH
    assert effect.vector == (5.0, 5.0)
    assert effect.started == 2.7

    game.tick(2.8)
    assert game.grid.effect(2, 2).started == 2.7


def test_pieces_cannot_be_grabbed_before_play(package_loader: LevelLoader):
    game = BeamGame(package_loader, 1)
    game.enter(0.0)

    game.pointer_press((160.0, 160.0))

    assert not game.drag.is_dragging
    assert game.grid.front_tile(2, 2) is Tile.MOVABLE_TOP_RIGHT


def test_escape_toggles_in_game_menu(package_loader: LevelLoader):
    game = start_playing(package_loader)

    game.key_escape(3.0)
    assert game.state is GameState.IN_GAME_MENU
    game.pointer_press((160.0, 160.0))
    assert not game.drag.is_dragging

    game.key_escape(3.5)
    assert game.state is GameState.PLAYING

    game.key_escape(4.0)
    assert game.menu_continue(4.5) == PageAction.none()
    assert game.state is GameState.PLAYING


def test_escape_during_intro_does_nothing(package_loader: LevelLoader):
    game = BeamGame(package_loader, 1)
    game.enter(0.0)

    game.key_escape(1.0)

    assert game.state is GameState.SHOWING_NEW_LEVEL


def test_menu_choices(package_loader: LevelLoader):
    game = start_playing(package_loader)

    assert game.menu_settings() == PageAction.visit(PageName.SETTINGS)
    assert game.menu_main_menu() is BACK_ACTION
    assert game.menu_exit() is EXIT_ACTION


def test_missing_level_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        BeamGame(LevelLoader(tmp_path), 1)


def test_apply_action_updates_config():
    config = GameConfig()

    assert apply_action(PageAction.open_level(3), config)
    assert config.max_level == 3
    assert not apply_action(PageAction.open_level(2), config)
    assert config.max_level == 3

    assert apply_action(PageAction.set_full_screen(True), config)
    assert config.fullscreen
    assert not apply_action(PageAction.set_full_screen(True), config)

    assert not apply_action(EXIT_ACTION, config)
    assert not apply_action(PageAction(kind=ActionKind.VISIT_PAGE, page=PageName.MAIN_MENU), config)
