import pytest

from conftest import make_grid
from beam_puzzle.drag import (
    HIT_DOWN,
    HIT_LEFT,
    HIT_RIGHT,
    TileDragController,
    cell_at,
)
from beam_puzzle.tiles import Tile


def grab(front, back=None, pos=(32.0, 32.0)):
    grid = make_grid(front, back)
    controller = TileDragController(grid)
    assert controller.press(pos)
    return grid, controller


def test_cell_at():
    grid = make_grid(["...", "..."])

    assert cell_at(grid, (70.0, 10.0)) == (1, 0)
    assert cell_at(grid, (191.0, 127.0)) == (2, 1)
    assert cell_at(grid, (192.0, 10.0)) is None
    assert cell_at(grid, (-1.0, 10.0)) is None


def test_press_lifts_piece_off_the_grid():
    grid, controller = grab(["#a..#"], pos=(96.0, 32.0))

    assert controller.is_dragging
    assert controller.grabbed.tile is Tile.MOVABLE_TOP_LEFT
    assert controller.grabbed.cell == (1, 0)
    assert grid.front_tile(1, 0) is Tile.EMPTY_PIECE


@pytest.mark.parametrize("pos", [(32.0, 32.0), (160.0, 32.0), (-5.0, 10.0)])
def test_press_ignores_fixed_tiles(pos):
    grid = make_grid(["#o.b"])
    controller = TileDragController(grid)

    assert not controller.press(pos)
    assert not controller.is_dragging
    assert grid.front_tile(0, 0) is Tile.WALL_BLOCKER


def test_full_cell_move_commits():
    grid, controller = grab(["#a..#"], pos=(96.0, 32.0))

    result = controller.move((160.0, 32.0))

    assert result.cell == (2, 0)
    assert result.offset == (0.0, 0.0)
    assert result.moved == HIT_RIGHT
    assert not result.collided
    assert controller.release()
    assert grid.front_tile(2, 0) is Tile.MOVABLE_TOP_LEFT
    assert grid.front_tile(1, 0) is Tile.EMPTY_PIECE


def test_partial_move_keeps_visual_offset():
    _, controller = grab(["a.."])

    result = controller.move((52.0, 32.0))

    assert result.cell == (0, 0)
    assert result.offset == (20.0, 0.0)
    assert controller.visual_offset() == (20.0, 0.0)


def test_vertical_move_past_half_a_cell():
    _, controller = grab(["a", ".", "."])

    result = controller.move((32.0, 100.0))

    assert result.cell == (0, 1)
    assert result.offset == (0.0, 4.0)


def test_cell_without_track_blocks():
    _, controller = grab(["#a..#"], back=["..  ."], pos=(96.0, 32.0))

    result = controller.move((160.0, 32.0))

    assert result.cell == (1, 0)
    assert result.offset == (0.0, 0.0)
    assert result.hit == HIT_RIGHT
    assert result.moved == 0
    assert not result.collided


def test_occupied_cell_blocks():
    _, controller = grab(["#ab.#"], pos=(96.0, 32.0))

    result = controller.move((160.0, 32.0))

    assert result.cell == (1, 0)
    assert result.hit == HIT_RIGHT


def test_grid_edge_blocks():
    _, controller = grab(["a.."])

    result = controller.move((-40.0, 32.0))

    assert result.cell == (0, 0)
    assert result.hit == HIT_LEFT
    assert result.offset == (0.0, 0.0)


def test_fast_move_crosses_several_cells():
    _, controller = grab(["a....."])

    result = controller.move((224.0, 32.0))

    assert result.cell == (3, 0)
    assert result.offset == (0.0, 0.0)
    assert not result.collided


def test_slamming_into_a_wall_collides():
    _, controller = grab(["a..#."])

    result = controller.move((162.0, 32.0))

    assert result.cell == (2, 0)
    assert result.moved == HIT_RIGHT
    assert result.hit == HIT_RIGHT
    assert result.collided


def test_idle_controller_is_inert():
    grid = make_grid(["a.."])
    controller = TileDragController(grid)

    assert not controller.release()
    assert controller.visual_offset() == (0.0, 0.0)
    assert controller.move((100.0, 0.0)).cell == (-1, -1)
    with controller.placed_for_simulation() as move:
        assert move is None
    assert grid.front_tile(0, 0) is Tile.MOVABLE_TOP_LEFT


def test_held_piece_is_placed_only_while_simulating():
    grid, controller = grab(["a.."])
    controller.move((96.0, 32.0))

    with controller.placed_for_simulation() as move:
        assert move.cell == (1, 0)
        assert grid.front_tile(1, 0) is Tile.MOVABLE_TOP_LEFT

    assert grid.front_tile(1, 0) is Tile.EMPTY_PIECE
    assert controller.is_dragging


def test_diagonal_move_into_occupied_cell_reverts():
    grid, controller = grab(["a.", ".b"])

    result = controller.move((72.0, 72.0))

    assert result.cell == (0, 0)
    assert result.offset == (-24.0, -24.0)
    assert result.moved == HIT_RIGHT | HIT_DOWN
    assert grid.front_tile(1, 1) is Tile.MOVABLE_TOP_RIGHT
    assert controller.release()
    assert grid.front_tile(0, 0) is Tile.MOVABLE_TOP_LEFT
    assert grid.front_tile(1, 1) is Tile.MOVABLE_TOP_RIGHT
