"""Layout constants and tile colours for the pygame host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..config import LOGICAL_HEIGHT, LOGICAL_WIDTH
from ..drag import CELL_SIZE
from ..tiles import GEM_TILES, MOVABLE_TILES, WALL_TILES, Tile

Color = Tuple[int, int, int]

TILE_SIZE: int = int(CELL_SIZE)
DRAG_SCALE: float = 1.5

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Color = (0, 0, 0)
TRACK_COLOR: Color = (36, 40, 64)
FLOOR_COLOR: Color = (22, 24, 40)
WALL_COLOR: Color = (78, 88, 122)
SOLID_COLOR: Color = (12, 14, 26)
MOVABLE_COLOR: Color = (240, 240, 240)
IMMOVABLE_COLOR: Color = (150, 150, 160)
SOURCE_COLOR: Color = (130, 210, 255)
TELEPORT_COLOR: Color = (200, 120, 255)
PASS_COLOR: Color = (90, 110, 150)
BEAM_COLOR: Color = (255, 140, 60)
TEXT_COLOR: Color = (232, 236, 244)
MENU_COLOR: Color = (32, 38, 62)

GEM_COLORS: Dict[Tile, Color] = {
    Tile.GEM_RED: (240, 70, 80),
    Tile.GEM_GREEN: (90, 230, 120),
    Tile.GEM_YELLOW: (250, 220, 90),
    Tile.GEM_PURPLE: (170, 90, 240),
}

MENU_ITEMS = ("Continue", "Settings", "Main Menu", "Exit Game")
MENU_BUTTON_SIZE: Tuple[int, int] = (int(LOGICAL_WIDTH * 0.8), 80)


def tile_color(tile: Tile) -> Color:
    """Flat colour used to draw a front or back layer tile."""

    if tile in WALL_TILES:
        return WALL_COLOR
    if tile in GEM_TILES:
        return GEM_COLORS[tile]
    if tile in MOVABLE_TILES:
        return MOVABLE_COLOR
    if tile.is_corner():
        return IMMOVABLE_COLOR
    if tile.is_ray_source():
        return SOURCE_COLOR
    if tile.is_teleport():
        return TELEPORT_COLOR
    if tile in (Tile.PASS_HORIZONTAL, Tile.PASS_VERTICAL):
        return PASS_COLOR
    if tile is Tile.SOLID:
        return SOLID_COLOR
    if tile is Tile.EMPTY_PIECE:
        return BACKGROUND_COLOR
    return TRACK_COLOR


@dataclass(frozen=True)
class Viewport:
    """Letterboxed mapping between window pixels and logical coordinates."""

    scale: float
    offset: Tuple[float, float]

    def to_logical(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return (pos[0] - self.offset[0]) / self.scale, (pos[1] - self.offset[1]) / self.scale

    def to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return pos[0] * self.scale + self.offset[0], pos[1] * self.scale + self.offset[1]


def compute_viewport(
    window_size: Tuple[int, int],
    logical_size: Tuple[int, int] = (LOGICAL_WIDTH, LOGICAL_HEIGHT),
) -> Viewport:
    """Fit the logical screen into the window, centred on the long axis."""

    scale_x = window_size[0] / logical_size[0]
    scale_y = window_size[1] / logical_size[1]
    scale = min(scale_x, scale_y)
    offset_x = (window_size[0] - logical_size[0] * scale) / 2.0
    offset_y = (window_size[1] - logical_size[1] * scale) / 2.0
    return Viewport(scale=scale, offset=(offset_x, offset_y))
