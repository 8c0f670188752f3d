"""Simple command line demo for the beam puzzle logic."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .beam import RUN_TO_COMPLETION_STEPS, BeamSimulator
from .config import resolve_directories
from .grid import LevelLoadError, LevelLoader, TileGrid
from .tiles import GEM_TILES, MOVABLE_TILES, WALL_TILES, Tile

_RAY_GLYPHS: Dict[Tile, str] = {
    Tile.RAY_HORIZONTAL: "-",
    Tile.RAY_VERTICAL: "|",
    Tile.RAY_CROSS: "+",
}

_TILE_GLYPHS: Dict[Tile, str] = {
    Tile.RAY_SOURCE_UP: "^",
    Tile.RAY_SOURCE_DOWN: "v",
    Tile.RAY_SOURCE_LEFT: "<",
    Tile.RAY_SOURCE_RIGHT: ">",
    Tile.RAY_TELEPORT_1: "1",
    Tile.RAY_TELEPORT_2: "2",
    Tile.PASS_HORIZONTAL: "=",
    Tile.PASS_VERTICAL: "H",
    Tile.IMMOVABLE_TOP_LEFT: "r",
    Tile.IMMOVABLE_TOP_RIGHT: "7",
    Tile.IMMOVABLE_BOTTOM_LEFT: "L",
    Tile.IMMOVABLE_BOTTOM_RIGHT: "J",
}


def glyph(grid: TileGrid, x: int, y: int) -> str:
    tile = grid.front_tile(x, y)
    if tile in WALL_TILES:
        return "#"
    if tile in GEM_TILES:
        return "*" if grid.ray_tile(x, y) is not Tile.EMPTY_PIECE else "o"
    if tile in MOVABLE_TILES:
        return "M"
    if tile in _TILE_GLYPHS:
        return _TILE_GLYPHS[tile]
    ray = grid.ray_tile(x, y)
    if ray in _RAY_GLYPHS:
        return _RAY_GLYPHS[ray]
    if grid.back_tile(x, y) is Tile.EMPTY_PIECE:
        return " "
    return "."


def render_ascii(grid: TileGrid) -> str:
    rows: List[str] = []
    for y in range(grid.height):
        rows.append("".join(glyph(grid, x, y) for x in range(grid.width)))
    return "\n".join(rows)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Trace the beam through a level")
    parser.add_argument("--level", type=int, default=1, help="Level number to load.")
    parser.add_argument("--levels", type=Path, default=None, help="Directory holding level files.")
    parser.add_argument("--steps", type=int, default=RUN_TO_COMPLETION_STEPS, help="Beam step budget.")
    parser.add_argument("--time", type=float, default=10.0, help="Simulated seconds since entering the level.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    root = args.levels or resolve_directories(check_exists=False).level_root
    loader = LevelLoader(root)
    try:
        grid = loader.load(args.level)
    except (FileNotFoundError, LevelLoadError) as exc:
        print(f"Cannot load level {args.level}: {exc}", file=sys.stderr)
        return 1

    simulator = BeamSimulator(grid)
    # Pause points hold the beam for one call each, so replay until stable.
    gems = 0
    for frame in range(grid.width * grid.height + 1):
        gems = simulator.update(args.steps, args.time + frame)
    total = grid.count_jewels()

    print("=== Beam Puzzle Demo ===")
    print(f"Level: {args.level} ({grid.width}x{grid.height})")
    print(render_ascii(grid))
    print(f"Gems crossed: {gems}/{total}")
    print(f"Solved: {'yes' if total and gems == total else 'no'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
