"""Level grid model and the binary level file format."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .effects import NO_EFFECT, TileEffect
from .tiles import Tile

logger = logging.getLogger(__name__)

HEADER_SIZE = 4
# Width and height are stored as single bytes.
MAX_SIDE = 255
LEVEL_SUFFIX = ".mp"
_LEVEL_NAME = re.compile(r"^level(\d+)\.mp$")


class LevelLoadError(ValueError):
    """Raised when level data cannot be turned into a valid grid."""


def _decode_layer(name: str, data: bytes, width: int) -> bytearray:
    for index, code in enumerate(data):
        if Tile.from_code(code) is None:
            x, y = index % width, index // width
            raise LevelLoadError(f"Unknown tile code {code} in {name} layer at ({x}, {y})")
    return bytearray(data)


class TileGrid:
    """Fixed size grid holding the back, front and solution layers of a level.

    The ray layer is scratch space rewritten by the beam simulator on every
    update. Effects are visual state kept per cell until replaced.
    """

    def __init__(
        self,
        width: int,
        height: int,
        back: Sequence[int],
        front: Sequence[int],
        solution: Optional[Sequence[int]] = None,
        *,
        has_solution: bool = False,
    ) -> None:
        if not (0 < width <= MAX_SIDE and 0 < height <= MAX_SIDE):
            raise LevelLoadError(f"Invalid grid size {width}x{height}")
        size = width * height
        if solution is None:
            solution = bytes(size)
        for name, layer in (("back", back), ("front", front), ("solution", solution)):
            if len(layer) != size:
                raise LevelLoadError(
                    f"{name} layer has {len(layer)} cells, expected {size} for {width}x{height}"
                )
        self._width = width
        self._height = height
        self.has_solution = has_solution
        self._back = _decode_layer("back", bytes(back), width)
        self._front = _decode_layer("front", bytes(front), width)
        self._solution = _decode_layer("solution", bytes(solution), width)
        self._ray = bytearray(size)
        self._effects: List[TileEffect] = [NO_EFFECT] * size

    # ------------------------------------------------------------------
    # Construction and serialisation
    @classmethod
    def from_bytes(cls, data: bytes) -> "TileGrid":
        if len(data) < HEADER_SIZE:
            raise LevelLoadError(f"Level data too short for header: {len(data)} bytes")
        width, height, has_solution = data[1], data[2], data[3]
        size = width * height
        expected = HEADER_SIZE + 3 * size
        if len(data) < expected:
            raise LevelLoadError(
                f"Level data truncated: {len(data)} bytes, expected {expected} for {width}x{height}"
            )
        back = data[HEADER_SIZE : HEADER_SIZE + size]
        front = data[HEADER_SIZE + size : HEADER_SIZE + 2 * size]
        solution = data[HEADER_SIZE + 2 * size : HEADER_SIZE + 3 * size]
        return cls(width, height, back, front, solution, has_solution=bool(has_solution))

    def to_bytes(self) -> bytes:
        header = bytes((0, self._width, self._height, 1 if self.has_solution else 0))
        return header + bytes(self._back) + bytes(self._front) + bytes(self._solution)

    # ------------------------------------------------------------------
    # Geometry
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def inside(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def offset(self, x: int, y: int) -> int:
        if not self.inside(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self._width}x{self._height} grid")
        return y * self._width + x

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every cell in row-major order."""

        for y in range(self._height):
            for x in range(self._width):
                yield x, y

    # ------------------------------------------------------------------
    # Layer access
    def front_tile(self, x: int, y: int) -> Tile:
        return Tile(self._front[self.offset(x, y)])

    def back_tile(self, x: int, y: int) -> Tile:
        return Tile(self._back[self.offset(x, y)])

    def solution_tile(self, x: int, y: int) -> Tile:
        return Tile(self._solution[self.offset(x, y)])

    def ray_tile(self, x: int, y: int) -> Tile:
        return Tile(self._ray[self.offset(x, y)])

    def effect(self, x: int, y: int) -> TileEffect:
        return self._effects[self.offset(x, y)]

    def set_front_tile(self, x: int, y: int, tile: Tile) -> None:
        self._front[self.offset(x, y)] = Tile(tile).value

    def set_ray_tile(self, x: int, y: int, tile: Tile) -> None:
        self._ray[self.offset(x, y)] = Tile(tile).value

    def set_effect(self, x: int, y: int, effect: TileEffect) -> None:
        self._effects[self.offset(x, y)] = effect

    def clear_ray(self) -> None:
        self._ray[:] = bytes(len(self._ray))

    def ray_snapshot(self) -> bytes:
        return bytes(self._ray)

    # ------------------------------------------------------------------
    # Whole grid queries
    def count_jewels(self) -> int:
        return sum(1 for x, y in self.cells() if self.front_tile(x, y).is_a_gem())

    def tile_movable_effect(self, effect: TileEffect) -> None:
        for x, y in self.cells():
            if self.front_tile(x, y).is_movable():
                self.set_effect(x, y, effect)

    def validate(self) -> List[str]:
        """Describe structural problems that make the level unplayable."""

        problems: List[str] = []
        sources = [cell for cell in self.cells() if self.front_tile(*cell).is_ray_source()]
        if not sources:
            problems.append("level has no ray source")
        elif len(sources) > 1:
            problems.append(f"level has {len(sources)} ray sources, only {sources[0]} is used")
        for symbol in (Tile.RAY_TELEPORT_1, Tile.RAY_TELEPORT_2):
            count = sum(1 for cell in self.cells() if self.front_tile(*cell) is symbol)
            if count and count != 2:
                problems.append(f"{symbol.name} appears {count} times, teleports need exactly 2")
        return problems

    def __repr__(self) -> str:
        return f"TileGrid(width={self._width}, height={self._height})"


class LevelLoader:
    """Load numbered level files (``level<N>.mp``) from a directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, number: int) -> Path:
        return self.root / f"level{number}{LEVEL_SUFFIX}"

    def exists(self, number: int) -> bool:
        return self.path_for(number).exists()

    def available_levels(self) -> List[int]:
        if not self.root.exists():
            return []
        numbers = []
        for path in self.root.iterdir():
            match = _LEVEL_NAME.match(path.name)
            if match:
                numbers.append(int(match.group(1)))
        return sorted(numbers)

    def load(self, number: int, *, strict: bool = False) -> TileGrid:
        path = self.path_for(number)
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            grid = TileGrid.from_bytes(path.read_bytes())
        except LevelLoadError as exc:
            raise LevelLoadError(f"{path}: {exc}") from exc
        problems = grid.validate()
        for problem in problems:
            logger.warning("Level %s: %s", number, problem)
        if strict and problems:
            raise LevelLoadError(f"{path}: " + "; ".join(problems))
        logger.info("Loaded level %s from %s (%dx%d)", number, path, grid.width, grid.height)
        return grid


__all__ = ["LevelLoadError", "LevelLoader", "TileGrid"]
