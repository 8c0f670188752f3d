"""Per-cell visual effects carried by the grid between frames."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

Vector = Tuple[float, float]


class EffectKind(Enum):
    NONE = "none"
    HIDE = "hide"
    PUNCH = "punch"
    SIZED_FADE_IN = "sized_fade_in"


@dataclass(frozen=True)
class TileEffect:
    """Visual transform applied to the tile drawn in one cell.

    ``PUNCH`` uses ``started`` and ``vector``; ``SIZED_FADE_IN`` uses
    ``started``, ``start_scale`` and ``duration``.
    """

    kind: EffectKind = EffectKind.NONE
    started: float = 0.0
    vector: Vector = (0.0, 0.0)
    start_scale: float = 1.0
    duration: float = 1.0

    @classmethod
    def none(cls) -> "TileEffect":
        return NO_EFFECT

    @classmethod
    def hide(cls) -> "TileEffect":
        return cls(kind=EffectKind.HIDE)

    @classmethod
    def punch(cls, started: float, vector: Vector) -> "TileEffect":
        return cls(kind=EffectKind.PUNCH, started=started, vector=(float(vector[0]), float(vector[1])))

    @classmethod
    def sized_fade_in(cls, started: float, start_scale: float, duration: float) -> "TileEffect":
        return cls(
            kind=EffectKind.SIZED_FADE_IN,
            started=started,
            start_scale=start_scale,
            duration=duration,
        )


NO_EFFECT = TileEffect()


def _spring(effect: TileEffect, now: float) -> float:
    # Decaying spring, settles within a few tenths of a second.
    t = (now - effect.started) * 10.0
    return math.sin(t * 3.0) * math.exp(-t)


def effect_offset(effect: TileEffect, now: float) -> Vector:
    """Positional offset an effect contributes at ``now``."""

    if effect.kind is EffectKind.PUNCH:
        scale = _spring(effect, now)
        return effect.vector[0] * scale, effect.vector[1] * scale
    return 0.0, 0.0


def apply_tile_effect(
    effect: TileEffect,
    now: float,
    pos: Vector,
    size: Vector,
    alpha: float,
) -> Tuple[Vector, Vector, float]:
    """Transform a tile's position, size and alpha by ``effect`` at ``now``.

    Sizes scale about the tile centre.
    """

    if effect.kind is EffectKind.HIDE:
        return pos, size, 0.0
    if effect.kind is EffectKind.PUNCH:
        dx, dy = effect_offset(effect, now)
        return (pos[0] + dx, pos[1] + dy), size, alpha
    if effect.kind is EffectKind.SIZED_FADE_IN:
        progress = max(0.0, min((now - effect.started) / max(effect.duration, 1e-6), 1.0))
        factor = effect.start_scale + progress * (1.0 - effect.start_scale)
        centre = (pos[0] + size[0] / 2.0, pos[1] + size[1] / 2.0)
        scaled = (size[0] * factor, size[1] * factor)
        scaled_pos = (centre[0] - scaled[0] / 2.0, centre[1] - scaled[1] / 2.0)
        return scaled_pos, scaled, progress * alpha
    return pos, size, alpha


__all__ = [
    "EffectKind",
    "NO_EFFECT",
    "TileEffect",
    "apply_tile_effect",
    "effect_offset",
]
