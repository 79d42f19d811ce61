from __future__ import annotations

import math
from dataclasses import dataclass


SHAPE_S_CURVE = ""
SHAPE_LINEAR = "s"
SHAPE_EASE_OUT = "r"
SHAPE_EASE_IN = "j"


def _ease(shape: str, t: float) -> float:
    if shape == SHAPE_LINEAR:
        return t
    if shape == SHAPE_EASE_OUT:
        return math.sin(t * math.pi / 2)
    if shape == SHAPE_EASE_IN:
        return 1.0 - math.cos(t * math.pi / 2)
    return (1.0 - math.cos(t * math.pi)) / 2


@dataclass(frozen=True)
class Portamento:
    """One pitch glide between two points. Pitches are in tenths of a semitone."""

    anchor_ms: int
    start_ms: float
    start_pitch: float
    end_ms: float
    end_pitch: float
    shape: str = SHAPE_S_CURVE

    def apply(self, position_ms: float) -> float:
        if self.end_ms <= self.start_ms:
            return self.end_pitch
        t = (position_ms - self.start_ms) / (self.end_ms - self.start_ms)
        t = max(0.0, min(1.0, t))
        return self.start_pitch + (self.end_pitch - self.start_pitch) * _ease(self.shape, t)


def make_portamento(
    anchor_ms: int,
    start_ms: float,
    start_pitch: float,
    end_ms: float,
    end_pitch: float,
    shape: str = "",
) -> Portamento:
    shape = (shape or "").strip().lower()
    if shape not in (SHAPE_S_CURVE, SHAPE_LINEAR, SHAPE_EASE_OUT, SHAPE_EASE_IN):
        shape = SHAPE_S_CURVE
    return Portamento(anchor_ms, start_ms, start_pitch, end_ms, end_pitch, shape)
