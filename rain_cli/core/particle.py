# rain_cli/core/particle.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Tuple

# Depth is a signed 16-bit value
DEPTH_MIN = -(2**15)
DEPTH_MAX = 2**15 - 1

GLYPHS = ("\\", "/", "|", "~", "(", ")", "[", "]", "*", "#", "@")

X_RANGE = (-3, 3)
Y_RANGE = (-3, -1)


def saturating_add(depth: int, delta: int) -> int:
    """Add `delta` to a depth, pinning the result to the 16-bit range."""
    return max(DEPTH_MIN, min(DEPTH_MAX, depth + delta))


@dataclass(frozen=True)
class Velocity:
    x: int
    y: int
    z: int


@dataclass(frozen=True)
class Position:
    x: int
    y: int
    z: int = 0

    def shift(self, velocity: Velocity, fall_sign: int = 1) -> "Position":
        """
        Return the position one tick later. `fall_sign` is the profile's
        vertical convention; with a velocity produced by `random_velocity`
        under the same sign the row always grows.
        """
        return Position(
            self.x + velocity.x,
            self.y + fall_sign * velocity.y,
            saturating_add(self.z, velocity.z),
        )


@dataclass(frozen=True)
class Particle:
    glyph: str
    velocity: Velocity

    def __str__(self) -> str:
        return self.glyph


def random_velocity(depth_range: Tuple[int, int], fall_sign: int = 1, rng=random) -> Velocity:
    """
    Draw a velocity uniformly from the inclusive ranges.

    The vertical component is drawn from Y_RANGE. With `fall_sign` = 1 every
    component is negated on the way out (the row then grows by adding it);
    with -1 the draw is kept raw and the caller subtracts it.
    """
    x = rng.randint(*X_RANGE)
    y = rng.randint(*Y_RANGE)
    z = rng.randint(*depth_range)
    if fall_sign > 0:
        return Velocity(-x, -y, -z)
    return Velocity(x, y, z)


def random_particle(depth_range: Tuple[int, int], fall_sign: int = 1, rng=random) -> Particle:
    return Particle(rng.choice(GLYPHS), random_velocity(depth_range, fall_sign, rng))
