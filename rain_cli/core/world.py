# rain_cli/core/world.py
from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from rich.color import ColorSystem

from ..config import CLASSIC, Profile, SpawnDepth
from ..errors import InvalidDimension
from .particle import DEPTH_MAX, DEPTH_MIN, Particle, Position, random_particle
from .raster import get_shade, rasterize, render_frame

logger = logging.getLogger(__name__)

Entry = Tuple[Position, Particle]


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimension(width, height)


class World:
    """
    The simulation grid: a bag of falling particles inside a width x height
    box of character cells.

    Particles outside the box are dropped, never clamped. Depth is not part
    of containment; it is only used when rendering.
    """

    def __init__(self, width: int, height: int, profile: Profile = CLASSIC, rng=None) -> None:
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self._entries: List[Entry] = []
        self.profile = profile
        self._rng = rng if rng is not None else random

    @classmethod
    def create(cls, width: int, height: int, profile: Profile = CLASSIC, rng=None) -> "World":
        return cls(width, height, profile=profile, rng=rng)

    # ---- read-only views ---------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def particles(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, pos: Position) -> bool:
        return 0 <= pos.x < self._width and 0 <= pos.y < self._height

    # ---- mutation ----------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        logger.debug(
            "resizing from %dx%d to %dx%d", self._width, self._height, width, height
        )
        _check_dimensions(width, height)
        kept = [
            (p, e)
            for p, e in self._entries
            if 0 <= p.x < width and 0 <= p.y < height
        ]
        self._width, self._height, self._entries = width, height, kept

    def spawn_tick(self, spawn_probability: float) -> int:
        """
        Hydrate the top row: each column independently gets a new particle
        with the given probability. Returns how many were added.
        """
        if not 0.0 <= spawn_probability <= 1.0:
            raise ValueError(f"spawn probability must be within 0..1 (got {spawn_probability})")
        prof = self.profile
        rng = self._rng
        added = 0
        for x in range(self._width):
            if rng.random() >= spawn_probability:
                continue
            if prof.spawn_depth is SpawnDepth.RANDOM:
                z = rng.randint(DEPTH_MIN, DEPTH_MAX)
            else:
                z = 0
            particle = random_particle(prof.depth_range, prof.fall_sign, rng)
            self._entries.append((Position(x, 0, z), particle))
            added += 1
        return added

    def spawn_percent(self, spawn_rate: int) -> int:
        return self.spawn_tick(spawn_rate / 100.0)

    def advance_tick(self) -> None:
        """Move every particle by its velocity and drop the ones that left."""
        sign = self.profile.fall_sign
        shifted = (
            (p.shift(e.velocity, sign), e) for p, e in tuple(self._entries)
        )
        self._entries = [(p, e) for p, e in shifted if self.contains(p)]

    # ---- output ------------------------------------------------------------

    def render(
        self,
        color_enabled: bool = True,
        color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
    ) -> str:
        grid = rasterize(self._entries, self._width, self._height)
        shade = get_shade(self.profile.shade) if color_enabled else None
        return render_frame(grid, shade, color_system)

    def __repr__(self) -> str:
        return (
            f"World({self._width}x{self._height}, profile={self.profile.name!r}, "
            f"particles={len(self._entries)})"
        )


def create(width: int, height: int, profile: Optional[Profile] = None, rng=None) -> World:
    return World.create(width, height, profile=profile or CLASSIC, rng=rng)
