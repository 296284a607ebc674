# rain_cli/core/raster.py
"""
Projection of the particle set onto a character grid.

The grid is row-major (`grid[y][x]`); each cell is either None or a
`(depth, glyph)` pair. When several particles land on the same cell the
nearest one (greatest depth) is kept.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from rich.color import Color, ColorSystem
from rich.style import Style

from .particle import DEPTH_MAX, DEPTH_MIN, Particle, Position

Cell = Optional[Tuple[int, str]]
Grid = List[List[Cell]]
Shade = Callable[[int], Style]

# Linear gradient endpoints: far away -> close up
FAR_RGB = (0, 24, 72)
NEAR_RGB = (170, 255, 255)


def rasterize(
    particles: Iterable[Tuple[Position, Particle]], width: int, height: int
) -> Grid:
    grid: Grid = [[None] * width for _ in range(height)]
    for pos, particle in particles:
        if not (0 <= pos.x < width and 0 <= pos.y < height):
            continue
        current = grid[pos.y][pos.x]
        if current is not None and current[0] >= pos.z:
            # existing entry is at least as close as the candidate
            continue
        grid[pos.y][pos.x] = (pos.z, particle.glyph)
    return grid


def depth_fraction(depth: int) -> float:
    """Normalize a depth from the 16-bit range into [0.0, 1.0]."""
    depth = max(DEPTH_MIN, min(DEPTH_MAX, depth))
    return (depth - DEPTH_MIN) / (DEPTH_MAX - DEPTH_MIN)


# ---- shade functions ---------------------------------------------------------


_BEHIND = Style(color="blue")
_PLANE = Style(color="bright_blue")
_FRONT = Style(color="bright_cyan")


def tiered_shade(depth: int) -> Style:
    """Three bands of blue: behind the screen, on it, in front of it."""
    if depth < 0:
        return _BEHIND
    if depth == 0:
        return _PLANE
    return _FRONT


def _tiered_level(depth: int) -> float:
    if depth < 0:
        return 0.0
    if depth == 0:
        return 0.5
    return 1.0


def linear_rgb(depth: int) -> Tuple[int, int, int]:
    t = depth_fraction(depth)
    return tuple(  # type: ignore[return-value]
        int(round(far + (near - far) * t)) for far, near in zip(FAR_RGB, NEAR_RGB)
    )


@lru_cache(maxsize=4096)
def linear_shade(depth: int) -> Style:
    return Style(color=Color.from_rgb(*linear_rgb(depth)))


SHADES: Dict[str, Shade] = {
    "tiered": tiered_shade,
    "linear": linear_shade,
}

_LEVELS: Dict[str, Callable[[int], float]] = {
    "tiered": _tiered_level,
    "linear": depth_fraction,
}


def get_shade(name: str) -> Shade:
    try:
        return SHADES[name]
    except KeyError:
        raise ValueError(f"unknown shade {name!r}") from None


def shade_level(depth: int, shade: str = "linear") -> float:
    """Brightness in [0.0, 1.0] that the named shade gives to `depth`."""
    return _LEVELS[shade](depth)


# ---- serialization -----------------------------------------------------------


def render_frame(
    grid: Grid,
    shade: Optional[Shade] = None,
    color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
) -> str:
    """
    Turn a rasterized grid into text, one line per row. Empty cells become
    a single space. With `shade` each glyph is wrapped in the ANSI codes of
    its depth style, downgraded by Rich to `color_system`; without it (or
    with no color system at all) glyphs are written as they are.
    """
    if color_system is None:
        shade = None
    out: List[str] = []
    for row in grid:
        for cell in row:
            if cell is None:
                out.append(" ")
                continue
            depth, glyph = cell
            if shade is None:
                out.append(glyph)
            else:
                out.append(shade(depth).render(glyph, color_system=color_system))
        out.append("\n")
    return "".join(out)
