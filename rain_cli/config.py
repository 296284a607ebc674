# rain_cli/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

SPAWN_RATE_RANGE = (1, 100)
UPDATE_RATE_RANGE = (1, 2000)
DEFAULT_UPDATE_RATE = 50


class SpawnDepth(str, Enum):
    FIXED = "fixed"  # every drop starts at depth 0
    RANDOM = "random"  # uniform over the full depth range


@dataclass(frozen=True)
class Profile:
    """
    A named bundle of simulation and presentation policies.

    Two flavours of the effect exist and differ in how dense the rain is,
    where new drops start in depth, how far they drift in depth per tick,
    how depth is colored, and which sign convention the vertical velocity
    uses. They are kept side by side and picked with `--profile`.
    """

    name: str
    spawn_rate: int
    spawn_depth: SpawnDepth
    depth_range: Tuple[int, int]
    shade: str
    # +1: velocity is negated when generated and added on shift
    # -1: velocity is stored as drawn and subtracted on shift
    fall_sign: int = 1

    def __post_init__(self) -> None:
        lo, hi = self.depth_range
        if lo > hi:
            raise ValueError(f"profile {self.name!r}: empty depth range {lo}..{hi}")
        if self.fall_sign not in (1, -1):
            raise ValueError(f"profile {self.name!r}: fall_sign must be 1 or -1")


CLASSIC = Profile(
    name="classic",
    spawn_rate=1,
    spawn_depth=SpawnDepth.FIXED,
    depth_range=(-3, 3),
    shade="tiered",
    fall_sign=1,
)

DEEP = Profile(
    name="deep",
    spawn_rate=3,
    spawn_depth=SpawnDepth.RANDOM,
    depth_range=(-512, 512),
    shade="linear",
    fall_sign=-1,
)

PROFILES: Dict[str, Profile] = {p.name: p for p in (CLASSIC, DEEP)}


def get_profile(name: str) -> Profile:
    try:
        return PROFILES[name.lower()]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"unknown profile {name!r} (expected one of: {known})") from None


def _check_range(label: str, value: int, bounds: Tuple[int, int]) -> None:
    lo, hi = bounds
    if not lo <= value <= hi:
        raise ValueError(f"{label} must be within {lo}..{hi} (got {value})")


@dataclass
class RainConfig:
    no_color: bool = False
    spawn_rate: int = CLASSIC.spawn_rate
    update_rate: int = DEFAULT_UPDATE_RATE
    profile: Profile = field(default=CLASSIC)

    def __post_init__(self) -> None:
        _check_range("spawn rate", self.spawn_rate, SPAWN_RATE_RANGE)
        _check_range("update rate", self.update_rate, UPDATE_RATE_RANGE)

    @property
    def color(self) -> bool:
        return not self.no_color

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks."""
        return self.update_rate / 1000.0


def load_config(
    profile: str = CLASSIC.name,
    spawn_rate: Optional[int] = None,
    update_rate: Optional[int] = None,
    no_color: bool = False,
) -> RainConfig:
    """
    Build a validated RainConfig. Options left as None fall back to the
    selected profile's defaults.
    """
    prof = get_profile(profile)
    return RainConfig(
        no_color=no_color,
        spawn_rate=prof.spawn_rate if spawn_rate is None else spawn_rate,
        update_rate=DEFAULT_UPDATE_RATE if update_rate is None else update_rate,
        profile=prof,
    )
