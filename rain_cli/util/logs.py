# rain_cli/util/logs.py
from __future__ import annotations

import logging
import os
from typing import Optional

from rich.logging import RichHandler

from .console import err_console

ENV_VAR = "RAIN_LOG"
DEFAULT_LEVEL = logging.WARNING


def _level_from_env(value: Optional[str]) -> int:
    if not value:
        return DEFAULT_LEVEL
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else DEFAULT_LEVEL


def setup_logging(verbose: bool = False) -> int:
    """
    Route the `rain_cli` loggers through Rich on stderr so they never mix
    with frames on stdout. The level comes from $RAIN_LOG (e.g. `debug`)
    unless `verbose` forces DEBUG. Returns the level in effect.
    """
    level = logging.DEBUG if verbose else _level_from_env(os.getenv(ENV_VAR))
    root = logging.getLogger("rain_cli")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(
            RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
        )
    root.propagate = False
    return level
