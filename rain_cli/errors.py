# rain_cli/errors.py
from __future__ import annotations


class RainError(Exception):
    """Base class for every error raised by rain-cli."""


class InvalidDimension(RainError, ValueError):
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"width and height must be greater than 0 (got {width}x{height})"
        )


class TerminalError(RainError):
    """
    The terminal could not be queried or configured: size lookup, signal
    handler installation, or input mode changes.
    """
