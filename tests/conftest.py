# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import random
from typing import List, Optional, Sequence

import pytest
from rich.color import ColorSystem
from typer.testing import CliRunner

from rain_cli.errors import TerminalError
from rain_cli.ui.terminal import KeyEvent


class FakeTerminal:
    """
    Scripted stand-in for the real terminal. `events` is consumed one item
    per poll; None means the poll timed out. Once the script runs dry the
    terminal answers with a quit key.
    """

    color_system = ColorSystem.TRUECOLOR

    def __init__(
        self,
        width: int = 12,
        height: int = 6,
        events: Sequence[object] = (),
        fail_size: bool = False,
        fail_write: bool = False,
    ) -> None:
        self.width = width
        self.height = height
        self.events: List[object] = list(events)
        self.fail_size = fail_size
        self.fail_write = fail_write
        self.frames: List[str] = []
        self.timeouts: List[float] = []
        self.entered = 0
        self.restored = 0

    def size(self):
        if self.fail_size:
            raise TerminalError("failed to get terminal window size: not a tty")
        return self.width, self.height

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.restored += 1

    def poll(self, timeout: float) -> Optional[object]:
        self.timeouts.append(timeout)
        if not self.events:
            return KeyEvent("q")
        return self.events.pop(0)

    def write_frame(self, frame: str) -> None:
        if self.fail_write:
            raise OSError("broken pipe")
        self.frames.append(frame)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(20240611)


@pytest.fixture()
def fake_terminal_factory():
    return FakeTerminal
