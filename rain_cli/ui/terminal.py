# rain_cli/ui/terminal.py
from __future__ import annotations

import logging
import os
import select
import sys
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple, Union

from rich.color import ColorSystem
from rich.console import COLOR_SYSTEMS, Console
from rich.control import Control

from ..errors import TerminalError

if os.name == "nt":
    import msvcrt
else:
    import termios
    import tty

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"
QUIT_KEYS = frozenset({"q", "Q", ESCAPE})


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class KeyEvent:
    key: str

    @property
    def is_quit(self) -> bool:
        return self.key in QUIT_KEYS


Event = Union[ResizeEvent, KeyEvent]


def split_keys(data: str) -> List[str]:
    """
    Break one read from stdin into individual keys. CSI (`ESC [`) and SS3
    (`ESC O`) sequences such as the arrow keys stay whole; an escape that
    does not start one is a key of its own.
    """
    keys: List[str] = []
    i, n = 0, len(data)
    while i < n:
        ch = data[i]
        if ch != ESCAPE or i + 1 >= n or data[i + 1] not in "[O":
            keys.append(ch)
            i += 1
            continue
        end = i + 2
        if data[i + 1] == "[":
            # parameters run until a final byte in @..~
            while end < n and not "@" <= data[end] <= "~":
                end += 1
        end = min(end + 1, n)
        keys.append(data[i:end])
        i = end
    return keys


class Terminal:
    """
    The real terminal: alternate screen, hidden cursor, unbuffered keys.

    Use as a context manager; leaving the block (normally, on error, or on
    shutdown) puts the terminal back the way it was. Restoring twice is a
    no-op.
    """

    def __init__(self, console: Optional[Console] = None, stdin=None) -> None:
        self.console = console or Console(highlight=False)
        self._stdin = stdin if stdin is not None else sys.stdin
        self._fd: Optional[int] = None
        self._saved_mode = None
        self._active = False
        self._last_size: Optional[Tuple[int, int]] = None
        self._pending: Deque[str] = deque()

    @property
    def color_system(self) -> Optional[ColorSystem]:
        """What the console detected; None when colors can't be shown."""
        name = self.console.color_system
        return COLOR_SYSTEMS.get(name) if name else None

    # ---- size --------------------------------------------------------------

    def size(self) -> Tuple[int, int]:
        try:
            cols, rows = os.get_terminal_size(self.console.file.fileno())
        except (OSError, ValueError, AttributeError) as exc:
            raise TerminalError(f"failed to get terminal window size: {exc}") from exc
        return cols, rows

    # ---- mode handling -----------------------------------------------------

    def __enter__(self) -> "Terminal":
        self._last_size = self.size()
        if os.name != "nt" and self._stdin.isatty():
            fd = self._stdin.fileno()
            try:
                self._saved_mode = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except termios.error as exc:
                raise TerminalError(f"failed to set terminal input mode: {exc}") from exc
            self._fd = fd
        self.console.set_alt_screen(True)
        self.console.show_cursor(False)
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if not self._active:
            return
        self._active = False
        fd, mode = self._fd, self._saved_mode
        self._fd = None
        self._saved_mode = None
        self._pending.clear()
        try:
            if fd is not None and mode is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, mode)
        finally:
            self.console.show_cursor(True)
            self.console.set_alt_screen(False)
            self.console.file.flush()

    # ---- events ------------------------------------------------------------

    def _resized(self) -> Optional[ResizeEvent]:
        current = self.size()
        if current == self._last_size:
            return None
        self._last_size = current
        return ResizeEvent(*current)

    def _read_keys(self, timeout: float) -> List[str]:
        if os.name == "nt":
            deadline = time.monotonic() + timeout
            while time.monotonic() < deadline:
                if msvcrt.kbhit():
                    return [msvcrt.getwch()]
                time.sleep(0.01)
            return []
        if self._fd is None:
            time.sleep(timeout)
            return []
        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return []
        return split_keys(os.read(self._fd, 64).decode("utf-8", errors="replace"))

    def poll(self, timeout: float) -> Optional[Event]:
        """
        Wait up to `timeout` seconds for something to happen. Returns None
        when the wait ran out with nothing to report. Keys that arrived
        together are handed out one per call, without waiting.
        """
        resized = self._resized()
        if resized is not None:
            return resized
        if not self._pending:
            self._pending.extend(self._read_keys(timeout))
        if self._pending:
            return KeyEvent(self._pending.popleft())
        return self._resized()

    # ---- output ------------------------------------------------------------

    def write_frame(self, frame: str) -> None:
        # the last row's newline would scroll the screen by one line
        body = frame[:-1] if frame.endswith("\n") else frame
        self.console.control(Control.home())
        self.console.file.write(body)
        self.console.file.flush()
