# rain_cli/ui/rain.py
from __future__ import annotations

import logging
import signal
import threading
from typing import Dict, Optional

from ..config import RainConfig
from ..core.world import World
from ..errors import InvalidDimension, TerminalError
from .terminal import Event, KeyEvent, ResizeEvent, Terminal

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM") if hasattr(signal, name)
)


class Shutdown:
    """
    One-way flag telling the loop to stop.

    Signal handlers and the quit key only set it; the loop owns the single
    exit path that restores the terminal.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def request(self, reason: str) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def _on_signal(self, signum, frame) -> None:
        self.request(signal.Signals(signum).name)

    def install(self) -> Dict[int, object]:
        """Route SIGINT/SIGTERM here. Returns the handlers it replaced."""
        previous: Dict[int, object] = {}
        try:
            for sig in SHUTDOWN_SIGNALS:
                previous[sig] = signal.signal(sig, self._on_signal)
        except (OSError, ValueError) as exc:
            self.uninstall(previous)
            raise TerminalError(f"failed to set interrupt handler: {exc}") from exc
        return previous

    @staticmethod
    def uninstall(previous: Dict[int, object]) -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def handle_event(world: World, event: Event, shutdown: Shutdown) -> None:
    if isinstance(event, ResizeEvent):
        try:
            world.resize(event.width, event.height)
        except InvalidDimension as exc:
            logger.warning("ignoring resize: %s", exc)
    elif isinstance(event, KeyEvent) and event.is_quit:
        shutdown.request("key")
    else:
        logger.debug("unhandled event: %r", event)


def tick(world: World, cfg: RainConfig, terminal) -> None:
    """Draw the current state, then move everything and hydrate the top row."""
    terminal.write_frame(world.render(cfg.color, terminal.color_system))
    world.advance_tick()
    world.spawn_percent(cfg.spawn_rate)


def run_loop(world: World, cfg: RainConfig, terminal, shutdown: Shutdown) -> int:
    """
    Alternate between waiting for terminal events and ticking. Returns the
    number of ticks performed once shutdown is requested.
    """
    ticks = 0
    while not shutdown.is_set():
        event = terminal.poll(cfg.tick_interval)
        if shutdown.is_set():
            break
        if event is None:
            tick(world, cfg, terminal)
            ticks += 1
        else:
            handle_event(world, event, shutdown)
    logger.debug("stopping after %d ticks (%s)", ticks, shutdown.reason)
    return ticks


def run(cfg: RainConfig, terminal=None, shutdown: Optional[Shutdown] = None) -> int:
    terminal = terminal if terminal is not None else Terminal()
    shutdown = shutdown if shutdown is not None else Shutdown()

    width, height = terminal.size()
    logger.debug("window size: %dx%d", width, height)
    world = World.create(width, height, profile=cfg.profile)

    previous = shutdown.install()
    try:
        with terminal:
            world.spawn_percent(cfg.spawn_rate)
            return run_loop(world, cfg, terminal, shutdown)
    finally:
        Shutdown.uninstall(previous)
