from __future__ import annotations

import io
import os

import pytest
from rich.color import ColorSystem
from rich.console import Console

from rain_cli.config import load_config
from rain_cli.core.world import World
from rain_cli.errors import TerminalError
from rain_cli.ui.rain import Shutdown, run_loop
from rain_cli.ui.terminal import KeyEvent, ResizeEvent, Terminal, split_keys

if os.name != "nt":
    import termios


class _NoTty(io.StringIO):
    def isatty(self) -> bool:
        return False


def _terminal():
    out = io.StringIO()
    return Terminal(console=Console(file=out, force_terminal=False), stdin=_NoTty()), out


def test_size_needs_a_real_terminal():
    term, _ = _terminal()
    with pytest.raises(TerminalError):
        term.size()


def test_write_frame_drops_trailing_newline():
    term, out = _terminal()
    term.write_frame("ab\ncd\n")
    assert out.getvalue() == "ab\ncd"


@pytest.mark.parametrize("key,quits", [("q", True), ("Q", True), ("\x1b", True), ("\x1b[A", False), ("x", False)])
def test_quit_keys(key, quits):
    assert KeyEvent(key).is_quit is quits


def test_restore_without_enter_is_a_no_op():
    term, out = _terminal()
    term.restore()
    assert out.getvalue() == ""


@pytest.mark.parametrize(
    "data,keys",
    [
        ("xq", ["x", "q"]),
        ("qq", ["q", "q"]),
        ("\x1b[A", ["\x1b[A"]),
        ("\x1b[1;5Cq", ["\x1b[1;5C", "q"]),
        ("\x1bOP", ["\x1bOP"]),
        ("\x1b", ["\x1b"]),
        ("\x1bx", ["\x1b", "x"]),
        ("", []),
    ],
)
def test_split_keys(data, keys):
    assert split_keys(data) == keys


def test_color_system_follows_console():
    deep = Terminal(console=Console(file=io.StringIO(), force_terminal=True, color_system="256"))
    assert deep.color_system is ColorSystem.EIGHT_BIT
    plain, _ = _terminal()
    assert plain.color_system is None


def _record(monkeypatch, term):
    calls = []
    monkeypatch.setattr(term.console, "set_alt_screen", lambda enable=True: calls.append(("alt", enable)))
    monkeypatch.setattr(term.console, "show_cursor", lambda show=True: calls.append(("cursor", show)))
    return calls


def test_enter_and_restore_round_trip(monkeypatch):
    term, _ = _terminal()
    monkeypatch.setattr(term, "size", lambda: (80, 24))
    calls = _record(monkeypatch, term)

    with term:
        assert calls == [("alt", True), ("cursor", False)]
    term.restore()

    assert calls == [("alt", True), ("cursor", False), ("cursor", True), ("alt", False)]


@pytest.mark.skipif(os.name == "nt", reason="termios only")
def test_screen_is_restored_even_if_input_mode_fails(monkeypatch):
    term, _ = _terminal()
    calls = _record(monkeypatch, term)

    def _fail(*args):
        raise termios.error("EIO")

    monkeypatch.setattr(termios, "tcsetattr", _fail)
    term._active, term._fd, term._saved_mode = True, 0, [0, 0, 0, 0, 0, 0, []]

    with pytest.raises(termios.error):
        term.restore()
    assert calls == [("cursor", True), ("alt", False)]


# ---- polling over a pipe ---------------------------------------------------


@pytest.fixture()
def piped(monkeypatch):
    """A Terminal reading keys from a pipe, with a size we control."""
    if os.name == "nt":
        pytest.skip("select() on pipes is POSIX only")
    read_fd, write_fd = os.pipe()
    term, _ = _terminal()
    size = [(80, 24)]
    monkeypatch.setattr(term, "size", lambda: size[0])
    term._last_size = size[0]
    term._fd = read_fd
    try:
        yield term, write_fd, size
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_poll_times_out_with_nothing(piped):
    term, _, _ = piped
    assert term.poll(0.01) is None


def test_resize_is_reported_once(piped):
    term, _, size = piped
    size[0] = (100, 30)
    assert term.poll(0.01) == ResizeEvent(100, 30)
    assert term.poll(0.01) is None


def test_keys_read_together_come_out_one_by_one(piped):
    term, write_fd, _ = piped
    os.write(write_fd, b"x\x1b[Aq")

    events = [term.poll(0.01) for _ in range(4)]

    assert events == [KeyEvent("x"), KeyEvent("\x1b[A"), KeyEvent("q"), None]
    assert [e.is_quit for e in events[:3]] == [False, False, True]


def test_escape_after_other_key_still_quits(piped):
    term, write_fd, _ = piped
    os.write(write_fd, b"a\x1b")
    assert term.poll(0.01) == KeyEvent("a")
    assert term.poll(0.01).is_quit


def test_buffered_quit_stops_the_loop(piped):
    term, write_fd, _ = piped
    os.write(write_fd, b"xq")
    shutdown = Shutdown()

    ticks = run_loop(World.create(80, 24), load_config(), term, shutdown)

    assert ticks == 0
    assert shutdown.reason == "key"
