# rain_cli/util/console.py
from __future__ import annotations

from rich.console import Console

# stdout belongs to the animation; everything meant for the user goes here
err_console = Console(stderr=True)


def error(msg: str) -> None:
    err_console.print(f"[bold red]Error:[/] {msg}")
