from __future__ import annotations

import sys
from enum import Enum
from importlib import metadata
from typing import Optional

import typer

from .config import RainConfig, load_config
from .errors import RainError
from .util.console import error
from .util.logs import setup_logging

# Create the top-level Typer app
app = typer.Typer(
    name="rain",
    help="Digital rain with depth, right in your terminal. Press q or Esc to quit.",
    add_completion=False,
)


class ProfileName(str, Enum):
    classic = "classic"
    deep = "deep"


def _version_string() -> str:
    try:
        return metadata.version("rain-cli")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "0.0.0"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rain-cli {_version_string()}")
        raise typer.Exit(code=0)


def run(cfg: RainConfig) -> int:
    # Imported lazily so --help/--version never touch the terminal modules
    from .ui.rain import run as run_rain

    return run_rain(cfg)


@app.command()
def main(
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disables color (used to show depth).",
        envvar="RAIN_NO_COLOR",
    ),
    spawn_rate: Optional[int] = typer.Option(
        None,
        "--spawn-rate",
        "-r",
        min=1,
        max=100,
        help="How likely a new raindrop is to spawn in a column (1-100). Defaults to the profile's rate.",
        envvar="RAIN_SPAWN_RATE",
        show_default=False,
    ),
    update_rate: int = typer.Option(
        50,
        "--update-rate",
        "-u",
        min=1,
        max=2000,
        help="How frequently to update the screen (in milliseconds).",
        envvar="RAIN_UPDATE_RATE",
    ),
    profile: ProfileName = typer.Option(
        ProfileName.classic,
        "--profile",
        "-p",
        help="classic: sparse rain starting on the screen plane. deep: denser rain scattered through depth.",
        envvar="RAIN_PROFILE",
        case_sensitive=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging on stderr (same as RAIN_LOG=debug).",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show rain-cli version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Make it rain. Runs until q, Esc, Ctrl-C or SIGTERM.
    """
    setup_logging(verbose)

    cfg = load_config(
        profile=profile.value,
        spawn_rate=spawn_rate,
        update_rate=update_rate,
        no_color=no_color,
    )

    try:
        run(cfg)
    except RainError as exc:
        error(str(exc))
        raise typer.Exit(code=1)
    except OSError as exc:
        error(f"terminal I/O failed: {exc}")
        raise typer.Exit(code=1)


def cli() -> None:
    app()


if __name__ == "__main__":
    # When run as a module: python -m rain_cli
    sys.exit(cli())
