"""Root Typer application and the ``specroute`` console script.

Commands::

    specroute routes SPEC             list compiled routes in match order
    specroute match SPEC METHOD PATH  resolve a request to a link
    specroute show SPEC METHOD HREF   print a link's resolved schemas
    specroute validate SPEC ...       validate a request (and response)

Global flags (``--json``, ``--plain``, ``--no-color``, ``-q``, ``-v``) are
handled once in :func:`main_callback` before any command runs.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from specroute import __version__
from specroute.commands.inspect import match_command, routes_command, show_command
from specroute.commands.validate import validate_command
from specroute.exceptions import SpecrouteError
from specroute.exit_codes import EXIT_GENERIC_FAILURE
from specroute.output import OutputFormat, OutputManager, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specroute",
    help="Compile Swagger/OpenAPI 2.0 specs into request routers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

for _name, _command in (
    ("routes", routes_command),
    ("match", match_command),
    ("show", show_command),
    ("validate", validate_command),
):
    app.command(_name)(_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specroute {__version__}")
        raise typer.Exit()


def _select_format(json_output: bool, plain_output: bool) -> OutputFormat:
    """``--json`` beats ``--plain``; neither leaves the choice to the terminal."""
    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    return OutputFormat.AUTO


def _configure_logging(console: Console) -> None:
    """Send every ``specroute.*`` debug record to *console* (stderr)."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress success and info messages."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log spec loading and route compilation."
    ),
) -> None:
    """Compile Swagger/OpenAPI 2.0 specs into request routers."""
    output = OutputManager(
        format=_select_format(json_output, plain_output),
        no_color=no_color,
        quiet=quiet,
    )
    set_output(output)

    if verbose:
        _configure_logging(output.stderr_console)


def _cancel(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    """Save the active traceback and the command line under the data dir."""
    from specroute.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        f"argv: {' '.join(sys.argv)}\n\n{traceback.format_exc()}", encoding="utf-8"
    )
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    :class:`~specroute.exceptions.SpecrouteError` escaping a command exits
    with the error's ``exit_code``; any other exception is saved to a crash
    log and exits with :data:`~specroute.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    from specroute.output import error

    signal.signal(signal.SIGINT, _cancel)
    try:
        app()
    except KeyboardInterrupt:
        _cancel(signal.SIGINT, None)
    except SpecrouteError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
