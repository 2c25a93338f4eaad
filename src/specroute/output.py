"""CLI output with strict stdout/stderr discipline.

* **stdout** -- command results only: route tables, matched links,
  resolved schemas, validated parameters.
* **stderr** -- diagnostics: success notes, errors, and ``--verbose``
  log records (the Rich log handler shares :attr:`OutputManager.stderr_console`).
* **Formats** -- ``json`` for scripts, ``plain`` tab-separated text for
  pipes, ``rich`` for terminals; ``auto`` picks ``rich`` on a colour TTY.
* **Colour control** -- ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.

The root callback in :mod:`specroute.app` installs one
:class:`OutputManager` with :func:`set_output`; commands call the
module-level helpers, which delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Output formats selectable from the command line."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _to_json(data: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


class OutputManager:
    """Renders command results and diagnostics.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup.
        quiet: Drop non-error diagnostics.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """The stderr console, shared with the ``--verbose`` log handler."""
        return self._stderr

    # -- results (stdout) ---------------------------------------------------

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Print a command result: a link, a schema, a parameter mapping."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        else:
            self._stdout.print(Syntax(_to_json(data), "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as JSON records, tab-separated lines, or a Rich table."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return

        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- diagnostics (stderr) -----------------------------------------------

    def _diagnostic(self, message: str, markup: str, prefix: str = "") -> None:
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(message=message))

    def info(self, message: str) -> None:
        """Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, "{message}")

    def success(self, message: str) -> None:
        """Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, "[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Never suppressed."""
        self._diagnostic(message, "[bold red]Error:[/bold red] {message}", prefix="Error: ")


def _plain_lines(data: Any) -> list[str]:
    """Flatten a result for ``--plain``: ``key<TAB>value`` per mapping entry.

    Nested containers are written as compact JSON on the same line.
    """
    if isinstance(data, dict):
        return [
            f"{key}\t{_to_json(value, indent=None) if isinstance(value, (dict, list)) else value}"
            for key, value in data.items()
        ]
    if isinstance(data, list):
        return [str(item) for item in data]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to any value, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- global instance --------------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)
