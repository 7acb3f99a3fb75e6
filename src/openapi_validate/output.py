"""Output formatting for the ``openapi-validate`` command.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (schemas, operation lists, validation
  failures).  This is what downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, errors, debug messages).
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` flag.

:class:`OutputManager` holds the preferences and is installed once per
invocation by :func:`~openapi_validate.app.main_callback`; the module-level
helpers delegate to it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats.  ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Route data to stdout and diagnostics to stderr in the active format.

    Args:
        format: Desired output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress success messages on stderr.
        verbose: Show debug messages and library ``DEBUG`` logs on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    def configure_logging(self) -> None:
        """Send ``openapi_validate`` log records to stderr when verbose."""
        package_logger = logging.getLogger("openapi_validate")
        if not self._verbose:
            package_logger.setLevel(logging.WARNING)
            return
        package_logger.setLevel(logging.DEBUG)
        if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
            package_logger.addHandler(
                RichHandler(console=self._stderr, show_time=False, show_path=False)
            )

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_data(self, data: Any) -> None:
        """Print a JSON-compatible value to stdout in the active format."""
        if self._format == OutputFormat.RICH:
            json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        elif self._format == OutputFormat.PLAIN and not isinstance(data, (dict, list)):
            self.print_data(str(data))
        else:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout.

        JSON mode emits an array of objects keyed by header, plain mode emits
        tab-separated lines, Rich mode a styled table.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        """Green success message; suppressed by ``--quiet``."""
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Bold-red error message; never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Debug message; only shown with ``--verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]\\[debug] {message}[/dim]")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager.  Used by the test suite between tests."""
    global _output
    _output = None


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
