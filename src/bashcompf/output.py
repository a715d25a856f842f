"""Terminal output for bash-completion-f.

Data (entry ids, payloads, batch tables, JSON) is written to **stdout** so it
can be piped; everything addressed to the user (status lines, warnings,
errors, log records) goes to **stderr**. ``NO_COLOR``, ``TERM=dumb`` and
``--no-color`` switch Rich styling off, and the ``auto`` format falls back to
plain text when stdout is not a terminal.

:class:`OutputManager` is built once by :func:`~bashcompf.app.main_callback`
and installed with :func:`set_output`. Command modules use the module-level
shortcuts (:func:`info`, :func:`error`, :func:`print_table`...) rather than
passing the manager around. Core modules never print; they log, and
:meth:`OutputManager.setup_logging` sends those records to stderr.
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
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

_LOGGER_NAME = "bashcompf"


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` becomes ``RICH`` on a colour-capable terminal and ``PLAIN``
    otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Owns the stdout and stderr consoles and the user's output flags.

    Args:
        format: Requested data format.
        no_color: Disable colour even if the environment allows it.
        quiet: Hide status lines and suggestions; only warnings and errors
            reach stderr.
        verbose: Lower the log level to DEBUG.
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
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def setup_logging(self) -> None:
        """Attach a Rich handler on stderr to the ``bashcompf`` logger.

        The level is WARNING, DEBUG with ``--verbose`` or ERROR with
        ``--quiet``. Calling this again swaps the handler instead of adding a
        second one.
        """
        level = logging.WARNING
        if self._verbose:
            level = logging.DEBUG
        elif self._quiet:
            level = logging.ERROR

        handler = RichHandler(
            console=self._stderr,
            show_time=False,
            show_path=self._verbose,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

        logger = logging.getLogger(_LOGGER_NAME)
        for old in list(logger.handlers):
            logger.removeHandler(old)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

    # --- stdout ---

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write *data* to stdout in the active format.

        Plain mode prints one line per list item (dict items as
        tab-separated values) and ``key<TAB>value`` lines for a dict, which
        keeps ``bash-completion-f list`` easy to consume from shell scripts.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            return

        if self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
            return

        if isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout: a Rich table, a JSON array of objects or TSV."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(_tsv_cell(cell) for cell in row))
        else:
            table = Table(title=title, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    # --- stderr ---

    def _status(self, message: str, style: Optional[str] = None) -> None:
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False)

    def _problem(self, label: str, style: str, message: str) -> None:
        if self._no_color:
            print(f"{label}: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[{style}]{label}:[/{style}] {escape(message)}")

    def info(self, message: str) -> None:
        self._status(message)

    def success(self, message: str) -> None:
        self._status(message, style="green")

    def suggest(self, message: str) -> None:
        """Hint at a follow-up command."""
        self._status(f"→ {message}", style="dim")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._problem("Warning", "yellow", message)

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._problem("Error", "bold red", message)


_TSV_ESCAPES = str.maketrans({"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"})


def _tsv_cell(cell: str) -> str:
    """One row per line: backslash-escape tabs, newlines and backslashes."""
    return cell.translate(_TSV_ESCAPES)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(_tsv_cell(str(v)) for v in item.values())
            if isinstance(item, dict)
            else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- global instance ---

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
    """Drop the installed manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)
