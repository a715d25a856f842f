"""Command line interface of bash-completion-f.

``app`` is the Typer application behind the ``bash-completion-f`` console
script. Entry commands live in :mod:`bashcompf.commands.entries` and the
``config`` group in :mod:`bashcompf.commands.config`; both are registered
below at import time so the app can be driven directly by a test runner.

:func:`main` adds what a direct ``app()`` call lacks: a clean Ctrl-C exit,
exit codes for any :class:`~bashcompf.exceptions.BashCompFError` that
escapes a command, and a crash log for everything else.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from bashcompf import __version__
from bashcompf.commands.config import config_app
from bashcompf.commands.entries import (
    add_all_pc_command,
    add_command,
    add_pc_command,
    clean_command,
    list_command,
    remove_command,
)
from bashcompf.exit_codes import EXIT_GENERIC_FAILURE

EXIT_INTERRUPTED = 130


app = typer.Typer(
    name="bash-completion-f",
    help="Manage a bash-completion-f file of 'complete' commands.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("add")(add_command)
app.command("remove")(remove_command)
app.command("list")(list_command)
app.command("clean")(clean_command)
app.command("add-pc")(add_pc_command)
app.command("add-all-pc")(add_all_pc_command)
app.add_typer(config_app, name="config", help="Show or change the global configuration.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"bash-completion-f {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
    file: Optional[str] = typer.Option(
        None, "--file", "-f",
        help="Use alternate location for the bash-completion-f file.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what would change without writing the file."
    ),
    force: bool = typer.Option(False, "--force", help="Do not ask for confirmation."),
) -> None:
    """Manage a bash-completion-f file of 'complete' commands.

    The file is ``/etc/bash-completion-f`` when running as root and
    ``~/.bash-completion-f`` otherwise, unless ``--file``,
    ``BASH_COMPLETION_F_FILE`` or the ``file`` config key says differently.
    Source it from your bash startup file.
    """
    from bashcompf.config import load_global_config
    from bashcompf.exceptions import ConfigError
    from bashcompf.output import OutputFormat, OutputManager, set_output

    config_problem: Optional[ConfigError] = None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except ConfigError as exc:
            # `config reset` has to run even with an unreadable config.
            config_problem = exc
            fmt = OutputFormat.AUTO

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    output.setup_logging()
    if config_problem is not None:
        logging.getLogger("bashcompf").warning("%s", config_problem)

    ctx.ensure_object(dict)
    ctx.obj.update(file=file, dry_run=dry_run, force=force, verbose=verbose)


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> str:
    """Save the current traceback under the data directory and return its path."""
    from bashcompf.config import get_data_dir

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_data_dir() / f"crash-{stamp}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always, with the command's exit code.
    """
    from bashcompf.exceptions import BashCompFError
    from bashcompf.output import error

    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except BashCompFError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
