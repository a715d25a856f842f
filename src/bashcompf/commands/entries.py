"""Entry commands -- add, remove, list and prune completion entries.

Each command resolves the entries file from the root options, calls the
matching function in :mod:`bashcompf.entries` and renders the structured
result. Domain errors are reported on stderr and mapped to their exit code.
"""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Iterator, Optional

import typer

from bashcompf.exceptions import BashCompFError
from bashcompf.exit_codes import EXIT_PARTIAL_FAILURE
from bashcompf.models import BatchResult, OperationResult, ResultStatus
from bashcompf.output import error, format_response, info, print_table, success, suggest, warning


@contextlib.contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except BashCompFError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _options(ctx: typer.Context) -> tuple[Path, bool]:
    """Return ``(entries_path, dry_run)`` from the root callback's options."""
    from bashcompf.config import resolve_entries_file

    obj = ctx.obj or {}
    return resolve_entries_file(obj.get("file")), bool(obj.get("dry_run", False))


def _report(result: OperationResult, dry_run: bool) -> None:
    if result.status == ResultStatus.UNCHANGED:
        info(result.message)
    else:
        success(result.message)
    if dry_run and result.status == ResultStatus.OK:
        info("Dry run, nothing written.")


def _report_batch(result: BatchResult, dry_run: bool) -> None:
    if result.items:
        print_table(
            ["id", "status", "message"],
            [[i.item_id, i.status.value, i.message] for i in result.items],
        )
    if result.status == ResultStatus.OK:
        success(result.message)
    else:
        warning(result.message)
    if dry_run and result.added:
        info("Dry run, nothing written.")
    if not result.status.is_success:
        raise typer.Exit(code=EXIT_PARTIAL_FAILURE)


def add_command(
    ctx: typer.Context,
    entry_id: str = typer.Argument(
        ..., metavar="ID", help="Entry ID, for marker (usually command name)."
    ),
    content: str = typer.Argument(
        ..., help="Entry content (the actual 'complete ...' bash command)."
    ),
) -> None:
    """Add a completion entry.

    Example::

        bash-completion-f add foo 'complete -C foo foo'
    """
    from bashcompf.entries import add_entry

    with _handle_errors():
        path, dry_run = _options(ctx)
        result = add_entry(path, entry_id, content, dry_run=dry_run)
    _report(result, dry_run)


def remove_command(
    ctx: typer.Context,
    entry_id: str = typer.Argument(..., metavar="ID", help="Entry ID to remove."),
) -> None:
    """Remove a completion entry. Removing a missing entry is not an error."""
    from bashcompf.entries import remove_entry

    with _handle_errors():
        path, dry_run = _options(ctx)
        result = remove_entry(path, entry_id, dry_run=dry_run)
    _report(result, dry_run)


def list_command(
    ctx: typer.Context,
    detail: bool = typer.Option(
        False, "--detail", "-l", help="Show each entry's content too."
    ),
) -> None:
    """List completion entries in file order."""
    from bashcompf.entries import list_entries

    with _handle_errors():
        path, _ = _options(ctx)
        result = list_entries(path, detail=detail)

    if detail:
        print_table(
            ["id", "payload"],
            [[r["id"], r["payload"]] for r in result.payload],
            title=str(path),
        )
    else:
        format_response(result.payload)


def clean_command(ctx: typer.Context) -> None:
    """Delete entries for commands that are not in PATH.

    Sometimes when a program gets uninstalled, it still leaves a completion
    entry behind. This searches all entries for commands no longer found in
    PATH and removes them.
    """
    from bashcompf.entries import clean_entries

    with _handle_errors():
        path, dry_run = _options(ctx)
        result = clean_entries(path, dry_run=dry_run)
    if result.payload:
        format_response(result.payload)
    _report(result, dry_run)


def add_pc_command(
    ctx: typer.Context,
    programs: list[str] = typer.Argument(
        ..., metavar="PROGRAM...", help="Program name(s) to add."
    ),
) -> None:
    """Add completion entries for programs that complete themselves.

    ``bash-completion-f add-pc foo bar`` is the same as adding
    ``complete -C foo foo`` under id ``foo`` and ``complete -C bar bar``
    under id ``bar``.
    """
    from bashcompf.entries import add_entries

    with _handle_errors():
        path, dry_run = _options(ctx)
        result = add_entries(path, programs, dry_run=dry_run)
    _report_batch(result, dry_run)


def add_all_pc_command(
    ctx: typer.Context,
    dirs: Optional[list[str]] = typer.Argument(
        None, metavar="[DIR]...", help="Dirs to search (default: PATH)."
    ),
) -> None:
    """Find framework scripts in DIRs (or PATH) and add completion entries for them.

    Which scripts qualify is controlled by the ``scan.shebang_pattern`` and
    ``scan.marker_pattern`` config keys.
    """
    from bashcompf.config import load_global_config
    from bashcompf.entries import add_all_entries
    from bashcompf.scanner import ScriptSignature

    with _handle_errors():
        path, dry_run = _options(ctx)
        signature = ScriptSignature.from_config(load_global_config().scan)
        result = add_all_entries(path, dirs or None, signature, dry_run=dry_run)
    if not result.items:
        info("No new framework scripts found.")
        suggest("Check 'bash-completion-f config show' for the scan patterns.")
        return
    _report_batch(result, dry_run)
