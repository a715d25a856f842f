"""File-backed entry operations.

Each public function here is one complete transaction against the entries
file: validate arguments, read and parse the file (a missing file counts as
empty), transform it in memory with :mod:`bashcompf.fragment` and
:mod:`bashcompf.completion`, and write it back atomically only if something
changed. No handle is kept between calls.

The entries file path is always passed in explicitly; resolving it is the
job of :func:`bashcompf.config.resolve_entries_file`.

Errors:
    * :class:`~bashcompf.exceptions.InvalidIdError` and
      :class:`~bashcompf.exceptions.DuplicateIdError` are raised before any
      write (``InvalidIdError`` before any read).
    * :class:`~bashcompf.exceptions.MalformedFragmentsError` aborts the
      operation; nothing is written.
    * :class:`~bashcompf.exceptions.FileIOError` wraps read/write failures.
      Writes are never retried.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from bashcompf.completion import clean_dead_entries, collect_names, register_programs
from bashcompf.config import atomic_write
from bashcompf.exceptions import FileIOError
from bashcompf.fragment import (
    FragmentFile,
    delete_fragment,
    insert_fragment,
    list_fragments,
    parse,
    render,
    validate_id,
)
from bashcompf.models import BatchResult, OperationResult, ResultStatus
from bashcompf.scanner import ScriptSignature, is_executable_on_path, list_candidate_scripts

logger = logging.getLogger(__name__)


def read_entries(path: Path) -> FragmentFile:
    """Read and parse the entries file at *path*.

    Returns:
        The parsed file, or an empty one if *path* does not exist.

    Raises:
        FileIOError: If the file exists but cannot be read.
        MalformedFragmentsError: If the file's markers are inconsistent.
    """
    # newline="" keeps CRLF and lone CR as written.
    try:
        with open(path, encoding="utf-8", newline="") as fh:
            text = fh.read()
    except FileNotFoundError:
        logger.debug("%s does not exist, starting empty", path)
        text = ""
    except (OSError, UnicodeDecodeError) as exc:
        raise FileIOError(f"Can't read entries file {path}: {exc}") from exc
    return parse(text)


def write_entries(path: Path, fragment_file: FragmentFile) -> None:
    """Render *fragment_file* and replace *path* with it atomically.

    Raises:
        FileIOError: If the file cannot be written.
    """
    try:
        atomic_write(path, render(fragment_file))
    except OSError as exc:
        raise FileIOError(f"Can't write entries file {path}: {exc}") from exc
    logger.debug("Wrote %d entries to %s", len(fragment_file), path)


def _commit(path: Path, fragment_file: FragmentFile, dry_run: bool) -> bool:
    if dry_run:
        logger.info("Dry run, not writing %s", path)
        return False
    write_entries(path, fragment_file)
    return True


def add_entry(path: Path, entry_id: str, content: str, dry_run: bool = False) -> OperationResult:
    """Add one completion entry.

    Args:
        path: Entries file.
        entry_id: Entry id, usually the program name.
        content: The entry payload, normally a ``complete ...`` command.
        dry_run: Compute the change without writing it.

    Raises:
        InvalidIdError: If *entry_id* is not a word.
        DuplicateIdError: If the id is already used.
    """
    validate_id(entry_id)
    current = read_entries(path)
    updated = insert_fragment(current, entry_id, content)
    written = _commit(path, updated, dry_run)
    return OperationResult(message=f"Added entry '{entry_id}'", payload=[entry_id], written=written)


def remove_entry(path: Path, entry_id: str, dry_run: bool = False) -> OperationResult:
    """Remove one completion entry.

    Removing an id that is not present is a successful no-op reported as
    ``UNCHANGED``; the file is not rewritten.

    Raises:
        InvalidIdError: If *entry_id* is not a word.
    """
    validate_id(entry_id)
    current = read_entries(path)
    updated, deleted = delete_fragment(current, entry_id)
    if not deleted:
        return OperationResult(
            status=ResultStatus.UNCHANGED, message=f"No entry '{entry_id}'", payload=[]
        )
    written = _commit(path, updated, dry_run)
    return OperationResult(
        message=f"Removed entry '{entry_id}'", payload=[entry_id], written=written
    )


def list_entries(path: Path, detail: bool = False) -> OperationResult:
    """List entries in file order.

    Args:
        path: Entries file.
        detail: Return ``{"id", "payload"}`` records instead of bare ids.
    """
    records = list_fragments(read_entries(path))
    payload = records if detail else [r["id"] for r in records]
    return OperationResult(message=f"{len(records)} entries", payload=payload)


def clean_entries(
    path: Path,
    is_on_path: Callable[[str], bool] = is_executable_on_path,
    dry_run: bool = False,
) -> OperationResult:
    """Delete entries for programs that are no longer found on ``PATH``.

    Entries that cannot be interpreted are kept (see
    :func:`~bashcompf.completion.clean_dead_entries`).

    Returns:
        A result whose payload is the list of removed ids.
    """
    current = read_entries(path)
    updated, removed = clean_dead_entries(current, is_on_path)
    if not removed:
        return OperationResult(
            status=ResultStatus.UNCHANGED, message="No dead entries", payload=[]
        )
    written = _commit(path, updated, dry_run)
    return OperationResult(
        message=f"Removed {len(removed)} dead entries", payload=removed, written=written
    )


def _register(path: Path, programs: Iterable[str], dry_run: bool) -> BatchResult:
    current = read_entries(path)
    updated, added, items = register_programs(current, programs, collect_names(current))
    written = _commit(path, updated, dry_run) if added else False
    return BatchResult.from_items(items, added, written=written)


def add_entries(path: Path, programs: Iterable[str], dry_run: bool = False) -> BatchResult:
    """Add ``complete -C`` entries for programs that complete themselves.

    ``add_entries(path, ["foo", "bar"])`` is the same as adding
    ``complete -C foo foo`` under id ``foo`` and ``complete -C bar bar``
    under id ``bar``. Directory parts are stripped, and programs already
    mentioned by some entry are skipped.

    Returns:
        One item result per program plus the aggregate.
    """
    return _register(path, programs, dry_run)


def add_all_entries(
    path: Path,
    dirs: Optional[Iterable[str]] = None,
    signature: Optional[ScriptSignature] = None,
    dry_run: bool = False,
) -> BatchResult:
    """Scan *dirs* (default ``PATH``) for framework scripts and add entries for them.

    Executables that do not match *signature* are ignored entirely and do
    not show up as items.
    """
    found: list[str] = []
    for script in list_candidate_scripts(dirs, signature):
        if script.looks_like_target:
            logger.debug("%s looks like a framework script", script.path)
            found.append(script.name)
    return _register(path, found, dry_run)

