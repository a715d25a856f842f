"""Clean and register workflows built on the fragment engine.

Both workflows take and return :class:`~bashcompf.fragment.FragmentFile`
values and never touch the filesystem. PATH lookup is injected as a
predicate so tests can run without real executables.
"""

from __future__ import annotations

import logging
import shlex
from typing import Callable, Iterable, Optional

from bashcompf.completion.directive import collect_names, extract_names
from bashcompf.exceptions import DirectiveError, DuplicateIdError, InvalidIdError
from bashcompf.fragment import FragmentFile, delete_fragment, insert_fragment
from bashcompf.models import ItemResult, ResultStatus

logger = logging.getLogger(__name__)


def make_directive(program: str) -> str:
    """Return the standard payload for a program that completes itself."""
    quoted = shlex.quote(program)
    return f"complete -C {quoted} {quoted}"


def program_basename(program: str) -> str:
    """Strip any directory part from *program* (``/usr/bin/foo`` -> ``foo``)."""
    return program.rsplit("/", 1)[-1]


def clean_dead_entries(
    fragment_file: FragmentFile,
    is_on_path: Callable[[str], bool],
) -> tuple[FragmentFile, list[str]]:
    """Delete entries none of whose programs satisfy *is_on_path*.

    Entries whose payload has no parsable ``complete`` command, or whose
    command names no program, are logged and kept.

    Args:
        fragment_file: File to clean.
        is_on_path: Predicate telling whether a program name resolves to an
            executable.

    Returns:
        ``(file, removed_ids)`` with ids in file order.
    """
    removed: list[str] = []
    for fragment in list(fragment_file.fragments):
        try:
            names = extract_names(fragment.payload)
        except DirectiveError as exc:
            logger.warning(
                "Can't parse 'complete' command for entry '%s': %s, skipped",
                fragment.id,
                exc,
            )
            continue
        if not names:
            logger.warning("Entry '%s' names no program, skipped", fragment.id)
            continue
        if any(is_on_path(name) for name in names):
            continue

        logger.info(
            "%s not found in PATH, removing entry %s", ", ".join(names), fragment.id
        )
        fragment_file, _ = delete_fragment(fragment_file, fragment.id)
        removed.append(fragment.id)
    return fragment_file, removed


def register_programs(
    fragment_file: FragmentFile,
    candidates: Iterable[str],
    existing_names: Optional[set[str]] = None,
) -> tuple[FragmentFile, list[str], list[ItemResult]]:
    """Add a ``complete -C`` entry for every candidate program not yet covered.

    Each candidate is reduced to its base name and used as the entry id.
    Names already referenced by an existing entry, or added earlier in the
    same batch, are reported as ``UNCHANGED``. A candidate that failed is
    tried again when it repeats and fails the same way. Failures on one
    candidate never stop the batch.

    Args:
        fragment_file: File to add entries to.
        candidates: Program names or paths, in the order to add them.
        existing_names: Program names already covered. Computed from
            *fragment_file* with :func:`collect_names` when omitted.

    Returns:
        ``(file, added_ids, item_results)`` with one item result per
        candidate, in input order.
    """
    names = set(collect_names(fragment_file) if existing_names is None else existing_names)
    added: list[str] = []
    results: list[ItemResult] = []

    for candidate in candidates:
        prog = program_basename(candidate)
        if prog in names:
            results.append(
                ItemResult(
                    item_id=prog,
                    status=ResultStatus.UNCHANGED,
                    message="Already has a completion entry, skipped",
                )
            )
            continue

        try:
            fragment_file = insert_fragment(fragment_file, prog, make_directive(prog))
        except InvalidIdError as exc:
            results.append(ItemResult(item_id=prog, status=ResultStatus.INVALID, message=str(exc)))
            continue
        except DuplicateIdError as exc:
            results.append(
                ItemResult(item_id=prog, status=ResultStatus.DUPLICATE, message=str(exc))
            )
            continue

        names.add(prog)
        added.append(prog)
        results.append(ItemResult(item_id=prog, status=ResultStatus.OK, message="Added"))
    return fragment_file, added, results
