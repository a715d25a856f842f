"""Insert, delete and list operations on a :class:`FragmentFile`.

Every operation is pure: it never modifies the file it is given and returns
a new :class:`FragmentFile` instead. Validation failures raise before
anything is built, so a caller that hits an exception still holds the
untouched original.
"""

from __future__ import annotations

import logging
import re

from bashcompf.exceptions import DuplicateIdError, InvalidIdError
from bashcompf.fragment.parser import ID_PATTERN, Fragment, FragmentFile, render

logger = logging.getLogger(__name__)

# What is left of an END marker line after the id: blanks, a CR, the newline.
_END_LINE_REST = re.compile(r"\A[ \t\r]*(?:\n|\Z)")


def validate_id(fragment_id: str) -> str:
    """Check *fragment_id* against the restricted identifier grammar.

    Returns:
        The id, unchanged.

    Raises:
        InvalidIdError: If the id is empty or contains anything besides
            letters, digits and underscores (path separators, spaces, shell
            metacharacters).
    """
    if not isinstance(fragment_id, str) or not ID_PATTERN.match(fragment_id):
        raise InvalidIdError(
            f"Invalid syntax for id {fragment_id!r}, please use word characters only"
        )
    return fragment_id


def _copy(fragment_file: FragmentFile) -> FragmentFile:
    return FragmentFile(
        fragments=[
            Fragment(f.id, f.payload, f.span, f.begin_tail) for f in fragment_file.fragments
        ],
        free=list(fragment_file.free),
    )


def insert_fragment(fragment_file: FragmentFile, fragment_id: str, payload: str) -> FragmentFile:
    """Append a new fragment at the end of the file.

    A single trailing newline in *payload* is dropped since the END marker
    already starts on its own line. Marker-like payload lines are escaped
    when the file is rendered.

    Raises:
        InvalidIdError: If *fragment_id* is not a valid id.
        DuplicateIdError: If a fragment with *fragment_id* already exists.
    """
    validate_id(fragment_id)
    if fragment_id in fragment_file:
        raise DuplicateIdError(f"Duplicate id '{fragment_id}'")

    if payload.endswith("\n"):
        payload = payload[:-1]

    new = _copy(fragment_file)
    # The BEGIN marker must start a line.
    tail = new.free[-1]
    if tail and not tail.endswith("\n"):
        new.free[-1] = tail + "\n"
    elif not tail and new.fragments:
        new.free[-1] = "\n"

    new.fragments.append(Fragment(id=fragment_id, payload=payload))
    new.free.append("\n")
    render(new)
    logger.debug("Inserted fragment '%s'", fragment_id)
    return new


def delete_fragment(fragment_file: FragmentFile, fragment_id: str) -> tuple[FragmentFile, bool]:
    """Remove the fragment named *fragment_id*.

    The block is removed together with the rest of its END marker line, up to
    and including the newline, which is exactly what :func:`insert_fragment`
    added after it.

    Returns:
        ``(file, deleted)``. When the id is absent, *fragment_file* itself is
        returned with ``deleted=False``; callers should treat this as success
        without a write.

    Raises:
        InvalidIdError: If *fragment_id* is not a valid id.
    """
    validate_id(fragment_id)
    i = fragment_file.index(fragment_id)
    if i < 0:
        return fragment_file, False

    new = _copy(fragment_file)
    after = _END_LINE_REST.sub("", new.free[i + 1], count=1)
    new.free[i : i + 2] = [new.free[i] + after]
    del new.fragments[i]
    render(new)
    logger.debug("Deleted fragment '%s'", fragment_id)
    return new, True


def list_fragments(fragment_file: FragmentFile) -> list[dict[str, str]]:
    """Return ``{"id", "payload"}`` records in file order."""
    return [{"id": f.id, "payload": f.payload} for f in fragment_file.fragments]
