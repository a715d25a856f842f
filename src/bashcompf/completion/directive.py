"""Recover program names from a ``complete`` command.

Entries are free-form shell text, so this is a best-effort extractor: it
finds the first line starting with ``complete``, splits it with shell
quoting rules, drops the options known to take an argument and reads the
trailing bare words as the completed program names::

    >>> extract_names("complete -C 'foo' foo bar")
    ['foo', 'bar']

Option bundling (``-oC``) and options after the names are not handled.
"""

from __future__ import annotations

import logging
import re
import shlex

from bashcompf.exceptions import DirectiveError, DirectiveNotFoundError, TokenizeError
from bashcompf.fragment.parser import FragmentFile

logger = logging.getLogger(__name__)

DIRECTIVE_KEYWORD = "complete"

_DIRECTIVE_LINE = re.compile(rf"^({DIRECTIVE_KEYWORD}[ \t].*)", re.MULTILINE)
# Options of the bash ``complete`` builtin that consume the next word.
_OPTION_WITH_ARG = re.compile(r"^-[oAGWFCXPS]")


def find_directive(payload: str) -> str:
    """Return the first ``complete ...`` line of *payload*.

    Raises:
        DirectiveNotFoundError: If no line starts with ``complete`` followed
            by whitespace.
    """
    m = _DIRECTIVE_LINE.search(payload)
    if not m:
        raise DirectiveNotFoundError(f"Can't find '{DIRECTIVE_KEYWORD}' command")
    return m.group(1)


def extract_names(payload: str) -> list[str]:
    """Extract the program names a ``complete`` directive applies to.

    Args:
        payload: Fragment payload, possibly spanning several lines.

    Returns:
        The names in command-line order. May be empty, e.g. for
        ``complete -p``.

    Raises:
        DirectiveNotFoundError: If the payload has no ``complete`` line.
        TokenizeError: If the line has unbalanced quoting or a dangling
            escape.
    """
    line = find_directive(payload)
    try:
        argv = shlex.split(line, comments=True)
    except ValueError as exc:
        raise TokenizeError(f"Can't parse '{DIRECTIVE_KEYWORD}' command: {exc}") from exc

    i = 0
    while i < len(argv):
        if _OPTION_WITH_ARG.match(argv[i]):
            del argv[i : i + 2]
            continue
        i += 1

    # strip the keyword itself
    argv = argv[1:]

    names: list[str] = []
    for word in reversed(argv):
        if word.startswith("-"):
            break
        names.append(word)
    names.reverse()
    return names


def collect_names(fragment_file: FragmentFile) -> set[str]:
    """Return every program name referenced by *fragment_file*.

    Fragments whose payload cannot be parsed are logged and skipped.
    """
    names: set[str] = set()
    for fragment in fragment_file.fragments:
        try:
            names.update(extract_names(fragment.payload))
        except DirectiveError as exc:
            logger.warning(
                "Can't parse 'complete' command for entry '%s': %s, skipped",
                fragment.id,
                exc,
            )
    return names
