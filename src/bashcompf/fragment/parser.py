"""Parse and render marker-delimited fragments.

A fragment is a block of lines wrapped in a BEGIN/END marker pair naming the
same id::

    # BEGIN FRAGMENT id=foo
    complete -C foo foo
    # END FRAGMENT id=foo

Everything outside the blocks is *free text* and is carried through
verbatim. Payload lines that would otherwise read as markers are escaped by
prefixing one extra ``#`` on write, and the prefix is removed again on read,
so ``parse(render(f)) == f`` for every :class:`FragmentFile` and
``render(parse(text)) == text`` for every well-formed ``text``.

The newline that terminates an END marker line belongs to the free text that
follows the block. This keeps a file without a trailing newline intact and
lets :func:`~bashcompf.fragment.store.delete_fragment` remove exactly what
:func:`~bashcompf.fragment.store.insert_fragment` added.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bashcompf.exceptions import MalformedFragmentsError


ID_PATTERN = re.compile(r"^\w+\Z")
"""Restricted identifier grammar for fragment ids (letters, digits, underscore)."""

_MARKER_LINE = re.compile(r"^# (BEGIN|END) FRAGMENT\b(.*)$")
# Trailing blanks and a CR (from CRLF files) are tolerated after the id.
_MARKER_ARGS = re.compile(r"^ id=(\w+)[ \t\r]*\Z")
_ESCAPE = re.compile(r"^(#+ (?:BEGIN|END) FRAGMENT\b)", re.MULTILINE)
_UNESCAPE = re.compile(r"^#(#+ (?:BEGIN|END) FRAGMENT\b)", re.MULTILINE)


@dataclass
class Fragment:
    """A single marker-delimited block.

    Attributes:
        id: Fragment id, unique within its file.
        payload: Unescaped block body without the final newline.
        span: ``(start, end)`` character offsets of the block in the rendered
            text, from the start of the BEGIN line to the end of the END
            marker (its newline excluded). Not part of equality.
        begin_tail: Blanks or ``\\r`` that followed the id on the BEGIN line,
            written back unchanged. Not part of equality.
    """

    id: str
    payload: str
    span: tuple[int, int] = field(default=(0, 0), compare=False)
    begin_tail: str = field(default="", compare=False)


@dataclass
class FragmentFile:
    """In-memory representation of one entries file.

    ``free[i]`` is the text before ``fragments[i]``; ``free[-1]`` is the text
    after the last fragment, so ``len(free) == len(fragments) + 1`` always.
    """

    fragments: list[Fragment] = field(default_factory=list)
    free: list[str] = field(default_factory=lambda: [""])

    def __post_init__(self) -> None:
        if len(self.free) != len(self.fragments) + 1:
            raise ValueError(
                f"Expected {len(self.fragments) + 1} free text segments, got {len(self.free)}"
            )

    def ids(self) -> list[str]:
        return [f.id for f in self.fragments]

    def get(self, fragment_id: str) -> Fragment | None:
        for fragment in self.fragments:
            if fragment.id == fragment_id:
                return fragment
        return None

    def index(self, fragment_id: str) -> int:
        """Return the position of *fragment_id*, or ``-1`` when absent."""
        for i, fragment in enumerate(self.fragments):
            if fragment.id == fragment_id:
                return i
        return -1

    def __contains__(self, fragment_id: object) -> bool:
        return any(f.id == fragment_id for f in self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def text(self) -> str:
        return render(self)


def begin_marker(fragment_id: str) -> str:
    return f"# BEGIN FRAGMENT id={fragment_id}"


def end_marker(fragment_id: str) -> str:
    return f"# END FRAGMENT id={fragment_id}"


def escape_payload(payload: str) -> str:
    """Prefix one ``#`` to every payload line that looks like a marker."""
    return _ESCAPE.sub(r"#\1", payload)


def unescape_payload(body: str) -> str:
    """Reverse :func:`escape_payload`."""
    return _UNESCAPE.sub(r"\1", body)


def render_block(fragment: Fragment) -> str:
    """Render one fragment as BEGIN line, escaped body and END marker.

    The END marker is not followed by a newline; that newline, and anything
    after the id on the END line, belongs to the next free text segment.
    """
    body = escape_payload(fragment.payload) + "\n" if fragment.payload else ""
    begin = begin_marker(fragment.id) + fragment.begin_tail
    return f"{begin}\n{body}{end_marker(fragment.id)}"


def render(fragment_file: FragmentFile) -> str:
    """Serialise *fragment_file* back to text.

    Also refreshes each fragment's ``span`` to its offsets in the returned
    text.
    """
    parts: list[str] = []
    pos = 0
    for free, fragment in zip(fragment_file.free, fragment_file.fragments):
        parts.append(free)
        pos += len(free)
        block = render_block(fragment)
        fragment.span = (pos, pos + len(block))
        parts.append(block)
        pos += len(block)
    parts.append(fragment_file.free[-1])
    return "".join(parts)


def parse(text: str) -> FragmentFile:
    """Parse *text* into a :class:`FragmentFile`.

    Args:
        text: Full content of the entries file. An empty string yields an
            empty file.

    Returns:
        The parsed file, with fragment spans pointing into *text*.

    Raises:
        MalformedFragmentsError: If a BEGIN marker has no matching END, an END
            has no matching BEGIN, a BEGIN/END pair names different ids, an id
            appears in two BEGIN markers, or a marker line does not carry a
            valid ``id=<id>``.
    """
    fragments: list[Fragment] = []
    free: list[str] = []
    seen: set[str] = set()

    free_start = 0
    open_id: str | None = None
    open_tail = ""
    open_line = 0
    block_start = 0
    body_start = 0

    # Only "\n" separates lines; the escape regexes agree on that.
    pos = 0
    for lineno, content in enumerate(text.split("\n"), start=1):
        line_start = pos
        pos += len(content) + 1

        m = _MARKER_LINE.match(content)
        if not m:
            continue

        kind, args = m.group(1), m.group(2)
        id_match = _MARKER_ARGS.match(args)
        if not id_match:
            raise MalformedFragmentsError(
                f"Invalid {kind} marker, expected '{kind} FRAGMENT id=<word>'", lineno
            )
        fragment_id = id_match.group(1)

        if kind == "BEGIN":
            if open_id is not None:
                raise MalformedFragmentsError(
                    f"BEGIN marker for '{fragment_id}' inside unterminated fragment "
                    f"'{open_id}' (opened on line {open_line})",
                    lineno,
                )
            if fragment_id in seen:
                raise MalformedFragmentsError(f"Duplicate fragment id '{fragment_id}'", lineno)
            open_id = fragment_id
            open_tail = content[len(begin_marker(fragment_id)):]
            open_line = lineno
            block_start = line_start
            body_start = pos
            continue

        if open_id is None:
            raise MalformedFragmentsError(
                f"END marker for '{fragment_id}' without a matching BEGIN", lineno
            )
        if fragment_id != open_id:
            raise MalformedFragmentsError(
                f"END marker for '{fragment_id}' closes fragment '{open_id}' "
                f"(opened on line {open_line})",
                lineno,
            )

        body = text[body_start:line_start]
        marker_end = line_start + len(end_marker(fragment_id))
        fragments.append(
            Fragment(
                id=open_id,
                payload=unescape_payload(body[:-1]) if body else "",
                span=(block_start, marker_end),
                begin_tail=open_tail,
            )
        )
        free.append(text[free_start:block_start])
        free_start = marker_end
        seen.add(open_id)
        open_id = None

    if open_id is not None:
        raise MalformedFragmentsError(
            f"BEGIN marker for '{open_id}' has no matching END", open_line
        )

    free.append(text[free_start:])
    return FragmentFile(fragments=fragments, free=free)
