"""Fragment engine -- parse, render and edit marker-delimited text blocks.

This package knows nothing about what a fragment's payload means; it only
guarantees well-formed markers, unique ids and stable ordering.

* :mod:`~bashcompf.fragment.parser` -- :class:`Fragment`,
  :class:`FragmentFile`, :func:`parse` and :func:`render`.
* :mod:`~bashcompf.fragment.store` -- :func:`insert_fragment`,
  :func:`delete_fragment`, :func:`list_fragments` and :func:`validate_id`.
"""

from bashcompf.fragment.parser import (
    ID_PATTERN,
    Fragment,
    FragmentFile,
    escape_payload,
    parse,
    render,
    unescape_payload,
)
from bashcompf.fragment.store import (
    delete_fragment,
    insert_fragment,
    list_fragments,
    validate_id,
)

__all__ = [
    "ID_PATTERN",
    "Fragment",
    "FragmentFile",
    "delete_fragment",
    "escape_payload",
    "insert_fragment",
    "list_fragments",
    "parse",
    "render",
    "unescape_payload",
    "validate_id",
]
