"""Completion-entry semantics on top of the fragment engine.

* :mod:`~bashcompf.completion.directive` -- pull program names out of a
  ``complete`` command.
* :mod:`~bashcompf.completion.workflows` -- prune dead entries and register
  programs in bulk.
"""

from bashcompf.completion.directive import collect_names, extract_names, find_directive
from bashcompf.completion.workflows import (
    clean_dead_entries,
    make_directive,
    program_basename,
    register_programs,
)

__all__ = [
    "clean_dead_entries",
    "collect_names",
    "extract_names",
    "find_directive",
    "make_directive",
    "program_basename",
    "register_programs",
]
