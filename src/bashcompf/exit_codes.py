"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~bashcompf.exceptions.BashCompFError` subclass.
Shell wrappers can inspect the exit code to tell a duplicate entry apart
from a corrupt entries file without parsing stderr.

Example::

    $ bash-completion-f add foo 'complete -C foo foo'
    $ bash-completion-f add foo 'complete -C foo foo'
    $ echo $?
    3   # EXIT_DUPLICATE_ID -- an entry with this id already exists
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (including a bad entry id)."""

EXIT_DUPLICATE_ID = 3
"""An entry with the requested id already exists."""

EXIT_MALFORMED_FILE = 4
"""The entries file has unbalanced, mismatched or duplicated fragment markers."""

EXIT_DIRECTIVE_ERROR = 5
"""An entry payload has no parsable ``complete`` directive."""

EXIT_IO_ERROR = 6
"""The entries file could not be read or written."""

EXIT_PARTIAL_FAILURE = 7
"""A batch operation completed but at least one item failed."""
