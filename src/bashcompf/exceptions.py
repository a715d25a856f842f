"""Exception hierarchy for bash-completion-f.

All exceptions inherit from :class:`BashCompFError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`bashcompf.exit_codes`.
The top-level error handler in :func:`bashcompf.app.main` catches
``BashCompFError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    BashCompFError (exit 1)
    +-- InvalidIdError            (exit 2)
    +-- DuplicateIdError          (exit 3)
    +-- MalformedFragmentsError   (exit 4)
    +-- DirectiveError            (exit 5)
    |   +-- DirectiveNotFoundError
    |   +-- TokenizeError
    +-- FileIOError               (exit 6)
    +-- ConfigError               (exit 1)
"""

from bashcompf.exit_codes import (
    EXIT_DIRECTIVE_ERROR,
    EXIT_DUPLICATE_ID,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_MALFORMED_FILE,
)


class BashCompFError(Exception):
    """Base exception for all bash-completion-f errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`bashcompf.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidIdError(BashCompFError):
    """Raised when an entry id contains anything besides word characters."""

    exit_code = EXIT_INVALID_USAGE


class DuplicateIdError(BashCompFError):
    """Raised when inserting a fragment whose id is already present."""

    exit_code = EXIT_DUPLICATE_ID


class MalformedFragmentsError(BashCompFError):
    """Raised when the entries file has unbalanced, mismatched or repeated markers.

    Args:
        message: Description of the problem.
        line: 1-based line number where the problem was detected, if known.
    """

    exit_code = EXIT_MALFORMED_FILE

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class DirectiveError(BashCompFError):
    """Base class for failures to interpret a fragment payload as a ``complete`` command."""

    exit_code = EXIT_DIRECTIVE_ERROR


class DirectiveNotFoundError(DirectiveError):
    """Raised when a payload contains no line starting with ``complete``."""


class TokenizeError(DirectiveError):
    """Raised when a ``complete`` line cannot be split into shell words."""


class FileIOError(BashCompFError):
    """Raised when the entries file cannot be read or written.

    Named with a ``File`` prefix to avoid shadowing the built-in ``IOError``.
    """

    exit_code = EXIT_IO_ERROR


class ConfigError(BashCompFError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad patterns)."""

    exit_code = EXIT_GENERIC_FAILURE
