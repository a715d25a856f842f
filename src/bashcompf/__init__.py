"""bashcompf -- manage a file of bash ``complete`` commands kept in fragments.

Each completion entry lives in the entries file as a marker-delimited
*fragment*::

    # BEGIN FRAGMENT id=foo
    complete -C foo foo
    # END FRAGMENT id=foo

The file is meant to be sourced from ``~/.bashrc`` (or ``/etc/bash.bashrc``
for the system-wide copy). Entries can be added, removed, listed, pruned when
their program disappears from ``PATH``, and registered in bulk for scripts
that answer ``complete -C`` queries themselves.

Typical workflow::

    bash-completion-f add-pc mytool        # register one program
    bash-completion-f add-all-pc           # scan PATH for framework scripts
    bash-completion-f clean                # drop entries for removed programs

Modules:
    app: Typer application and CLI entry point.
    fragment: Marker parser/serializer and store operations (pure text).
    completion: ``complete`` directive parsing, clean and register workflows.
    entries: File-backed operations returning structured results.
    scanner: PATH lookup and framework script discovery.
    models: Pydantic models for configuration and results.
    config: Entries file resolution and global configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
