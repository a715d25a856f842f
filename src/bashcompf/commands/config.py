"""The ``bash-completion-f config`` group.

``show`` and ``set``/``reset`` work on ``config.json`` in the config
directory (see :func:`~bashcompf.config.get_config_dir`). ``path`` prints the
entries file the other commands would use with the same options.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from bashcompf.exceptions import ConfigError
from bashcompf.exit_codes import EXIT_INVALID_USAGE
from bashcompf.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


def _fail(message: str, code: int) -> typer.Exit:
    error(message)
    return typer.Exit(code=code)


def _assign(data: dict[str, Any], key: str, value: str) -> None:
    """Set dotted *key* in *data*, refusing unknown keys and whole sections."""
    *parents, leaf = key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            raise KeyError(key)
        node = child
    if leaf not in node or isinstance(node[leaf], dict):
        raise KeyError(key)
    node[leaf] = value


@config_app.command("show")
def config_show() -> None:
    """Print the effective global configuration.

    Example::

        bash-completion-f --json config show
    """
    from bashcompf.config import get_config_dir, load_global_config

    try:
        config = load_global_config()
    except ConfigError as exc:
        raise _fail(str(exc), exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path(ctx: typer.Context) -> None:
    """Print the entries file the other commands operate on."""
    from bashcompf.config import resolve_entries_file

    cli_file = (ctx.obj or {}).get("file")
    try:
        path = resolve_entries_file(cli_file)
    except ConfigError as exc:
        raise _fail(str(exc), exc.exit_code) from None
    print_data(str(path))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'file' or 'scan.shebang_pattern'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one configuration value.

    The result is validated as a whole before it is saved; an unknown key or
    an invalid value exits with status 2 and leaves the file alone.

    Example::

        bash-completion-f config set file ~/.bash-completion-f
        bash-completion-f config set scan.marker_pattern '^import click'
    """
    from bashcompf.config import load_global_config, save_global_config
    from bashcompf.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
    except ConfigError as exc:
        raise _fail(str(exc), exc.exit_code) from None

    try:
        _assign(data, key, value)
    except KeyError:
        raise _fail(f"Unknown config key: {key}", EXIT_INVALID_USAGE) from None

    try:
        updated = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise _fail(f"Invalid value for {key}: {exc}", EXIT_INVALID_USAGE) from None

    save_global_config(updated)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore the default configuration.

    Asks first unless ``--force`` was given.
    """
    from bashcompf.config import save_global_config
    from bashcompf.models import GlobalConfig

    if not (ctx.obj or {}).get("force", False):
        if not typer.confirm("Reset all config to defaults?"):
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
