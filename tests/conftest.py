"""Shared test fixtures for bashcompf.

Provides reusable fixtures for isolated config environments, entries files,
fake PATH directories, output state, and running CLI commands. These fixtures
are automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from bashcompf.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the package logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, and the CLI callback attaches a Rich handler bound to
    those streams to the ``bashcompf`` logger. When Typer's CliRunner
    redirects the streams and the test finishes, the cached references
    become stale. Resetting also restores propagation so ``caplog`` sees
    package log records again.
    """
    yield
    reset_output()
    logger = logging.getLogger("bashcompf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets HOME, XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of
    tmp_path so that tests never touch real user config or the real
    ``~/.bash-completion-f``. Clears ``BASH_COMPLETION_F_FILE`` and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("BASH_COMPLETION_F_FILE", raising=False)
    monkeypatch.setattr("bashcompf.config.is_privileged", lambda: False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def entries_path(tmp_path: Path) -> Path:
    """Path to a not-yet-existing entries file."""
    return tmp_path / "bash-completion-f"


# ---------------------------------------------------------------------------
# Fake PATH
# ---------------------------------------------------------------------------


def _make_executable(directory: Path, name: str, content: str = "#!/bin/sh\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content, encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture
def make_executable():
    """Factory creating an executable file: ``make_executable(dir, name, content)``."""
    return _make_executable


@pytest.fixture
def bin_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary directory that is the only entry on PATH."""
    directory = tmp_path / "bin"
    directory.mkdir()
    monkeypatch.setenv("PATH", str(directory))
    return directory


_PERL_CMDLINE_SCRIPT = """#!/usr/bin/env perl
use strict;
use Perinci::CmdLine::Any;
Perinci::CmdLine::Any->new(url => '/main/foo')->run;
"""


@pytest.fixture
def perl_cmdline_script() -> str:
    """Source of a minimal Perl script built on Perinci::CmdLine."""
    return _PERL_CMDLINE_SCRIPT


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def _no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich markup out of captured CLI output."""
    monkeypatch.setenv("NO_COLOR", "1")
    if "COLUMNS" not in os.environ:
        monkeypatch.setenv("COLUMNS", "200")
