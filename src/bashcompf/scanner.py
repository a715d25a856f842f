"""Filesystem collaborators for the completion workflows.

Two functions live here so that :mod:`bashcompf.completion` stays pure:

* :func:`is_executable_on_path` -- the predicate used by ``clean``.
* :func:`list_candidate_scripts` -- walks directories (``PATH`` by default)
  and sniffs each executable to decide whether it was written with the
  target CLI framework. Used by ``add-all-pc``.

A script looks like the target framework when it starts with ``#!``, its
shebang line matches :attr:`ScriptSignature.shebang` and some later line
matches :attr:`ScriptSignature.marker`. Unreadable files, missing
directories and permission errors are skipped.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from bashcompf.exceptions import ConfigError
from bashcompf.fragment.parser import ID_PATTERN
from bashcompf.models import ScanConfig

logger = logging.getLogger(__name__)


@dataclass
class CandidateScript:
    """An executable file found while scanning.

    Attributes:
        path: Full path to the file.
        name: File name, used as the entry id and program name.
        looks_like_target: Whether the file matched the script signature.
    """

    path: Path
    name: str
    looks_like_target: bool = False


@dataclass
class ScriptSignature:
    """Compiled shebang and marker patterns identifying framework scripts."""

    shebang: re.Pattern[str]
    marker: re.Pattern[str]

    @classmethod
    def from_config(cls, scan: ScanConfig) -> "ScriptSignature":
        """Compile the patterns from a :class:`~bashcompf.models.ScanConfig`.

        Raises:
            ConfigError: If either pattern is not a valid regular expression.
        """
        try:
            return cls(
                shebang=re.compile(scan.shebang_pattern),
                marker=re.compile(scan.marker_pattern),
            )
        except re.error as exc:
            raise ConfigError(f"Invalid scan pattern: {exc}") from exc


def is_executable_on_path(name: str) -> bool:
    """Return True if *name* resolves to an executable on ``PATH``."""
    return shutil.which(name) is not None


def path_dirs() -> list[str]:
    """Return the ``PATH`` entries, skipping empty ones."""
    return [d for d in os.environ.get("PATH", "").split(os.pathsep) if d]


def _matches_signature(path: Path, signature: ScriptSignature) -> bool:
    """Sniff *path*, returning False for non-scripts and unreadable files."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            if f.read(2) != "#!":
                return False
            shebang = f.readline()
            if not signature.shebang.search(shebang):
                return False
            for line in f:
                if signature.marker.search(line):
                    return True
    except OSError as exc:
        logger.debug("Can't read %s: %s, skipped", path, exc)
    return False


def list_candidate_scripts(
    dirs: Optional[Iterable[str]] = None,
    signature: Optional[ScriptSignature] = None,
) -> list[CandidateScript]:
    """List the executable files in *dirs*, flagging framework scripts.

    Files are reported per directory in sorted name order. Names that are not
    valid entry ids are left out since they could never be registered.

    Args:
        dirs: Directories to scan. Defaults to the ``PATH`` entries.
        signature: Patterns identifying framework scripts. Defaults to the
            patterns of a fresh :class:`~bashcompf.models.ScanConfig`.

    Returns:
        Candidate scripts in scan order.
    """
    if dirs is None:
        dirs = path_dirs()
    if signature is None:
        signature = ScriptSignature.from_config(ScanConfig())

    candidates: list[CandidateScript] = []
    for d in dirs:
        directory = Path(d)
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.debug("Can't list %s: %s, skipped", directory, exc)
            continue

        logger.debug("Searching %s", directory)
        for path in entries:
            try:
                if not path.is_file() or not os.access(path, os.X_OK):
                    continue
            except OSError:
                continue
            if not ID_PATTERN.match(path.name):
                continue
            candidates.append(
                CandidateScript(
                    path=path,
                    name=path.name,
                    looks_like_target=_matches_signature(path, signature),
                )
            )
    return candidates
