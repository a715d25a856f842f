"""Canonical Pydantic models shared across bashcompf modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ScanConfig` and :class:`GlobalConfig`.

**Result models** -- returned by every operation in :mod:`bashcompf.entries`
and rendered by the CLI:
    :class:`ResultStatus`, :class:`OperationResult`, :class:`ItemResult`
    and :class:`BatchResult`.

The fragment engine itself uses plain dataclasses
(:mod:`bashcompf.fragment.parser`) since it never crosses a serialisation
boundary.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


# --- Config ---


DEFAULT_SHEBANG_PATTERN = r"perl"
DEFAULT_MARKER_PATTERN = r"^\s*(use|require)\s+Perinci::CmdLine(|::Any|::Lite)\b"


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto",
        description="Data format used when neither --json nor --plain is given",
    )


class ScanConfig(BaseModel):
    """Patterns used by ``add-all-pc`` to recognise framework scripts.

    A script qualifies when its first line is a shebang matching
    ``shebang_pattern`` and some later line matches ``marker_pattern``. The
    defaults pick out Perl scripts built on ``Perinci::CmdLine``, which answer
    ``complete -C`` queries themselves.
    """

    shebang_pattern: str = Field(
        default=DEFAULT_SHEBANG_PATTERN,
        description="Regex searched in the shebang line",
    )
    marker_pattern: str = Field(
        default=DEFAULT_MARKER_PATTERN,
        description="Regex matched against each subsequent line",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/bash-completion-f/config.json``.

    Loaded and saved by :func:`~bashcompf.config.load_global_config` and
    :func:`~bashcompf.config.save_global_config`. ``file`` has the lowest
    precedence among explicit settings; see
    :func:`~bashcompf.config.resolve_entries_file` for the full chain.
    """

    file: Optional[str] = Field(
        default=None, description="Entries file to use instead of the default location"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)


# --- Results ---


class ResultStatus(str, enum.Enum):
    """Outcome of a single operation or batch item.

    ``UNCHANGED`` is a success that did not need to touch the file (removing
    an id that is absent, skipping a program that already has an entry).
    ``PARTIAL`` is only used on :class:`BatchResult` aggregates.
    """

    OK = "ok"
    UNCHANGED = "unchanged"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    ERROR = "error"
    PARTIAL = "partial"

    @property
    def is_success(self) -> bool:
        return self in (ResultStatus.OK, ResultStatus.UNCHANGED)


class OperationResult(BaseModel):
    """Structured outcome of one entries-file operation.

    Attributes:
        status: Overall outcome.
        message: Human-readable summary shown by the CLI.
        payload: Optional data (ids, entry listings, counts).
        written: Whether the entries file was rewritten.
    """

    status: ResultStatus = ResultStatus.OK
    message: str = "OK"
    payload: Any = None
    written: bool = False


class ItemResult(BaseModel):
    """Outcome of one item inside a batch registration."""

    item_id: str
    status: ResultStatus
    message: str = ""


class BatchResult(BaseModel):
    """Aggregate outcome of a batch registration.

    The aggregate ``status`` is ``OK`` when every item succeeded (or was
    skipped), ``ERROR`` when nothing succeeded and at least one item failed,
    and ``PARTIAL`` otherwise.
    """

    status: ResultStatus = ResultStatus.OK
    message: str = "OK"
    items: list[ItemResult] = Field(default_factory=list)
    added: list[str] = Field(default_factory=list)
    written: bool = False

    @classmethod
    def from_items(
        cls, items: list[ItemResult], added: list[str], written: bool = False
    ) -> "BatchResult":
        """Build a batch result, deriving the aggregate status from *items*."""
        failed = [i for i in items if not i.status.is_success]
        if not failed:
            status = ResultStatus.OK
        elif len(failed) == len(items):
            status = ResultStatus.ERROR
        else:
            status = ResultStatus.PARTIAL

        message = f"{len(added)} added, {len(items) - len(added) - len(failed)} skipped"
        if failed:
            message += f", {len(failed)} failed"
        return cls(
            status=status, message=message, items=items, added=added, written=written
        )
