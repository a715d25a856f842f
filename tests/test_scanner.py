"""Tests for bashcompf.scanner -- PATH lookups and framework script detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from bashcompf.exceptions import ConfigError
from bashcompf.models import ScanConfig
from bashcompf.scanner import (
    ScriptSignature,
    is_executable_on_path,
    list_candidate_scripts,
    path_dirs,
)


class TestIsExecutableOnPath:
    def test_found(self, bin_dir: Path, make_executable) -> None:
        make_executable(bin_dir, "foo")
        assert is_executable_on_path("foo") is True

    def test_missing(self, bin_dir: Path) -> None:
        assert is_executable_on_path("definitely_not_here") is False

    def test_not_executable(self, bin_dir: Path) -> None:
        (bin_dir / "plain").write_text("data\n")
        assert is_executable_on_path("plain") is False


class TestPathDirs:
    def test_skips_empty_entries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", "/a::/b:")
        assert path_dirs() == ["/a", "/b"]

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PATH", raising=False)
        assert path_dirs() == []


class TestScriptSignature:
    def test_defaults_compile(self) -> None:
        sig = ScriptSignature.from_config(ScanConfig())
        assert sig.shebang.search("/usr/bin/perl")
        assert sig.marker.search("use Perinci::CmdLine::Lite;")
        assert not sig.marker.search("use Perinci::CmdLineX;")

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigError, match="Invalid scan pattern"):
            ScriptSignature.from_config(ScanConfig(marker_pattern="("))


class TestListCandidateScripts:
    def test_flags_framework_scripts(
        self, tmp_path: Path, make_executable, perl_cmdline_script: str
    ) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "pcscript", perl_cmdline_script)
        make_executable(bin_dir, "shscript", "#!/bin/sh\necho hi\n")
        make_executable(bin_dir, "plainperl", "#!/usr/bin/perl\nprint 1;\n")

        found = {c.name: c.looks_like_target for c in list_candidate_scripts([str(bin_dir)])}
        assert found == {"pcscript": True, "shscript": False, "plainperl": False}

    def test_sorted_per_directory(self, tmp_path: Path, make_executable) -> None:
        d1, d2 = tmp_path / "d1", tmp_path / "d2"
        make_executable(d1, "zeta")
        make_executable(d1, "alpha")
        make_executable(d2, "beta")
        names = [c.name for c in list_candidate_scripts([str(d1), str(d2)])]
        assert names == ["alpha", "zeta", "beta"]

    def test_skips_non_executables_and_dirs(self, tmp_path: Path, make_executable) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "tool")
        (bin_dir / "readme").write_text("#!/usr/bin/perl\n")
        (bin_dir / "subdir").mkdir()
        assert [c.name for c in list_candidate_scripts([str(bin_dir)])] == ["tool"]

    def test_skips_names_that_are_not_ids(self, tmp_path: Path, make_executable) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "git-foo")
        make_executable(bin_dir, "git_foo")
        assert [c.name for c in list_candidate_scripts([str(bin_dir)])] == ["git_foo"]

    def test_missing_directory_skipped(self, tmp_path: Path, make_executable) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "tool")
        found = list_candidate_scripts([str(tmp_path / "nope"), str(bin_dir)])
        assert [c.name for c in found] == ["tool"]

    def test_marker_must_follow_shebang(self, tmp_path: Path, make_executable) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "tool", "use Perinci::CmdLine;\n#!/usr/bin/perl\n")
        assert list_candidate_scripts([str(bin_dir)])[0].looks_like_target is False

    def test_custom_signature(self, tmp_path: Path, make_executable) -> None:
        bin_dir = tmp_path / "bin"
        make_executable(bin_dir, "pyclick", "#!/usr/bin/env python3\nimport click\n")
        sig = ScriptSignature.from_config(
            ScanConfig(shebang_pattern="python", marker_pattern=r"^import click\b")
        )
        assert list_candidate_scripts([str(bin_dir)], sig)[0].looks_like_target is True

    def test_defaults_to_path(self, bin_dir: Path, make_executable) -> None:
        make_executable(bin_dir, "tool")
        assert [c.name for c in list_candidate_scripts()] == ["tool"]
