"""Tests for bashcompf.completion.workflows -- clean and register."""

from __future__ import annotations

import logging

import pytest

from bashcompf.completion import (
    clean_dead_entries,
    make_directive,
    program_basename,
    register_programs,
)
from bashcompf.fragment import FragmentFile, insert_fragment, parse, render
from bashcompf.models import ResultStatus


def _file(**entries: str) -> FragmentFile:
    f = parse("")
    for fragment_id, payload in entries.items():
        f = insert_fragment(f, fragment_id, payload)
    return f


class TestHelpers:
    def test_make_directive_plain(self) -> None:
        assert make_directive("foo") == "complete -C foo foo"

    def test_make_directive_quotes(self) -> None:
        assert make_directive("my prog") == "complete -C 'my prog' 'my prog'"

    @pytest.mark.parametrize(
        "value, expected", [("foo", "foo"), ("/usr/bin/foo", "foo"), ("bin/foo", "foo")]
    )
    def test_program_basename(self, value: str, expected: str) -> None:
        assert program_basename(value) == expected


class TestCleanDeadEntries:
    def test_removes_entries_not_on_path(self) -> None:
        f = _file(foo="complete -C foo foo", bar="complete -C bar bar")
        cleaned, removed = clean_dead_entries(f, lambda name: name == "bar")
        assert removed == ["foo"]
        assert cleaned.ids() == ["bar"]

    def test_keeps_entry_if_any_name_found(self) -> None:
        f = _file(git="complete -F _git git gitk")
        cleaned, removed = clean_dead_entries(f, lambda name: name == "gitk")
        assert removed == []
        assert cleaned.ids() == ["git"]

    def test_nothing_found_removes_everything(self) -> None:
        f = _file(a="complete -C a a", b="complete -C b b")
        cleaned, removed = clean_dead_entries(f, lambda name: False)
        assert removed == ["a", "b"]
        assert render(cleaned) == ""

    def test_unparsable_entry_kept(self, caplog: pytest.LogCaptureFixture) -> None:
        f = _file(junk="echo not a completion", broken="complete -C 'x")
        with caplog.at_level(logging.WARNING, logger="bashcompf"):
            cleaned, removed = clean_dead_entries(f, lambda name: False)
        assert removed == []
        assert cleaned.ids() == ["junk", "broken"]
        assert "entry 'junk'" in caplog.text
        assert "entry 'broken'" in caplog.text

    def test_entry_without_names_kept(self) -> None:
        f = _file(p="complete -p")
        cleaned, removed = clean_dead_entries(f, lambda name: False)
        assert removed == []
        assert cleaned.ids() == ["p"]

    def test_predicate_sees_extracted_names(self) -> None:
        seen: list[str] = []
        f = _file(foo="complete -o nospace -C /opt/foo foo")

        def on_path(name: str) -> bool:
            seen.append(name)
            return True

        clean_dead_entries(f, on_path)
        assert seen == ["foo"]

    def test_input_not_mutated(self) -> None:
        f = _file(foo="complete -C foo foo")
        clean_dead_entries(f, lambda name: False)
        assert f.ids() == ["foo"]


class TestRegisterPrograms:
    def test_adds_new_programs(self) -> None:
        f, added, results = register_programs(parse(""), ["foo", "bar"])
        assert added == ["foo", "bar"]
        assert f.ids() == ["foo", "bar"]
        assert f.get("foo").payload == "complete -C foo foo"
        assert [r.status for r in results] == [ResultStatus.OK, ResultStatus.OK]

    def test_duplicates_skipped(self) -> None:
        start = _file(a="complete -C a a")
        f, added, results = register_programs(start, ["a", "a", "b"])
        assert added == ["b"]
        assert f.ids() == ["a", "b"]
        assert [(r.item_id, r.status) for r in results] == [
            ("a", ResultStatus.UNCHANGED),
            ("a", ResultStatus.UNCHANGED),
            ("b", ResultStatus.OK),
        ]

    def test_repeated_candidate_in_batch_added_once(self) -> None:
        f, added, results = register_programs(parse(""), ["x", "x"])
        assert added == ["x"]
        assert results[1].status == ResultStatus.UNCHANGED

    def test_name_covered_by_other_entry_skipped(self) -> None:
        start = _file(git="complete -F _git git gitk")
        f, added, _ = register_programs(start, ["gitk"])
        assert added == []
        assert f.ids() == ["git"]

    def test_strips_directories(self) -> None:
        f, added, _ = register_programs(parse(""), ["/usr/local/bin/foo"])
        assert added == ["foo"]
        assert f.get("foo").payload == "complete -C foo foo"

    def test_repeated_invalid_name_fails_each_time(self) -> None:
        f, added, results = register_programs(parse(""), ["bad-name", "bad-name"])
        assert added == []
        assert f.ids() == []
        assert [r.status for r in results] == [ResultStatus.INVALID, ResultStatus.INVALID]

    def test_repeated_id_held_by_unrelated_entry(self) -> None:
        # The id "foo" is taken by an entry that completes another program.
        start = _file(foo="complete -C other other")
        f, added, results = register_programs(start, ["foo", "foo"])
        assert added == []
        assert f.ids() == ["foo"]
        assert [r.status for r in results] == [
            ResultStatus.DUPLICATE,
            ResultStatus.DUPLICATE,
        ]

    def test_invalid_name_does_not_abort_batch(self) -> None:
        f, added, results = register_programs(parse(""), ["bad-name", "good"])
        assert added == ["good"]
        assert results[0].status == ResultStatus.INVALID
        assert results[1].status == ResultStatus.OK

    def test_id_taken_by_unrelated_entry_is_duplicate(self) -> None:
        start = _file(foo="echo custom setup")
        f, added, results = register_programs(start, ["foo"])
        assert added == []
        assert results[0].status == ResultStatus.DUPLICATE
        assert f.get("foo").payload == "echo custom setup"

    def test_explicit_existing_names(self) -> None:
        f, added, results = register_programs(parse(""), ["a", "b"], existing_names={"a"})
        assert added == ["b"]
        assert results[0].status == ResultStatus.UNCHANGED

    def test_existing_names_not_mutated(self) -> None:
        names = {"a"}
        register_programs(parse(""), ["b"], existing_names=names)
        assert names == {"a"}
