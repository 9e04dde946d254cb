"""Unit tests for the CJK radical table builder and lookup helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from unihan_pipeline.errors import MalformedLineError
from unihan_pipeline.radicals.lookup import filter_radicals, radical, reject_radicals
from unihan_pipeline.radicals.parser import RadicalRepository, parse_radical_lines

RADICAL_LINES = [
    "# CJKRadicals.txt",
    "",
    "1; 2F00; 4E00",
    "2; 2F01; 4E28",
    "90; 2F5A; 723F",
    "90'; 2E95; 4E2C",
    "120; 2F77; 7CF8",
    "120'; 2EC0; 7E9F",
    "182''; 2EE5; 98CE",
]


def test_explicit_simplified_entry_overrides_only_its_script() -> None:
    """The first line seeds both variants; the marked line replaces Hans only."""

    table = parse_radical_lines(["1;2F00;4E00", "1';2F9F;4E00"])

    entry = table[1]
    assert entry.Hant.radical_character == 0x2F00
    assert entry.Hans.radical_character == 0x2F9F
    assert entry.Hans.unified_ideograph == entry.Hant.unified_ideograph == 0x4E00


def test_unmarked_radicals_have_identical_variants() -> None:
    """An unmarked radical should use one variant for both scripts."""

    table = parse_radical_lines(RADICAL_LINES)

    assert table[1].Hans == table[1].Hant
    assert table[2].simplified is False
    assert table[90].simplified is True
    assert table[90].Hant.unified_ideograph == 0x723F
    assert table[90].Hans.unified_ideograph == 0x4E2C
    assert table[90].radical_number == 90


def test_lines_with_multiple_marks_are_skipped() -> None:
    """Lines with two or more marks should be skipped."""

    table = parse_radical_lines(RADICAL_LINES)

    assert 182 not in table
    assert sorted(table) == [1, 2, 90, 120]


def test_traditional_line_after_simplified_seed_replaces_hant() -> None:
    table = parse_radical_lines(["5'; 2E84; 4E5A", "5; 2F04; 4E59"])

    assert table[5].Hans.radical_character == 0x2E84
    assert table[5].Hant.radical_character == 0x2F04


def test_malformed_radical_line_is_fatal() -> None:
    """A malformed radical line should raise."""

    with pytest.raises(MalformedLineError):
        parse_radical_lines(["1; 2F00"])


def test_repository_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "cjk_radicals.txt"
    path.write_text("\n".join(RADICAL_LINES) + "\n", encoding="utf-8")

    assert RadicalRepository(path).radicals[120].Hans.radical_character == 0x2EC0
    with pytest.raises(FileNotFoundError):
        _ = RadicalRepository(tmp_path / "missing.txt").radicals


def test_radical_lookup_keys() -> None:
    """Lookups should return the requested attribute for the chosen script."""

    table = parse_radical_lines(RADICAL_LINES)

    assert radical(table, 90) == 0x723F
    assert radical(table, 90, "radical_character") == 0x2F5A
    assert radical(table, 90, "unified_ideograph", script="Hans") == 0x4E2C
    assert radical(table, 90, "simplified") is True
    assert radical(table, 1, "all") is table[1]


@pytest.mark.parametrize(
    ("index", "key"),
    [(0, "unified_ideograph"), (999, "unified_ideograph"), ("1", "all"), (1, "stroke_count")],
)
def test_radical_lookup_rejects_invalid_arguments(index: object, key: str) -> None:
    """Out-of-range indexes and unknown keys should be rejected."""

    table = parse_radical_lines(RADICAL_LINES)

    with pytest.raises(ValueError):
        radical(table, index, key)


def test_filter_and_reject_partition_the_table() -> None:
    """Filter and reject should split the table into complementary parts."""

    table = parse_radical_lines(RADICAL_LINES)

    simplified = filter_radicals(table, lambda entry: entry.simplified)
    rest = reject_radicals(table, lambda entry: entry.simplified)

    assert sorted(simplified) == [90, 120]
    assert sorted(rest) == [1, 2]
    assert len(filter_radicals(table, lambda entry: entry.radical_number < 5)) == 2
