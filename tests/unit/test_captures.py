"""Unit tests for named-capture typing."""

from __future__ import annotations

from unihan_pipeline.cantonese.repository import JyutpingIndex, build_index
from unihan_pipeline.decoding.captures import normalize_captures

INDEX = JyutpingIndex(
    build_index(
        [
            {"jyutping": "maang4", "initial": "m", "nucleus": "aa", "coda": "ng"},
            {"jyutping": "mang4", "initial": "m", "nucleus": "a", "coda": "ng"},
        ]
    )
)


def test_flag_captures_become_booleans() -> None:
    """Asterisk captures should become booleans even when absent."""

    assert normalize_captures({"virtual": "0"}, INDEX) == {"virtual": False}
    assert normalize_captures({"virtual": "1"}, INDEX) == {"virtual": True}
    assert normalize_captures({"frequent": ""}, INDEX) == {"frequent": False}
    assert normalize_captures({"frequent": "*"}, INDEX) == {"frequent": True}
    assert normalize_captures({"simplified_radical": ""}, INDEX) == {"simplified_radical": False}
    assert normalize_captures({"simplified_radical": "'"}, INDEX) == {"simplified_radical": True}
    assert normalize_captures({"frequent": None}, INDEX) == {"frequent": False}


def test_virtual_digits_other_than_zero_or_one_stay_numeric() -> None:
    """Only 0 and 1 virtual digits should become booleans."""

    assert normalize_captures({"virtual": "5"}, INDEX) == {"virtual": 5}


def test_hex_codepoint_is_decoded_under_codepoint_key() -> None:
    """Hex codepoint captures should be decoded and renamed to codepoint."""

    assert normalize_captures({"hex_codepoint": "U+3105"}, INDEX) == {"codepoint": 0x3105}


def test_jyutpings_keep_unknown_segments_as_text() -> None:
    """Unknown embedded readings are kept raw instead of failing the value."""

    result = normalize_captures({"jyutpings": "maang4,[mang4],mang4"}, INDEX)

    readings = result["jyutpings"]
    assert readings[0].jyutping == "maang4"
    assert readings[1] == "[mang4]"
    assert readings[2].final == "ang"


def test_other_captures_are_int_if_possible_and_missing_ones_dropped() -> None:
    """Numeric captures should become ints and unmatched captures should be omitted."""

    result = normalize_captures(
        {"page": "0019", "strokes": "-1", "letter": "a", "prime": "", "subindex": None},
        INDEX,
    )

    assert result == {"page": 19, "strokes": -1, "letter": "a"}
