"""Unit tests for the jyutping romanization index."""

from __future__ import annotations

from pathlib import Path

import pytest

from unihan_pipeline.cantonese.repository import JyutpingIndex, JyutpingRepository, build_index
from unihan_pipeline.errors import CantoneseNotFoundError, SchemaError


def _write(path: Path, text: str) -> Path:
    """Write helper for fixture files in tmp directories."""

    path.write_text(text, encoding="utf-8")
    return path


def test_repository_derives_final_and_tone(tmp_path: Path) -> None:
    """Rows should gain ``final`` = nucleus + coda and a tone from the syllable."""

    index_path = _write(
        tmp_path / "jyutping.csv",
        "jyutping,initial,nucleus,coda\n" "jat1,j,a,t\n" "sik6,s,i,k\n" "aa3,,aa,\n",
    )

    index = JyutpingRepository(index_path).index

    jat = index.lookup("jat1")
    assert (jat.initial, jat.nucleus, jat.coda, jat.final, jat.tone) == ("j", "a", "t", "at", 1)
    assert index.lookup("aa3").initial == ""
    assert index.lookup("aa3").final == "aa"
    assert len(index) == 3


def test_strict_lookup_raises_and_lenient_lookup_returns_none() -> None:
    """Strict lookup should raise on a miss while lenient lookup returns None."""

    index = JyutpingIndex(build_index([{"jyutping": "jat1", "nucleus": "a", "coda": "t"}]))

    with pytest.raises(CantoneseNotFoundError):
        index.lookup("zzz9")
    assert index.find("zzz9") is None
    assert "jat1" in index
    assert "zzz9" not in index


def test_toned_syllable_resolves_through_toneless_index() -> None:
    """A toneless index still decodes toned readings, keeping the tone digit."""

    index = JyutpingIndex(
        build_index([{"jyutping": "sik", "initial": "s", "nucleus": "i", "coda": "k"}])
    )

    syllable = index.lookup("sik6")

    assert syllable.jyutping == "sik6"
    assert syllable.tone == 6
    assert syllable.final == "ik"


def test_explicit_tone_column_is_used(tmp_path: Path) -> None:
    """An explicit tone column should take precedence over the trailing digit."""

    index_path = _write(
        tmp_path / "jyutping.csv",
        "jyutping,initial,nucleus,coda,tone\nngo5,ng,o,,5\n",
    )

    assert JyutpingRepository(index_path).index.lookup("ngo5").tone == 5


def test_repository_rejects_missing_columns_and_files(tmp_path: Path) -> None:
    """Missing required columns or a missing file should be fatal."""

    bad = _write(tmp_path / "bad.csv", "jyutping,initial\njat1,j\n")

    with pytest.raises(SchemaError):
        _ = JyutpingRepository(bad).index
    with pytest.raises(FileNotFoundError):
        _ = JyutpingRepository(tmp_path / "missing.csv").index
