"""Integration test running the full pipeline on a miniature data directory."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from unihan_pipeline.cli import main
from unihan_pipeline.errors import CorpusError, ValidationError
from unihan_pipeline.io.store import load_database
from unihan_pipeline.pipeline import run_pipeline

FIELDS = [
    {"name": "kCantonese", "Status": "Informative", "category": "Readings", "delimiter": "space",
     "syntax": "[a-z]{1,6}[1-6]"},
    {"name": "kDefinition", "Status": "Informative", "category": "Readings", "delimiter": "N/A"},
    {"name": "kMandarin", "Status": "Informative", "category": "Readings", "delimiter": "space"},
    {"name": "kRSUnicode", "Status": "Normative", "category": "Radical-Stroke Counts",
     "delimiter": "space", "syntax": "[1-9][0-9]{0,2}'{0,3}\\.-?[0-9]{1,2}"},
    {"name": "kSemanticVariant", "Status": "Informative", "category": "Variants", "delimiter": "space"},
    {"name": "kStrange", "Status": "Provisional", "category": "Dictionary-like Data", "delimiter": "space"},
    {"name": "kTotalStrokes", "Status": "Informative", "category": "Dictionary-like Data",
     "delimiter": "space", "syntax": "[1-9][0-9]{0,2}"},
    {"name": "kIRG_GSource", "Status": "Normative", "category": "IRG Sources", "delimiter": "N/A"},
]

READINGS = "\n".join(
    [
        "# Unihan_Readings.txt",
        "U+4E00\tkCantonese\tjat1",
        "U+4E00\tkDefinition\tone; a, an; alone",
        "U+4E00\tkMandarin\tyī",
        "U+5B66\tkSemanticVariant\tU+5B78",
        "U+3105\tkStrange\tA",
        "U+4E2A\tkStrange\tB:U+3105",
    ]
)

COUNTS = "\n".join(
    [
        "# Unihan_RadicalStrokeCounts.txt",
        "",
        "U+4E00\tkRSUnicode\t1.0",
        "U+4E00\tkTotalStrokes\t1",
        "U+5B66\tkTotalStrokes\t8 16",
        "U+4E00\tkIRG_GSource\tG0-523B",
    ]
)


def _build_data_dir(root: Path, counts: str = COUNTS) -> Path:
    (root / "unihan").mkdir(parents=True)
    (root / "cantonese").mkdir()
    (root / "unihan" / "Unihan_Readings.txt").write_text(READINGS + "\n", encoding="utf-8")
    (root / "unihan" / "Unihan_RadicalStrokeCounts.txt").write_text(counts + "\n", encoding="utf-8")
    (root / "unihan_fields.json").write_text(
        json.dumps({"records": [{"fields": item} for item in FIELDS]}), encoding="utf-8"
    )
    (root / "cjk_radicals.txt").write_text(
        "# CJK radicals\n1;2F00;4E00\n1';2F9F;4E00\n2; 2F01; 4E28\n", encoding="utf-8"
    )
    (root / "cantonese" / "jyutping.csv").write_text(
        "jyutping,initial,nucleus,coda\njat1,j,a,t\n", encoding="utf-8"
    )
    return root


def test_pipeline_decodes_corpus_and_radicals(tmp_path: Path) -> None:
    """All inputs should combine into one codepoint-indexed database."""

    database = run_pipeline(_build_data_dir(tmp_path / "data"), strict=True)

    one = database.records[0x4E00]
    assert one["kTotalStrokes"] == {"Hans": 1, "Hant": 1}
    assert one["kCantonese"].final == "at"
    assert one["kMandarin"]["numbered"] == "yi1"
    assert one["kRSUnicode"] == {"radical": 1, "simplified_radical": False, "strokes": 0}
    assert one["kIRG_GSource"] == {"source": "G0", "mapping": "523B"}
    assert one["kDefinition"] == "one; a, an; alone"

    assert database.records[0x5B66]["kTotalStrokes"] == {"Hans": 8, "Hant": 16}
    assert database.records[0x5B66]["kSemanticVariant"] == {"codepoint": 0x5B78}
    assert database.records[0x4E2A]["kStrange"] == {"category": "bopomofo", "codepoint": 0x3105}
    assert database.records[0x3105]["kStrange"] == {"category": "asymmetric"}

    assert database.radicals[1].Hant.radical_character == 0x2F00
    assert database.radicals[1].Hans.radical_character == 0x2F9F
    assert database.radicals[2].Hans == database.radicals[2].Hant
    assert database.sources == ("Unihan_RadicalStrokeCounts.txt", "Unihan_Readings.txt")


def test_pipeline_keeps_singleton_lists_on_request(tmp_path: Path) -> None:
    """Disabling unwrapping should keep one-element lists end to end."""

    database = run_pipeline(_build_data_dir(tmp_path / "data"), unwrap_singletons=False)

    assert database.records[0x4E00]["kRSUnicode"] == [
        {"radical": 1, "simplified_radical": False, "strokes": 0}
    ]
    assert database.records[0x4E00]["kTotalStrokes"] == {"Hans": 1, "Hant": 1}


def test_pipeline_aborts_on_malformed_corpus(tmp_path: Path) -> None:
    """A malformed value should abort the build in both modes."""

    data_dir = _build_data_dir(tmp_path / "data", counts=COUNTS + "\nU+4E01\tkRSUnicode\tbroken")

    with pytest.raises(CorpusError, match="Unihan_RadicalStrokeCounts.txt"):
        run_pipeline(data_dir)
    with pytest.raises(ValidationError):
        run_pipeline(data_dir, strict=True)


def test_cli_writes_database_and_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """The CLI should write the database and the markdown report."""

    data_dir = _build_data_dir(tmp_path / "data")
    output = tmp_path / "out" / "unihan.pickle"

    exit_code = main(["--data-dir", str(data_dir), "--output", str(output), "--log-level", "WARNING"])

    assert exit_code == 0
    assert load_database(output).records[0x4E00]["kTotalStrokes"] == {"Hans": 1, "Hant": 1}
    assert "# Unihan Build Report" in (output.parent / "report.md").read_text(encoding="utf-8")
    assert "Wrote 4 codepoints" in capsys.readouterr().out


def test_cli_reports_missing_inputs(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--data-dir", str(tmp_path), "--output", str(tmp_path / "out.pickle")])
