"""Markdown report generation for pipeline run summaries."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping, Sequence

from unihan_pipeline.codepoint import encode_codepoint
from unihan_pipeline.models import CodepointRecord, FieldSchema, UnihanDatabase


def _markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a deterministic GitHub-flavored markdown table.

    Args:
        headers: Table header labels.
        rows: Table body rows as string sequences.

    Returns:
        Markdown table text.
    """

    line_header = "| " + " | ".join(headers) + " |"
    line_sep = "| " + " | ".join("---" for _ in headers) + " |"
    body = ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join([line_header, line_sep, *body])


def collect_field_counts(records: Mapping[int, CodepointRecord]) -> dict[str, int]:
    """Count codepoints carrying each field.

    Args:
        records: Decoded codepoint records.

    Returns:
        Dictionary of field name to codepoint count.
    """

    counter: Counter[str] = Counter()
    for record in records.values():
        counter.update(record.fields.keys())
    return dict(counter)


def collect_category_counts(
    field_counts: Mapping[str, int],
    fields: Mapping[str, FieldSchema],
) -> dict[str, int]:
    """Count observed fields per schema category."""

    counter: Counter[str] = Counter()
    for name in field_counts:
        schema = fields.get(name)
        counter[schema.category.value if schema else "undeclared"] += 1
    return dict(counter)


def _character(codepoint: int) -> str:
    return f"{chr(codepoint)} ({encode_codepoint(codepoint)})"


def build_report_md(database: UnihanDatabase) -> str:
    """Build the markdown summary for one pipeline run.

    Args:
        database: Pipeline result.

    Returns:
        Full markdown content with summary tables.
    """

    field_counts = collect_field_counts(database.records)
    field_rows = [
        (
            name,
            database.fields[name].category.value if name in database.fields else "undeclared",
            str(field_counts[name]),
        )
        for name in sorted(field_counts, key=lambda item: (-field_counts[item], item))
    ]

    category_counts = collect_category_counts(field_counts, database.fields)
    category_rows = [(category, str(category_counts[category])) for category in sorted(category_counts)]

    unused_rows = [
        (name, database.fields[name].status.value)
        for name in sorted(set(database.fields) - set(field_counts))
    ]

    simplified_rows = [
        (
            str(number),
            _character(entry.Hant.radical_character),
            _character(entry.Hans.radical_character),
            _character(entry.Hans.unified_ideograph),
        )
        for number, entry in sorted(database.radicals.items())
        if entry.simplified
    ]

    sections = [
        "# Unihan Build Report",
        "",
        f"- Source files: {', '.join(database.sources) or '(none)'}",
        f"- Codepoints: {len(database.records)}",
        f"- Radicals: {len(database.radicals)}",
        "",
        "## Codepoints per field",
        _markdown_table(["field", "category", "codepoints"], field_rows),
        "",
        "## Observed fields per category",
        _markdown_table(["category", "fields"], category_rows),
        "",
        "## Declared fields absent from corpus",
        _markdown_table(["field", "status"], unused_rows),
        "",
        "## Radicals with simplified forms",
        _markdown_table(["radical", "traditional", "simplified", "simplified_ideograph"], simplified_rows),
    ]

    return "\n".join(sections) + "\n"
