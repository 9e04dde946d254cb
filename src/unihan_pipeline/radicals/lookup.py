"""Lookup helpers over a built radical table."""

from __future__ import annotations

from typing import Callable, Mapping

from unihan_pipeline.models import RadicalEntry, RadicalVariant

RADICAL_KEYS = ("unified_ideograph", "radical_character", "simplified", "all")


def radical(
    table: Mapping[int, RadicalEntry],
    index: int,
    key: str = "unified_ideograph",
    script: str = "Hant",
) -> int | bool | RadicalEntry:
    """Return one attribute of radical ``index``.

    Args:
        table: Radical table from :func:`~unihan_pipeline.radicals.parser.parse_radical_lines`.
        index: Radical number in ``1..max(table)``.
        key: ``unified_ideograph`` (default) or ``radical_character`` for a
            codepoint of the chosen ``script`` variant, ``simplified`` for
            whether the radical has a distinct simplified form, ``all`` for
            the full entry.
        script: ``Hant`` (default) or ``Hans``.

    Raises:
        ValueError: If ``index`` is out of range or ``key``/``script`` is unknown.
    """

    if not isinstance(index, int) or isinstance(index, bool) or index not in table:
        upper = max(table) if table else 0
        raise ValueError(f"Invalid radical number {index!r}. Valid numbers are in the range 1..{upper}")
    if key not in RADICAL_KEYS:
        raise ValueError(f"Invalid attribute {key!r}. Valid attributes are {', '.join(RADICAL_KEYS)}")
    if script not in ("Hans", "Hant"):
        raise ValueError(f"Invalid script {script!r}. Valid scripts are Hans, Hant")

    entry = table[index]
    if key == "all":
        return entry
    if key == "simplified":
        return entry.simplified
    variant: RadicalVariant = getattr(entry, script)
    return getattr(variant, key)


def filter_radicals(
    table: Mapping[int, RadicalEntry],
    predicate: Callable[[RadicalEntry], object],
) -> dict[int, RadicalEntry]:
    """Return the entries for which ``predicate`` is truthy."""

    return {number: entry for number, entry in table.items() if predicate(entry)}


def reject_radicals(
    table: Mapping[int, RadicalEntry],
    predicate: Callable[[RadicalEntry], object],
) -> dict[int, RadicalEntry]:
    """Return the entries for which ``predicate`` is falsy."""

    return {number: entry for number, entry in table.items() if not predicate(entry)}
