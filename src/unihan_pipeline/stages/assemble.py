"""Record assembler: fold Unihan corpus lines into per-codepoint records.

Every data line carries one ``codepoint<TAB>field<TAB>value`` triple. Lines are
decoded against the field schema and folded into a mapping keyed by
codepoint; when a field recurs for a codepoint the later occurrence wins.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from unihan_pipeline.codepoint import decode_codepoint
from unihan_pipeline.decoding.context import DecodeContext
from unihan_pipeline.decoding.fields import decode_field, split_value
from unihan_pipeline.errors import CorpusError, MalformedLineError, UnihanError
from unihan_pipeline.models import CodepointRecord, RawRecord

logger = logging.getLogger(__name__)

Records = dict[int, CodepointRecord]


def split_line(line: str) -> RawRecord:
    """Split one data line into its codepoint, field name and raw value.

    Raises:
        MalformedLineError: If the line does not have exactly three
            tab-separated fields or the codepoint is malformed.
    """

    parts = [part.strip() for part in line.split("\t")]
    if len(parts) != 3:
        raise MalformedLineError(f"expected 3 tab-separated fields, found {len(parts)}")
    codepoint, field_name, raw_value = parts
    if not field_name:
        raise MalformedLineError("empty field name")
    return RawRecord(decode_codepoint(codepoint), field_name, raw_value)


def decode_record(record: RawRecord, context: DecodeContext) -> Any:
    """Split and decode the raw value of one record against its schema.

    Raises:
        UnknownFieldError: If the field is not declared in the schema.
        FieldDecodeError: If the value does not match the field's grammar.
    """

    schema = context.schema_for(record.field_name)
    value = split_value(schema, record.raw_value)
    return decode_field(record.field_name, value, context)


def fold_record(records: Records, codepoint: int, field_name: str, value: Any) -> None:
    """Set ``field_name`` on the record for ``codepoint``, creating it if new."""

    current = records.get(codepoint)
    if current is None:
        records[codepoint] = CodepointRecord(codepoint, {field_name: value})
    else:
        current.fields[field_name] = value


def parse_lines(
    lines: Iterable[str],
    context: DecodeContext,
    records: Records | None = None,
    source: str = "<lines>",
) -> Records:
    """Fold corpus lines into ``records`` (a new mapping when omitted).

    Args:
        lines: Raw corpus lines.
        context: Decoding tables and policy.
        records: Accumulating mapping to extend in place.
        source: Name used in error messages.

    Returns:
        The accumulated codepoint -> record mapping.

    Raises:
        CorpusError: On the first malformed line, unknown field or decode
            failure, carrying ``source``, line number and line content.
    """

    records = {} if records is None else records
    for line_number, line in enumerate(lines, start=1):
        if not line.strip() or line.startswith("#"):
            continue
        try:
            record = split_line(line.rstrip("\r\n"))
            value = decode_record(record, context)
        except UnihanError as exc:
            raise CorpusError(source, line_number, line.rstrip("\r\n"), str(exc)) from exc
        fold_record(records, record.codepoint, record.field_name, value)
    return records


def parse_file(path: Path, context: DecodeContext, records: Records | None = None) -> Records:
    """Fold one Unihan data file into ``records``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CorpusError: If any data line cannot be decoded.
    """

    if not path.exists():
        raise FileNotFoundError(f"Unihan data file not found: {path}")

    before = 0 if records is None else len(records)
    with path.open("r", encoding="utf-8") as handle:
        records = parse_lines(handle, context, records, source=path.name)
    logger.info("Parsed %s (%d new codepoints)", path.name, len(records) - before)
    return records


def list_unihan_files(directory: Path) -> list[Path]:
    """Return the ``*.txt`` data files of ``directory`` in processing order."""

    if not directory.is_dir():
        raise FileNotFoundError(f"Unihan data directory not found: {directory}")
    return sorted(path for path in directory.glob("*.txt") if path.is_file())


def merge_records(records: Records, partial: Records) -> Records:
    """Merge ``partial`` into ``records``; fields in ``partial`` win."""

    for codepoint, record in partial.items():
        current = records.get(codepoint)
        if current is None:
            records[codepoint] = record
        else:
            current.fields.update(record.fields)
    return records


def parse_files(
    directory: Path,
    context: DecodeContext,
    max_workers: int | None = None,
) -> tuple[Records, tuple[str, ...]]:
    """Fold every Unihan data file in ``directory``.

    Files are processed in sorted name order. With ``max_workers`` greater
    than one, files are decoded in worker processes and the partial maps are
    merged in that same order, so the last-write-wins outcome is unchanged.

    Returns:
        Tuple of ``(records, file_names)`` where ``file_names`` lists the
        processed files in order.
    """

    paths = list_unihan_files(directory)
    names = tuple(path.name for path in paths)

    if max_workers is None or max_workers <= 1 or len(paths) <= 1:
        records: Records = {}
        for path in paths:
            parse_file(path, context, records)
        return records, names

    merged: Records = {}
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        partials: Sequence[Records] = list(
            executor.map(parse_file, paths, [context] * len(paths))
        )
    for partial in partials:
        merge_records(merged, partial)
    return merged, names
