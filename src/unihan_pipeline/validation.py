"""Optional strict validation of raw corpus values against schema patterns."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from unihan_pipeline.decoding.fields import split_value
from unihan_pipeline.errors import UnihanError, ValidationError
from unihan_pipeline.models import FieldSchema
from unihan_pipeline.stages.assemble import list_unihan_files, split_line

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 25


def check_lines(
    lines: Iterable[str],
    fields: Mapping[str, FieldSchema],
    source: str = "<lines>",
) -> list[str]:
    """Collect syntax violations for corpus lines.

    Each delimited item is matched in full against the field's compiled
    ``syntax`` pattern; fields without a pattern are not checked. Lines that
    cannot be split, or that name undeclared fields, are reported too.

    Returns:
        Human-readable problem descriptions in corpus order.
    """

    errors: list[str] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip() or line.startswith("#"):
            continue
        try:
            record = split_line(line.rstrip("\r\n"))
        except UnihanError as exc:
            errors.append(f"{source}:{line_number}: {exc}")
            continue

        schema = fields.get(record.field_name)
        if schema is None:
            errors.append(f"{source}:{line_number}: undeclared field {record.field_name}")
            continue
        if schema.syntax is None:
            continue

        value = split_value(schema, record.raw_value)
        items = value if isinstance(value, list) else [value]
        for item in items:
            if not schema.syntax.fullmatch(item):
                errors.append(
                    f"{source}:{line_number}: {record.field_name} value {item!r} "
                    f"does not match {schema.syntax.pattern!r}"
                )
    return errors


def raise_for_errors(errors: Sequence[str]) -> None:
    """Raise :class:`ValidationError` with a bounded preview when ``errors`` is non-empty."""

    if not errors:
        return
    preview = "\n".join(f"- {item}" for item in errors[:PREVIEW_LIMIT])
    rest = len(errors) - min(PREVIEW_LIMIT, len(errors))
    more = f"\n- ... and {rest} more" if rest > 0 else ""
    raise ValidationError(f"Syntax validation failed with {len(errors)} errors:\n{preview}{more}")


def validate_corpus(directory: Path, fields: Mapping[str, FieldSchema]) -> None:
    """Validate every Unihan data file in ``directory``.

    Raises:
        ValidationError: If any value violates its field's syntax pattern.
    """

    errors: list[str] = []
    for path in list_unihan_files(directory):
        with path.open("r", encoding="utf-8") as handle:
            errors.extend(check_lines(handle, fields, source=path.name))
    logger.info("Syntax validation found %d problems", len(errors))
    raise_for_errors(errors)
