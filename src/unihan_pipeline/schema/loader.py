"""Loader for the Unihan field schema document.

The schema document is JSON shaped as ``{"records": [{"fields": {...}}]}``
where each ``fields`` mapping holds the field ``name`` plus raw attributes
(``Status``, ``category``, ``delimiter``, ``syntax`` and descriptive extras).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
import json
import logging
from pathlib import Path
import re
from typing import Any, Iterable, Mapping

from unihan_pipeline.errors import SchemaError
from unihan_pipeline.models import FieldCategory, FieldSchema, FieldStatus

logger = logging.getLogger(__name__)

DELIMITER_ALIASES: dict[str, str | None] = {"space": " ", "N/A": None}


def _normalize_delimiter(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(f"delimiter must be a string, got {value!r}")
    if value in DELIMITER_ALIASES:
        return DELIMITER_ALIASES[value]
    return value


def _normalize_status(value: Any) -> FieldStatus:
    try:
        return FieldStatus(str(value).lower())
    except ValueError as exc:
        raise SchemaError(f"unknown field status {value!r}") from exc


def _normalize_category(value: Any) -> FieldCategory:
    tag = str(value).lower().replace(" ", "_")
    try:
        return FieldCategory(tag)
    except ValueError as exc:
        raise SchemaError(f"unknown field category {value!r}") from exc


def _compile_syntax(name: str, value: Any) -> re.Pattern[str] | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        raise SchemaError(f"{name}: invalid syntax pattern {value!r}: {exc}") from exc


def parse_field_record(fields: Mapping[str, Any]) -> FieldSchema:
    """Normalize one raw schema record into a :class:`FieldSchema`.

    Args:
        fields: Raw attribute mapping including ``name``.

    Returns:
        Normalized schema record.

    Raises:
        SchemaError: If the record lacks a name, status or category, or if an
            attribute cannot be normalized.
    """

    attributes = dict(fields)
    name = attributes.pop("name", None)
    if not isinstance(name, str) or not name:
        raise SchemaError(f"schema record without a name: {dict(fields)!r}")
    if "Status" not in attributes:
        raise SchemaError(f"{name}: missing Status attribute")
    if "category" not in attributes:
        raise SchemaError(f"{name}: missing category attribute")

    status = _normalize_status(attributes.pop("Status"))
    category = _normalize_category(attributes.pop("category"))
    delimiter = _normalize_delimiter(attributes.pop("delimiter", None))
    syntax = _compile_syntax(name, attributes.pop("syntax", None))

    return FieldSchema(
        name=name,
        status=status,
        category=category,
        delimiter=delimiter,
        syntax=syntax,
        attributes=attributes,
    )


def parse_schema_document(document: Any) -> dict[str, FieldSchema]:
    """Build the field-name -> schema mapping from a decoded JSON document.

    Raises:
        SchemaError: If the document shape is wrong or any record is malformed.
    """

    if not isinstance(document, Mapping) or not isinstance(document.get("records"), list):
        raise SchemaError("schema document must be an object with a 'records' list")

    schema: dict[str, FieldSchema] = {}
    for index, record in enumerate(document["records"]):
        if not isinstance(record, Mapping) or not isinstance(record.get("fields"), Mapping):
            raise SchemaError(f"schema record {index} has no 'fields' mapping")
        field_schema = parse_field_record(record["fields"])
        schema[field_schema.name] = field_schema
    return schema


def build_schema(records: Iterable[FieldSchema]) -> dict[str, FieldSchema]:
    """Index already-built schema records by field name."""

    return {record.name: record for record in records}


@dataclass(frozen=True)
class SchemaRepository:
    """Path-scoped, read-once view of the field schema document."""

    path: Path

    @cached_property
    def fields(self) -> dict[str, FieldSchema]:
        """Load and cache the normalized schema.

        Raises:
            FileNotFoundError: If the schema file does not exist.
            SchemaError: If the document is malformed.
        """

        if not self.path.exists():
            raise FileNotFoundError(f"Unihan field schema not found: {self.path}")

        with self.path.open("r", encoding="utf-8") as handle:
            try:
                document = json.load(handle)
            except json.JSONDecodeError as exc:
                raise SchemaError(f"{self.path}: invalid JSON: {exc}") from exc

        schema = parse_schema_document(document)
        logger.info("Loaded %d field definitions from %s", len(schema), self.path)
        return schema
