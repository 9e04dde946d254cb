"""Data models shared across the Unihan decoding pipeline.

Schema, radical and romanization records are immutable once built so the
lookup tables can be handed to every decoding step (and to worker processes)
without copying. Codepoint records are the one mutable shape: they accumulate
fields while the corpus is folded and are treated as read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Any


class FieldStatus(Enum):
    """Status tag declared for a field in the schema document."""

    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    PROVISIONAL = "provisional"
    DEPRECATED = "deprecated"
    OBSOLETE = "obsolete"
    NORMATIVE = "normative"
    INFORMATIVE = "informative"


class FieldCategory(Enum):
    """Category tag declared for a field in the schema document."""

    DICTIONARY_INDICES = "dictionary_indices"
    DICTIONARY_LIKE_DATA = "dictionary-like_data"
    IRG_SOURCES = "irg_sources"
    NUMERIC_VALUES = "numeric_values"
    OTHER_MAPPINGS = "other_mappings"
    RADICAL_STROKE_COUNTS = "radical-stroke_counts"
    READINGS = "readings"
    VARIANTS = "variants"


@dataclass(frozen=True)
class FieldSchema:
    """Normalized schema record for one Unihan field identifier.

    ``delimiter`` is ``None`` when the field value is never split.
    ``syntax`` holds the compiled validating pattern when the schema declares
    one; decoding does not enforce it (see :mod:`unihan_pipeline.validation`).
    Attributes the loader does not interpret are kept verbatim in
    ``attributes``.
    """

    name: str
    status: FieldStatus
    category: FieldCategory
    delimiter: str | None = None
    syntax: re.Pattern[str] | None = None
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class RawRecord:
    """One ``codepoint<TAB>field<TAB>value`` triple extracted from a corpus line."""

    codepoint: int
    field_name: str
    raw_value: str


@dataclass
class CodepointRecord:
    """Decoded fields collected for one codepoint across all corpus files."""

    codepoint: int
    fields: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, field_name: str) -> Any:
        return self.fields[field_name]

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.fields

    def get(self, field_name: str, default: Any = None) -> Any:
        """Return a decoded field value, or ``default`` when absent."""

        return self.fields.get(field_name, default)


@dataclass(frozen=True)
class RadicalVariant:
    """One script form of a CJK radical."""

    radical_number: int
    radical_character: int
    unified_ideograph: int


@dataclass(frozen=True)
class RadicalEntry:
    """Simplified (``Hans``) and traditional (``Hant``) forms of one radical.

    Radicals without a distinct simplified form carry two identical variants.
    """

    Hans: RadicalVariant
    Hant: RadicalVariant

    @property
    def radical_number(self) -> int:
        return self.Hant.radical_number

    @property
    def simplified(self) -> bool:
        """Whether the radical has a distinct simplified-script form."""

        return self.Hans != self.Hant


@dataclass(frozen=True)
class CantoneseSyllable:
    """Decomposed jyutping syllable from the romanization index.

    ``final`` is derived from ``nucleus`` + ``coda`` when the index is loaded.
    """

    jyutping: str
    initial: str
    nucleus: str
    coda: str
    tone: int | None
    final: str


@dataclass(frozen=True)
class UnihanDatabase:
    """Result bundle returned by :func:`unihan_pipeline.pipeline.run_pipeline`.

    Attributes:
        records: Codepoint -> decoded record.
        radicals: Radical number -> radical entry.
        fields: Field schema used while decoding.
        sources: Unihan file names in processing order.
    """

    records: dict[int, CodepointRecord]
    radicals: dict[int, RadicalEntry]
    fields: dict[str, FieldSchema] = field(default_factory=dict)
    sources: tuple[str, ...] = field(default_factory=tuple)
