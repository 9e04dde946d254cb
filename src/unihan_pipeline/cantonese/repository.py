"""Jyutping romanization index used to decode Cantonese readings."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from functools import cached_property
import logging
from pathlib import Path
import re
from typing import Iterable, Mapping

from unihan_pipeline.errors import CantoneseNotFoundError, SchemaError
from unihan_pipeline.models import CantoneseSyllable

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"jyutping", "nucleus", "coda"}
TONED_SYLLABLE_RE = re.compile(r"^([a-z]+)([1-6])$")


def _parse_tone(jyutping: str, raw_tone: str | None) -> int | None:
    if raw_tone:
        return int(raw_tone)
    match = TONED_SYLLABLE_RE.match(jyutping)
    return int(match.group(2)) if match else None


def build_syllable(row: Mapping[str, str | None]) -> CantoneseSyllable:
    """Build one index record from a CSV row, deriving ``final``."""

    jyutping = (row.get("jyutping") or "").strip().lower()
    nucleus = (row.get("nucleus") or "").strip()
    coda = (row.get("coda") or "").strip()
    return CantoneseSyllable(
        jyutping=jyutping,
        initial=(row.get("initial") or "").strip(),
        nucleus=nucleus,
        coda=coda,
        tone=_parse_tone(jyutping, (row.get("tone") or "").strip()),
        final=nucleus + coda,
    )


def build_index(rows: Iterable[Mapping[str, str | None]]) -> dict[str, CantoneseSyllable]:
    """Index romanization rows by jyutping; blank jyutping rows are ignored."""

    index: dict[str, CantoneseSyllable] = {}
    for row in rows:
        syllable = build_syllable(row)
        if syllable.jyutping:
            index[syllable.jyutping] = syllable
    return index


@dataclass(frozen=True)
class JyutpingIndex:
    """Immutable jyutping lookup table with strict and lenient lookups.

    An index may list syllables with or without tone digits. A toned syllable
    missing from the table is resolved through its toneless base and carries
    the tone from its trailing digit.
    """

    syllables: Mapping[str, CantoneseSyllable]

    def find(self, jyutping: str) -> CantoneseSyllable | None:
        """Lenient lookup returning ``None`` for unknown syllables."""

        key = jyutping.strip().lower()
        syllable = self.syllables.get(key)
        if syllable is not None:
            return syllable

        match = TONED_SYLLABLE_RE.match(key)
        if not match:
            return None
        base = self.syllables.get(match.group(1))
        if base is None:
            return None
        return CantoneseSyllable(
            jyutping=key,
            initial=base.initial,
            nucleus=base.nucleus,
            coda=base.coda,
            tone=int(match.group(2)),
            final=base.final,
        )

    def lookup(self, jyutping: str) -> CantoneseSyllable:
        """Strict lookup.

        Raises:
            CantoneseNotFoundError: If the syllable is not in the index.
        """

        syllable = self.find(jyutping)
        if syllable is None:
            raise CantoneseNotFoundError(jyutping)
        return syllable

    def __contains__(self, jyutping: object) -> bool:
        return isinstance(jyutping, str) and self.find(jyutping) is not None

    def __len__(self) -> int:
        return len(self.syllables)


@dataclass(frozen=True)
class JyutpingRepository:
    """Path-scoped loader for the romanization index CSV."""

    path: Path

    @cached_property
    def index(self) -> JyutpingIndex:
        """Load and cache the jyutping index.

        Raises:
            FileNotFoundError: If the index file does not exist.
            SchemaError: If the header lacks a required column.
        """

        if not self.path.exists():
            raise FileNotFoundError(f"Jyutping index not found: {self.path}")

        with self.path.open("r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle)
            header = {name.strip() for name in reader.fieldnames or []}
            missing = REQUIRED_COLUMNS - header
            if missing:
                raise SchemaError(
                    f"{self.path}: missing jyutping index columns {sorted(missing)}"
                )
            rows = [{(key or "").strip(): value for key, value in row.items()} for row in reader]

        index = JyutpingIndex(build_index(rows))
        logger.info("Loaded %d jyutping syllables from %s", len(index), self.path)
        return index
