"""Parser for the CJK radical definition file.

Each data line is ``number[']; radical-hex; ideograph-hex``. A single trailing
apostrophe on the number marks the simplified-script (``Hans``) form; an
unmarked number is the traditional (``Hant``) form.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
import logging
from pathlib import Path
import re
from typing import Iterable

from unihan_pipeline.errors import MalformedLineError
from unihan_pipeline.models import RadicalEntry, RadicalVariant

logger = logging.getLogger(__name__)

RADICAL_LINE_RE = re.compile(
    r"^(?P<number>\d+)(?P<marks>'*)\s*;\s*(?P<radical>[0-9A-Fa-f]{4,6})\s*;\s*(?P<ideograph>[0-9A-Fa-f]{4,6})\s*$"
)


def parse_radical_lines(lines: Iterable[str]) -> dict[int, RadicalEntry]:
    """Build the radical table from raw definition lines.

    The first line seen for a radical number seeds both script variants. Any
    later line for the same number overwrites only the variant it marks, so
    an explicit simplified entry never disturbs the traditional one.

    Args:
        lines: Raw lines; ``#`` comments and blank lines are skipped.

    Returns:
        Mapping from radical number to its entry.

    Raises:
        MalformedLineError: If a data line does not have the expected shape.
    """

    table: dict[int, RadicalEntry] = {}
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue

        match = RADICAL_LINE_RE.match(text)
        if not match:
            raise MalformedLineError(f"line {line_number}: invalid radical definition {text!r}")

        marks = match.group("marks")
        if len(marks) > 1:
            logger.debug("Skipping non-Chinese radical form on line %d: %r", line_number, text)
            continue

        number = int(match.group("number"))
        variant = RadicalVariant(
            radical_number=number,
            radical_character=int(match.group("radical"), 16),
            unified_ideograph=int(match.group("ideograph"), 16),
        )

        current = table.get(number)
        if current is None:
            table[number] = RadicalEntry(Hans=variant, Hant=variant)
        elif marks:
            table[number] = RadicalEntry(Hans=variant, Hant=current.Hant)
        else:
            table[number] = RadicalEntry(Hans=current.Hans, Hant=variant)

    return table


@dataclass(frozen=True)
class RadicalRepository:
    """Path-scoped, read-once radical table."""

    path: Path

    @cached_property
    def radicals(self) -> dict[int, RadicalEntry]:
        """Load and cache the radical table.

        Raises:
            FileNotFoundError: If the radical file does not exist.
        """

        if not self.path.exists():
            raise FileNotFoundError(f"CJK radical file not found: {self.path}")

        with self.path.open("r", encoding="utf-8") as handle:
            table = parse_radical_lines(handle)

        logger.info("Loaded %d radicals from %s", len(table), self.path)
        return table
