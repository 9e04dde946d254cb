"""Typing policy for named captures produced by field micro-grammars.

Every pattern-based field rule passes its ``groupdict()`` through
:func:`normalize_captures`, so changing a rule here changes every composite
field that uses the capture name.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from unihan_pipeline.cantonese.repository import JyutpingIndex
from unihan_pipeline.codepoint import decode_codepoint
from unihan_pipeline.errors import CantoneseNotFoundError
from unihan_pipeline.models import CantoneseSyllable

logger = logging.getLogger(__name__)

ASTERISK_FLAGS = {"frequent", "substituted"}


def to_int_or_str(value: str) -> int | str:
    """Parse a decimal integer, falling back to the original string."""

    try:
        return int(value)
    except ValueError:
        return value


def decode_jyutpings(text: str, cantonese: JyutpingIndex) -> list[CantoneseSyllable | str]:
    """Decode comma-separated jyutping syllables, keeping unknown ones as text."""

    decoded: list[CantoneseSyllable | str] = []
    for segment in text.split(","):
        if not segment:
            continue
        try:
            decoded.append(cantonese.lookup(segment))
        except CantoneseNotFoundError:
            logger.debug("Keeping unrecognized jyutping %r as raw text", segment)
            decoded.append(segment)
    return decoded


def normalize_capture(name: str, value: str, cantonese: JyutpingIndex) -> tuple[str, Any]:
    """Type one capture; returns the output key and typed value."""

    if name == "virtual" and value in ("0", "1"):
        return name, value == "1"
    if name in ASTERISK_FLAGS:
        return name, value == "*"
    if name == "simplified_radical":
        return name, bool(value)
    if name == "hex_codepoint":
        return "codepoint", decode_codepoint(value)
    if name == "jyutpings":
        return name, decode_jyutpings(value, cantonese)
    return name, to_int_or_str(value)


def normalize_captures(
    captures: Mapping[str, str | None],
    cantonese: JyutpingIndex,
) -> dict[str, Any]:
    """Convert a capture-name -> raw-string mapping into typed values.

    Flag captures always produce a boolean. Other captures that did not
    participate in the match, or matched the empty string, are omitted.

    Args:
        captures: Result of ``re.Match.groupdict()``.
        cantonese: Romanization index for ``jyutpings`` captures.

    Returns:
        Mapping of output keys to typed values, in pattern order.
    """

    result: dict[str, Any] = {}
    for name, value in captures.items():
        if value is None or value == "":
            if name in ASTERISK_FLAGS or name == "simplified_radical":
                result[name] = False
            continue
        key, typed = normalize_capture(name, value, cantonese)
        result[key] = typed
    return result
