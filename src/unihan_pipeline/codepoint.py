"""Conversion between ``U+XXXX`` notation and integer codepoints."""

from __future__ import annotations

import re

from unihan_pipeline.errors import MalformedLineError

CODEPOINT_RE = re.compile(r"^U\+([0-9A-Fa-f]{4,6})$")


def decode_codepoint(text: str) -> int:
    """Decode ``U+4E00`` style notation into an integer codepoint.

    Args:
        text: Codepoint notation; surrounding whitespace is ignored.

    Returns:
        Integer codepoint.

    Raises:
        MalformedLineError: If ``text`` is not ``U+`` followed by 4-6 hex digits.
    """

    match = CODEPOINT_RE.match(text.strip())
    if not match:
        raise MalformedLineError(f"Invalid codepoint notation: {text!r}")
    return int(match.group(1), 16)


def encode_codepoint(codepoint: int) -> str:
    """Encode an integer codepoint as ``U+XXXX`` (at least four hex digits)."""

    if codepoint < 0 or codepoint > 0x10FFFF:
        raise ValueError(f"Codepoint out of range: {codepoint}")
    return f"U+{codepoint:04X}"
