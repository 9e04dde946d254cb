"""Decoding of tone-marked Mandarin readings embedded in Unihan fields."""

from __future__ import annotations

from functools import lru_cache
import re
from typing import Any

from pypinyin.contrib.tone_convert import to_tone3

TONE_SUFFIX_RE = re.compile(r"([1-5])$")


@lru_cache(maxsize=None)
def _numbered(reading: str) -> tuple[str, int | None]:
    numbered = to_tone3(reading, v_to_u=True, neutral_tone_with_five=True)
    match = TONE_SUFFIX_RE.search(numbered)
    return numbered, int(match.group(1)) if match else None


def decode_reading(reading: str) -> dict[str, Any]:
    """Decode one tone-marked pinyin syllable.

    Args:
        reading: Syllable such as ``hǎo``; neutral-tone syllables carry no mark.

    Returns:
        Mapping with the source ``reading``, the ``numbered`` form (``hao3``,
        ``ü`` preserved, neutral tone as ``5``) and the integer ``tone``.
    """

    numbered, tone = _numbered(reading)
    return {"reading": reading, "numbered": numbered, "tone": tone}


def decode_readings(text: str, separator: str = ",") -> list[dict[str, Any]]:
    """Decode a ``separator``-joined list of tone-marked readings."""

    return [decode_reading(item) for item in text.split(separator) if item]
