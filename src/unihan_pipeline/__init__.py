"""Unicode Unihan database decoding pipeline package."""

from .models import (
    CantoneseSyllable,
    CodepointRecord,
    FieldSchema,
    RadicalEntry,
    RadicalVariant,
    UnihanDatabase,
)

__all__ = [
    "CantoneseSyllable",
    "CodepointRecord",
    "FieldSchema",
    "RadicalEntry",
    "RadicalVariant",
    "UnihanDatabase",
]
