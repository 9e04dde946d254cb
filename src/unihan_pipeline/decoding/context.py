"""Explicit decoding context threaded through the assembler and field rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from unihan_pipeline.cantonese.repository import JyutpingIndex
from unihan_pipeline.errors import UnknownFieldError
from unihan_pipeline.models import FieldSchema


@dataclass(frozen=True)
class DecodeContext:
    """Read-only tables and policy used while decoding field values.

    Attributes:
        fields: Field schema keyed by field identifier.
        cantonese: Jyutping index for Cantonese-bearing fields.
        unwrap_singletons: Collapse a decoded one-element list to its item.
            When ``False`` every delimited field decodes to a list.
    """

    fields: Mapping[str, FieldSchema]
    cantonese: JyutpingIndex = field(default_factory=lambda: JyutpingIndex({}))
    unwrap_singletons: bool = True

    def schema_for(self, field_name: str) -> FieldSchema:
        """Return the schema record for ``field_name``.

        Raises:
            UnknownFieldError: If the schema does not declare the field.
        """

        try:
            return self.fields[field_name]
        except KeyError:
            raise UnknownFieldError(field_name) from None
