"""Exception types raised while loading and decoding Unihan data."""

from __future__ import annotations


class UnihanError(ValueError):
    """Base class for malformed input detected by the pipeline."""


class SchemaError(UnihanError):
    """The field schema document is malformed."""


class MalformedLineError(UnihanError):
    """A corpus line does not have the expected shape."""


class UnknownFieldError(UnihanError):
    """A corpus line references a field the schema does not declare."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Field not declared in schema: {field_name!r}")
        self.field_name = field_name


class FieldDecodeError(UnihanError):
    """A field value does not match the micro-grammar of its decoding rule."""

    def __init__(self, field_name: str, value: str, reason: str = "unexpected value") -> None:
        super().__init__(f"Cannot decode {field_name} value {value!r}: {reason}")
        self.field_name = field_name
        self.value = value


class CantoneseNotFoundError(UnihanError, KeyError):
    """A jyutping syllable is missing from the romanization index."""

    def __init__(self, jyutping: str) -> None:
        super().__init__(f"Jyutping syllable not found in index: {jyutping!r}")
        self.jyutping = jyutping

    def __str__(self) -> str:
        return str(self.args[0])


class CorpusError(UnihanError):
    """Fatal error while folding a corpus file, with file and line context."""

    def __init__(self, source: str, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"{source}:{line_number}: {reason}\n  line: {line!r}")
        self.source = source
        self.line_number = line_number
        self.line = line
        self.reason = reason

    def __reduce__(self):
        return type(self), (self.source, self.line_number, self.line, self.reason)


class StoreError(UnihanError):
    """A persisted database payload cannot be loaded."""


class ValidationError(UnihanError):
    """Raw values failed the schema ``syntax`` patterns in strict mode."""
