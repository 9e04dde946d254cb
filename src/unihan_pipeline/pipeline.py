"""Top-level orchestration: build lookup tables, then decode the corpus."""

from __future__ import annotations

import logging
from pathlib import Path

from unihan_pipeline.cantonese.repository import JyutpingRepository
from unihan_pipeline.config import DataPaths
from unihan_pipeline.decoding.context import DecodeContext
from unihan_pipeline.models import UnihanDatabase
from unihan_pipeline.radicals.parser import RadicalRepository
from unihan_pipeline.schema.loader import SchemaRepository
from unihan_pipeline.stages.assemble import parse_files
from unihan_pipeline.validation import validate_corpus

logger = logging.getLogger(__name__)


def build_context(paths: DataPaths, unwrap_singletons: bool = True) -> DecodeContext:
    """Load the schema and romanization index into a read-only decode context."""

    return DecodeContext(
        fields=SchemaRepository(paths.fields).fields,
        cantonese=JyutpingRepository(paths.jyutping).index,
        unwrap_singletons=unwrap_singletons,
    )


def run_pipeline(
    data_dir: Path,
    strict: bool = False,
    unwrap_singletons: bool = True,
    max_workers: int | None = None,
) -> UnihanDatabase:
    """Decode the Unihan corpus and radical table under ``data_dir``.

    Args:
        data_dir: Root directory laid out as described by :class:`DataPaths`.
        strict: Validate raw values against schema ``syntax`` patterns
            before decoding.
        unwrap_singletons: Collapse one-element decoded lists to scalars.
        max_workers: Decode files in this many worker processes.

    Returns:
        ``UnihanDatabase`` with decoded records, radicals and the schema.

    Raises:
        FileNotFoundError: If a required input is missing.
        UnihanError: On any fatal schema, corpus or validation error.
    """

    paths = DataPaths(Path(data_dir))
    context = build_context(paths, unwrap_singletons=unwrap_singletons)

    if strict:
        validate_corpus(paths.unihan_dir, context.fields)

    records, sources = parse_files(paths.unihan_dir, context, max_workers=max_workers)
    radicals = RadicalRepository(paths.radicals).radicals
    logger.info(
        "Decoded %d codepoints from %d files; %d radicals",
        len(records),
        len(sources),
        len(radicals),
    )

    return UnihanDatabase(
        records=records,
        radicals=radicals,
        fields=dict(context.fields),
        sources=sources,
    )
