"""CLI entrypoint for the Unihan decoding pipeline."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from unihan_pipeline.config import DataPaths, resolve_default_data_dir
from unihan_pipeline.errors import UnihanError
from unihan_pipeline.io.store import save_database
from unihan_pipeline.pipeline import run_pipeline
from unihan_pipeline.reporting.report_md import build_report_md, collect_field_counts

logger = logging.getLogger(__name__)


def _format_table(headers: Sequence[str], data_rows: Sequence[Sequence[str]]) -> str:
    """Format rows as an ASCII table for terminal output.

    Args:
        headers: Table headers.
        data_rows: Row values.

    Returns:
        Monospace table string.
    """

    widths = [len(header) for header in headers]
    for row in data_rows:
        for idx, value in enumerate(row):
            widths[idx] = max(widths[idx], len(value))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, header in enumerate(headers))
    separator_line = "-+-".join("-" * width for width in widths)
    body_lines = [
        " | ".join(value.ljust(widths[idx]) for idx, value in enumerate(row)) for row in data_rows
    ]
    return "\n".join([header_line, separator_line, *body_lines])


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct CLI argument parser.

    Returns:
        Configured parser for the build command.
    """

    parser = argparse.ArgumentParser(description="Decode the Unicode Unihan database.")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=resolve_default_data_dir(),
        help="Root holding unihan/, unihan_fields.json, cjk_radicals.txt, cantonese/.",
    )
    parser.add_argument("--output", required=True, type=Path, help="Compiled database output path.")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Markdown report output path (default: report.md next to the output).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Validate raw values against the schema syntax patterns first.",
    )
    parser.add_argument(
        "--keep-singleton-lists",
        action="store_true",
        help="Keep one-element lists for delimited fields instead of unwrapping them.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Decode files in N processes.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run CLI workflow from arguments through artifact generation.

    Returns:
        Zero exit status on success.
    """

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    missing = DataPaths(args.data_dir).missing()
    if missing:
        raise SystemExit("Missing inputs: " + ", ".join(str(path) for path in missing))

    report_path = args.report if args.report is not None else args.output.parent / "report.md"

    try:
        database = run_pipeline(
            data_dir=args.data_dir,
            strict=args.strict,
            unwrap_singletons=not args.keep_singleton_lists,
            max_workers=args.workers,
        )
    except UnihanError as exc:
        logger.error("Build failed: %s", exc)
        return 1

    save_database(database, args.output)
    report_path.write_text(build_report_md(database), encoding="utf-8")

    print(f"Wrote {len(database.records)} codepoints to {args.output}")
    print(f"Wrote report to {report_path}")

    field_counts = collect_field_counts(database.records)
    top_rows = [
        [name, str(count)]
        for name, count in sorted(field_counts.items(), key=lambda item: (-item[1], item[0]))[:10]
    ]
    print("\nMost populated fields:")
    print(_format_table(["field", "codepoints"], top_rows))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
