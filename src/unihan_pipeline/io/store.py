"""Save and reload a compiled :class:`UnihanDatabase`."""

from __future__ import annotations

import pickle
from pathlib import Path

from unihan_pipeline.errors import StoreError
from unihan_pipeline.models import UnihanDatabase

FORMAT_NAME = "unihan-pipeline"
FORMAT_VERSION = 1


def save_database(database: UnihanDatabase, output_path: Path) -> None:
    """Serialize ``database`` to ``output_path``.

    Args:
        database: Pipeline result to persist.
        output_path: Destination file path; parent directories are created.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"format": FORMAT_NAME, "version": FORMAT_VERSION, "database": database}
    with output_path.open("wb") as handle:
        pickle.dump(payload, handle, protocol=pickle.HIGHEST_PROTOCOL)


def load_database(path: Path) -> UnihanDatabase:
    """Reload a database written by :func:`save_database`.

    Only load files this package wrote: the payload is a pickle.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        StoreError: If the payload is not a database of the current version.
    """

    if not path.exists():
        raise FileNotFoundError(f"Compiled database not found: {path}")

    with path.open("rb") as handle:
        try:
            payload = pickle.load(handle)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as exc:
            raise StoreError(f"{path}: unreadable database payload: {exc}") from exc

    if not isinstance(payload, dict) or payload.get("format") != FORMAT_NAME:
        raise StoreError(f"{path}: not a {FORMAT_NAME} database")
    if payload.get("version") != FORMAT_VERSION:
        raise StoreError(
            f"{path}: unsupported database version {payload.get('version')!r} "
            f"(expected {FORMAT_VERSION})"
        )
    database = payload.get("database")
    if not isinstance(database, UnihanDatabase):
        raise StoreError(f"{path}: payload does not contain a database")
    return database
