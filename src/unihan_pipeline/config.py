"""Data directory layout used by the pipeline and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

UNIHAN_SUBDIR = "unihan"
FIELDS_FILE = "unihan_fields.json"
RADICALS_FILE = "cjk_radicals.txt"
JYUTPING_FILE = Path("cantonese") / "jyutping.csv"


@dataclass(frozen=True)
class DataPaths:
    """Locations of every input the pipeline reads, relative to one root."""

    root: Path

    @property
    def unihan_dir(self) -> Path:
        return self.root / UNIHAN_SUBDIR

    @property
    def fields(self) -> Path:
        return self.root / FIELDS_FILE

    @property
    def radicals(self) -> Path:
        return self.root / RADICALS_FILE

    @property
    def jyutping(self) -> Path:
        return self.root / JYUTPING_FILE

    def missing(self) -> list[Path]:
        """Return the required inputs that do not exist on disk."""

        required = [self.unihan_dir, self.fields, self.radicals, self.jyutping]
        return [path for path in required if not path.exists()]


def resolve_default_data_dir() -> Path:
    """Resolve the default data root, favoring ``./data`` when present."""

    cwd_data = Path("data")
    if cwd_data.is_dir():
        return cwd_data
    return Path(".")
