"""
Destination path classification for media files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import SortOptions
from .constants import UNCATEGORIZED_DIR
from .timestamps import year_month


@dataclass(frozen=True)
class Classification:
    """Where a file should land, before collision resolution."""
    directory: Path
    filename: str
    uncategorized: bool = False

    @property
    def path(self) -> Path:
        return self.directory / self.filename


def media_extension(file_path: Path) -> str:
    """Lowercase extension without the leading dot."""
    return file_path.suffix.lower().lstrip(".")


def classify(file_path: Path, timestamp: Optional[str],
             options: SortOptions) -> Optional[Classification]:
    """Map a file and its capture timestamp to a destination.

    Dated files go to ``output/YYYY-MM/ext/TIMESTAMP.ext``. Undated files go
    to ``output/uncategorized/<relative dir>/<original name>`` when
    uncategorized placement is enabled; otherwise None is returned.
    """
    ext = media_extension(file_path)

    if timestamp is not None:
        directory = options.output / year_month(timestamp) / ext
        return Classification(directory=directory, filename=f"{timestamp}.{ext}")

    if not options.include_uncategorized:
        return None

    try:
        relative_dir = file_path.parent.relative_to(options.source)
    except ValueError:
        relative_dir = Path()
    directory = options.output / UNCATEGORIZED_DIR / relative_dir
    return Classification(directory=directory, filename=file_path.name, uncategorized=True)
