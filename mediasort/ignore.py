"""
Ignore list of capture timestamps that must never be placed.
"""

from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from .constants import get_logger


class IgnoreList:
    """Exact-match set of timestamp strings loaded once per run."""

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: FrozenSet[str] = frozenset(
            entry.strip() for entry in entries
            if entry.strip() and not entry.strip().startswith("#")
        )

    @classmethod
    def load(cls, ignore_file: Optional[Path]) -> "IgnoreList":
        """Load newline-delimited entries; a missing file means an empty list."""
        logger = get_logger()
        if ignore_file is None or not ignore_file.is_file():
            return cls()

        try:
            raw = ignore_file.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read ignore list {ignore_file}: {e}")
            return cls()

        # utf-8-sig drops the byte-order mark some editors write
        try:
            text = raw.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            logger.warning(f"Ignore list {ignore_file} is not valid UTF-8, "
                           f"undecodable lines will never match: {e}")
            text = raw.decode('utf-8-sig', errors='replace')

        ignore_list = cls(text.splitlines())

        logger.info(f"Loaded {len(ignore_list)} ignored timestamps from {ignore_file}")
        return ignore_list

    def is_ignored(self, timestamp: Optional[str]) -> bool:
        """Undated files are never matched against the list."""
        if timestamp is None:
            return False
        return timestamp in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, timestamp: object) -> bool:
        return isinstance(timestamp, str) and self.is_ignored(timestamp)
