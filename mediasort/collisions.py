"""
Collision resolution for destination names that are already taken.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import SUFFIX_LENGTH, get_logger
from .file_operations import FileOperations
from .stats import Outcome


@dataclass(frozen=True)
class Resolution:
    """A free destination path, or the skip outcome explaining why there is none."""
    path: Optional[Path]
    outcome: Outcome = Outcome.RENAMED

    @property
    def is_skip(self) -> bool:
        return self.path is None


class CollisionResolver:
    """Decides between placing, disambiguating and skipping on name collisions.

    Hashing only happens once a name collision is established. A different
    file is disambiguated with the last characters of its checksum; if that
    name is itself taken by other content, a counter is appended until a free
    or identical slot turns up.
    """

    def __init__(self, file_ops: FileOperations, skip_duplicates: bool = False):
        self.file_ops = file_ops
        self.skip_duplicates = skip_duplicates
        self.logger = get_logger()

    def resolve(self, desired: Path, source: Path) -> Resolution:
        if not self.file_ops.exists(desired):
            return Resolution(desired)

        if self.skip_duplicates:
            self.logger.debug(f"Target exists, not comparing contents: {desired}")
            return Resolution(None, Outcome.SKIPPED_EXISTING_TARGET)

        source_checksum = self.file_ops.checksum(source)
        if self.file_ops.checksum(desired) == source_checksum:
            return Resolution(None, Outcome.SKIPPED_EXISTING_IDENTICAL)

        suffix = source_checksum[-SUFFIX_LENGTH:]
        stem = f"{desired.stem}_{suffix}"
        candidate = desired.with_name(f"{stem}{desired.suffix}")
        counter = 1
        while self.file_ops.exists(candidate):
            if self.file_ops.checksum(candidate) == source_checksum:
                return Resolution(None, Outcome.SKIPPED_EXISTING_IDENTICAL)
            self.logger.warning(f"Disambiguated name also taken by different content: {candidate}")
            candidate = desired.with_name(f"{stem}_{counter:02d}{desired.suffix}")
            counter += 1

        self.logger.debug(f"Name collision at {desired}, using {candidate.name}")
        return Resolution(candidate)
