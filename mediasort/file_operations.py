"""
Shared file operations: checksums, non-clobbering transfers and sidecars.
"""

import hashlib
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .constants import get_logger


class FileOperations:
    """Utility class for file transfers with dry-run support.

    In dry-run mode nothing on disk changes; instead every planned placement
    is remembered so that later existence checks and checksums see the same
    destination tree a live run would have produced.
    """

    def __init__(self, dry_run: bool, move_files: bool, chunk_size: int = 1024 * 1024):
        self.dry_run = dry_run
        self.move_files = move_files
        self.chunk_size = chunk_size
        self.logger = get_logger()
        self._planned: Dict[Path, Path] = {}

    @staticmethod
    def file_checksum(file_path: Path, chunk_size: int = 1024 * 1024) -> str:
        """SHA-256 hex digest of a file's full contents."""
        digest = hashlib.sha256()
        with open(file_path, 'rb') as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                digest.update(chunk)
        return digest.hexdigest()

    def exists(self, path: Path) -> bool:
        """Existence check that also sees placements planned in dry-run mode."""
        return path in self._planned or path.exists()

    def checksum(self, path: Path) -> str:
        """Checksum of a path, reading planned placements from their source."""
        return self.file_checksum(self._planned.get(path, path), self.chunk_size)

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed, with dry-run support."""
        if not self.dry_run:
            directory.mkdir(parents=True, exist_ok=True)

    def transfer(self, source: Path, dest: Path) -> None:
        """Move or copy a file without ever overwriting an existing target.

        Raises OSError (FileExistsError if the target is taken) on failure.
        """
        verb = "move" if self.move_files else "copy"
        if self.exists(dest):
            raise FileExistsError(f"Refusing to overwrite existing target: {dest}")

        if self.dry_run:
            self._planned[dest] = source
            self.logger.info(f"Would {verb} {source} -> {dest}")
            return

        self.ensure_directory(dest.parent)
        if self.move_files:
            shutil.move(str(source), str(dest))
        else:
            shutil.copy2(str(source), str(dest))

        # Verify the operation
        if not dest.exists():
            raise FileNotFoundError(f"File not found after {verb}: {dest}")
        if self.move_files and source.exists():
            raise FileExistsError(f"Source file still exists after move: {source}")

        self.logger.info(f"{source} -> {dest}")

    def find_sidecar(self, source: Path, extension: str) -> Optional[Path]:
        """Locate a sidecar next to source, matching the extension in any case."""
        extension = extension.lower()
        try:
            siblings = sorted(source.parent.iterdir())
        except OSError as e:
            self.logger.warning(f"Could not scan {source.parent} for sidecars: {e}")
            return None

        for candidate in siblings:
            if (candidate.stem == source.stem and candidate.suffix.lower() == extension
                    and candidate.is_file()):
                return candidate
        return None

    def copy_sidecars(self, source: Path, dest: Path,
                      sidecar_extensions: Iterable[str]) -> List[Path]:
        """Copy sidecars of source next to dest under dest's stem.

        Sidecars are always copied, never moved. Failures are logged and
        never raised, since the primary file has already been placed.
        """
        copied = []
        for extension in sidecar_extensions:
            sidecar = self.find_sidecar(source, extension)
            if sidecar is None:
                continue

            target = dest.with_suffix(extension.lower())
            if self.exists(target):
                self.logger.info(f"Sidecar target already exists, leaving it: {target}")
                continue

            if self.dry_run:
                self._planned[target] = sidecar
                self.logger.info(f"Would copy sidecar {sidecar} -> {target}")
                copied.append(target)
                continue

            try:
                self.ensure_directory(target.parent)
                shutil.copy2(str(sidecar), str(target))
                self.logger.info(f"Sidecar {sidecar} -> {target}")
                copied.append(target)
            except OSError as e:
                self.logger.warning(f"Failed to copy sidecar {sidecar} -> {target}: {e}")

        return copied
