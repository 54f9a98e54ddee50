"""
Run history management for mediasort.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from .stats import Outcome, RunSummary

if TYPE_CHECKING:
    from .config import SortOptions


class HistoryManager:
    """Manages per-run log files and the global run audit log.

    Nothing is written to disk in dry-run mode.
    """

    def __init__(self, output_path: Path, root_dir: Path, dry_run: bool = False):
        self.output_path = output_path
        self.root_dir = root_dir
        self.dry_run = dry_run
        self.history_dir = self.root_dir / "history"
        self.runs_audit_log = self.root_dir / "imports.log"
        self.no_timestamp_files: List[Path] = []
        self.run_folder: Optional[Path] = None
        self.run_folder_name = ""
        self._file_handler: Optional[logging.Handler] = None

        self._setup_run_folder()

    def _setup_run_folder(self) -> None:
        """Pick a dated run folder name, creating it in live mode."""
        timestamp = datetime.now().strftime("%Y-%m-%d")
        base_name = f"{timestamp}+{self._sanitize_name(self.output_path)}"

        # Handle collisions with earlier runs on the same day with a counter
        folder_name = base_name
        folder = self.history_dir / folder_name
        counter = 1
        while folder.exists() and any(folder.iterdir()):
            folder_name = f"{base_name}-{counter:02d}"
            folder = self.history_dir / folder_name
            counter += 1

        if not self.dry_run:
            folder.mkdir(parents=True, exist_ok=True)
        self.run_folder = folder
        self.run_folder_name = folder_name

    @staticmethod
    def _sanitize_name(path: Path) -> str:
        """Convert a path to a safe folder name."""
        sanitized = re.sub(r'[^\w\-_]', '-', path.name)
        sanitized = re.sub(r'-+', '-', sanitized)
        return sanitized.strip('-') or "output"

    @property
    def run_log(self) -> Path:
        return self.run_folder / "run.log"

    @property
    def skipped_log(self) -> Path:
        return self.run_folder / "skipped_no_datetime.log"

    def setup_run_logger(self, logger: logging.Logger) -> None:
        """Attach a DEBUG-level file handler writing this run's log."""
        if self.dry_run:
            return

        file_handler = logging.FileHandler(self.run_log, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
        self._file_handler = file_handler

    def close_run_logger(self, logger: logging.Logger) -> None:
        if self._file_handler is not None:
            logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def record_no_timestamp(self, file_path: Path) -> None:
        """Remember a file skipped for lack of a capture date."""
        self.no_timestamp_files.append(file_path)

    def write_skipped_log(self) -> None:
        """Write the list of undated, unplaced source files."""
        if self.dry_run or not self.no_timestamp_files:
            return

        with open(self.skipped_log, 'a', encoding='utf-8') as f:
            for file_path in self.no_timestamp_files:
                f.write(f"{file_path}\n")

    def log_run_summary(self, options: "SortOptions", summary: RunSummary,
                        elapsed: float) -> None:
        """Append a one-line summary of this run to the global audit log."""
        if self.dry_run:
            return

        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        status = "PARTIAL" if summary.has_errors() else "SUCCESS"
        record = (
            f"{timestamp} | {status} | {options.mode_label} | "
            f"Source: {options.source} | Output: {options.output} | "
            f"Renamed: {summary.get(Outcome.RENAMED)} | "
            f"Uncategorized: {summary.get(Outcome.PLACED_UNCATEGORIZED)} | "
            f"Identical: {summary.get(Outcome.SKIPPED_EXISTING_IDENTICAL)} | "
            f"Existing: {summary.get(Outcome.SKIPPED_EXISTING_TARGET)} | "
            f"No date: {summary.get(Outcome.SKIPPED_NO_TIMESTAMP)} | "
            f"Ignored: {summary.get(Outcome.SKIPPED_IGNORED)} | "
            f"Failed: {summary.get(Outcome.FAILED)} | "
            f"Size: {summary.total_size_mb:.1f}MB | Elapsed: {elapsed:.1f}s | "
            f"History: {self.run_folder_name}\n"
        )

        with open(self.runs_audit_log, 'a', encoding='utf-8') as f:
            f.write(record)
