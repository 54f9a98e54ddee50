"""
Core media sorting functionality.
"""

from pathlib import Path
from typing import Callable, List, Optional

from rich.progress import Progress
from rich.table import Table

from .classifier import classify
from .collisions import CollisionResolver
from .config import SortOptions
from .constants import IGNORE_FILENAME, get_console, get_logger
from .file_operations import FileOperations
from .history import HistoryManager
from .ignore import IgnoreList
from .stats import Outcome, RunSummary
from .timestamps import get_capture_timestamp, normalize_timestamp


TimestampReader = Callable[[Path], Optional[str]]


def format_elapsed(seconds: float) -> str:
    """Format wall-clock seconds as hours, minutes and seconds."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours} hour(s) {minutes} minute(s) {secs} second(s)"


class MediaSorter:
    """Main class for classifying and placing media files by capture date."""

    def __init__(self, options: SortOptions,
                 history_manager: Optional[HistoryManager] = None,
                 timestamp_reader: Optional[TimestampReader] = None):
        self.options = options
        self.history_manager = history_manager
        self.read_timestamp = timestamp_reader or get_capture_timestamp
        self.console = get_console()
        self.logger = get_logger()

        self.file_ops = FileOperations(dry_run=options.dry_run, move_files=options.move_files)
        self.resolver = CollisionResolver(self.file_ops, skip_duplicates=options.skip_duplicates)

        ignore_file = options.ignore_file or options.source / IGNORE_FILENAME
        self.ignore_list = IgnoreList.load(ignore_file)

        self.logger.info(f"Starting session: {options.source} -> {options.output}")
        self.logger.info(f"Mode: {options.mode_label}")

    def _is_under_output(self, file_path: Path) -> bool:
        output = self.options.output
        return file_path == output or output in file_path.parents

    def find_source_files(self) -> List[Path]:
        """Find media files in the source directory, top level unless recursive."""
        source = self.options.source
        candidates = source.rglob("*") if self.options.recursive else source.iterdir()

        media_files = []
        for file_path in candidates:
            if not file_path.is_file():
                continue
            if file_path.suffix.lower() not in self.options.extensions:
                continue
            if self._is_under_output(file_path):
                continue
            media_files.append(file_path)

        return sorted(media_files)

    def get_timestamp(self, file_path: Path) -> Optional[str]:
        """Capture timestamp of a file; any reader failure counts as undated."""
        try:
            return normalize_timestamp(self.read_timestamp(file_path))
        except Exception as e:
            self.logger.debug(f"Could not read capture date of {file_path}: {e}")
            return None

    def process_file(self, file_path: Path) -> Outcome:
        """Run one file through the decision pipeline and place it."""
        timestamp = self.get_timestamp(file_path)

        if self.ignore_list.is_ignored(timestamp):
            self.logger.debug(f"{file_path}: timestamp {timestamp} is on the ignore list")
            return Outcome.SKIPPED_IGNORED

        classification = classify(file_path, timestamp, self.options)
        if classification is None:
            if self.history_manager:
                self.history_manager.record_no_timestamp(file_path)
            return Outcome.SKIPPED_NO_TIMESTAMP

        if classification.uncategorized:
            # Uncategorized placement keeps the original name and never overwrites
            target = classification.path
            if self.file_ops.exists(target):
                return Outcome.SKIPPED_EXISTING_TARGET
            placed = Outcome.PLACED_UNCATEGORIZED
        else:
            resolution = self.resolver.resolve(classification.path, file_path)
            if resolution.is_skip:
                return resolution.outcome
            target = resolution.path
            placed = Outcome.RENAMED

        try:
            self.file_ops.transfer(file_path, target)
        except OSError as e:
            self.logger.error(f"Failed to place {file_path} -> {target}: {e}")
            return Outcome.FAILED

        if file_path.suffix.lower() in self.options.raw_extensions:
            self.file_ops.copy_sidecars(file_path, target, self.options.sidecar_extensions)

        return placed

    def process_files(self, files: List[Path],
                      progress: Optional[Progress] = None) -> RunSummary:
        """Process all files in order, folding outcomes into a summary."""
        self.logger.info(f"Starting to process {len(files)} files")

        if progress is None:
            with Progress(console=self.console) as own_progress:
                return self._process_files_with_progress(files, own_progress)
        return self._process_files_with_progress(files, progress)

    def _process_files_with_progress(self, files: List[Path], progress: Progress) -> RunSummary:
        summary = RunSummary()
        total = len(files)
        task = progress.add_task("Sorting files...", total=total)

        for index, file_path in enumerate(files, start=1):
            try:
                size = file_path.stat().st_size
                outcome = self.process_file(file_path)
            except Exception as e:
                self.logger.error(f"Error processing {file_path}: {e}")
                size = 0
                outcome = Outcome.FAILED

            summary.record(outcome, size)
            self.logger.info(f"{outcome.label}: {file_path} ({index}/{total})")
            progress.update(task, description=f"{outcome.label}: {file_path.name}")
            progress.advance(task)

        if self.history_manager:
            self.history_manager.write_skipped_log()

        return summary

    def print_summary(self, summary: RunSummary, elapsed: float) -> None:
        """Print processing summary."""
        table = Table(title="Processing Summary")
        table.add_column("Outcome", style="cyan")
        table.add_column("Count", style="green")

        for outcome in Outcome:
            table.add_row(outcome.label, str(summary.get(outcome)))

        size_mb = summary.total_size_mb
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        self.console.print(table)
        self.console.print(f"Time elapsed: {format_elapsed(elapsed)}")

        if self.options.dry_run:
            self.console.print("[yellow]Dry run: no files were changed[/yellow]")
