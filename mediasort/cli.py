"""
Command-line interface for mediasort.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress

from .config import Config, SortOptions
from .constants import IGNORE_FILENAME, PROGRAM, get_console, get_logger
from .core import MediaSorter
from .history import HistoryManager
from .stats import Outcome


def configure_logging(console: Console, verbose: bool) -> logging.Logger:
    """Route program logs to the rich console; WARNING+ unless verbose."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG)
    return logger


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_source = config.get_last_source()
    last_output = config.get_last_output()

    source_help = "Source directory containing media files to sort"
    output_help = "Output directory for the YYYY-MM/ext hierarchy"
    if last_source:
        source_help += f" (default: {last_source})"
    if last_output:
        output_help += f" (default: {last_output})"

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sort photos and videos into folders by their DateTimeOriginal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} -s ~/Card/DCIM -o ~/Pictures/Sorted -r -k
  {PROGRAM} -s ~/Card/DCIM -o ~/Pictures/Sorted --dry-run

Timestamps listed one per line in {IGNORE_FILENAME} inside the source
directory are never sorted.
        """
    )

    parser.add_argument(
        "--source-path", "-s", dest="source",
        help=source_help
    )
    parser.add_argument(
        "--output-path", "-o", dest="output",
        help=output_help
    )
    parser.add_argument(
        "--recursive", "-r", action="store_true",
        help="Process subdirectories of the source recursively"
    )
    parser.add_argument(
        "--keep-originals", "-k", action="store_true",
        help="Copy files instead of moving them"
    )
    parser.add_argument(
        "--dry-run", "-d", action="store_true",
        help="Preview operations without making changes"
    )
    parser.add_argument(
        "--include-uncategorized", "-u", action="store_true",
        help="Place files without a capture date under 'uncategorized/' instead of skipping them"
    )
    parser.add_argument(
        "--skip-duplicates", action="store_true",
        help="Skip any file whose target name exists, without comparing contents"
    )
    parser.add_argument(
        "--ignore-file", metavar="PATH",
        help=f"Ignore list to use instead of SOURCE/{IGNORE_FILENAME}"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log every file decision to the console"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def show_processing_plan(options: SortOptions, console: Console) -> None:
    """Display the processing plan before execution."""
    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Source:          [blue]{options.source}[/blue]")
    console.print(f"  Output:          [blue]{options.output}[/blue]")
    console.print(f"  Processing Mode: [cyan]{options.mode_label}[/cyan]")
    console.print(f"  Recursive:       [cyan]{'Yes' if options.recursive else 'No'}[/cyan]")
    console.print(f"  Uncategorized:   [cyan]{'Yes' if options.include_uncategorized else 'No'}[/cyan]")
    console.print(f"  Skip Duplicates: [cyan]{'Yes' if options.skip_duplicates else 'No'}[/cyan]")
    console.print()


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(__version__)
        return 0

    source_path = args.source or config.get_last_source()
    output_path = args.output or config.get_last_output()
    if not source_path or not output_path:
        parser.error("Source and output directories are required")

    source = Path(source_path).expanduser().resolve()
    output = Path(output_path).expanduser().resolve()

    console = get_console()

    if not source.is_dir():
        print(f"Error: Source path does not exist or is not a directory: {source}")
        return 1

    if output.exists() and not output.is_dir():
        print(f"Error: Output path is not a directory: {output}")
        return 1

    if not output.exists():
        if args.dry_run:
            console.print(f"Would create directory: {output}")
        else:
            try:
                output.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                print(f"Error: Failed to create output directory {output}: {e}")
                return 1

    config.update_paths(str(source), str(output))

    options = SortOptions(
        source=source,
        output=output,
        recursive=args.recursive,
        move_files=not args.keep_originals,
        dry_run=args.dry_run,
        include_uncategorized=args.include_uncategorized,
        skip_duplicates=args.skip_duplicates,
        ignore_file=Path(args.ignore_file).expanduser() if args.ignore_file else None,
        extensions=config.get_extensions(),
        raw_extensions=config.get_raw_extensions(),
        sidecar_extensions=config.get_sidecar_extensions(),
    )

    # A dry run always shows where each file would go
    logger = configure_logging(console, args.verbose or args.dry_run)
    show_processing_plan(options, console)

    history_manager = HistoryManager(output_path=output, root_dir=config.program_root,
                                     dry_run=options.dry_run)
    history_manager.setup_run_logger(logger)

    try:
        start_time = time.monotonic()
        sorter = MediaSorter(options, history_manager=history_manager)
        media_files = sorter.find_source_files()

        if media_files:
            console.print(f"Found {len(media_files)} media files to process")
        else:
            console.print("[yellow]No media files found in source directory[/yellow]")

        with Progress(console=console) as progress:
            summary = sorter.process_files(media_files, progress)

        elapsed = time.monotonic() - start_time
        sorter.print_summary(summary, elapsed)
        history_manager.log_run_summary(options, summary, elapsed)

        if summary.has_errors():
            console.print(f"\n[green]✓ Processing finished[/green] "
                          f"[yellow]({summary.get(Outcome.FAILED)} files could not be placed)[/yellow]")
        else:
            console.print("\n[green]✓ Processing finished[/green]")
        return 0

    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1
    finally:
        history_manager.close_run_logger(logger)


if __name__ == "__main__":
    sys.exit(main())
