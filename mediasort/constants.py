"""
File extension constants and shared console/logger accessors.
"""

import logging
import shutil
import subprocess
from typing import Optional

from rich.console import Console

PROGRAM = "mediasort"

# Timestamp shapes for filenames and grouping folders
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
TIMESTAMP_PATTERN = r"^\d{8}_\d{6}$"
SUFFIX_LENGTH = 8

UNCATEGORIZED_DIR = "uncategorized"
IGNORE_FILENAME = "ignore.txt"

# File extension constants
MEDIA_EXTENSIONS = (
    ".cr2", ".raf", ".nef", ".arw", ".dng", ".jpg", ".jpeg", ".png", ".heic",
    ".mov", ".avi", ".wmv", ".mp4", ".vob",
)
RAW_EXTENSIONS = (".cr2", ".raf", ".nef", ".arw", ".dng")
SIDECAR_EXTENSIONS = (".xmp",)

_console: Optional[Console] = None


def get_console() -> Console:
    """Get the shared rich console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger(name: str = PROGRAM) -> logging.Logger:
    """Get the program logger (or a child of it)."""
    return logging.getLogger(name)


def check_tool_availability(cmd: str, version_flag: str = "-ver") -> bool:
    """Check whether an external command line tool can be run."""
    if shutil.which(cmd) is None:
        return False
    try:
        subprocess.run([cmd, version_flag], capture_output=True, check=True)
        return True
    except (subprocess.CalledProcessError, OSError):
        return False
