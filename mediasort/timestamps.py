"""Capture timestamp extraction and normalization."""

import re
import subprocess
from pathlib import Path
from typing import Optional

from .constants import TIMESTAMP_FORMAT, TIMESTAMP_PATTERN, check_tool_availability, get_logger


logger = get_logger("mediasort.timestamps")

_exiftool_available: Optional[bool] = None


def exiftool_available() -> bool:
    """Check for exiftool once per process."""
    global _exiftool_available
    if _exiftool_available is None:
        _exiftool_available = check_tool_availability("exiftool", "-ver")
        if not _exiftool_available:
            logger.warning("exiftool unavailable: all files will be treated as having no capture date")
    return _exiftool_available


def normalize_timestamp(value: Optional[str]) -> Optional[str]:
    """Return the canonical YYYYMMDD_HHMMSS string, or None if malformed."""
    if value is None:
        return None
    value = value.strip()
    if not re.match(TIMESTAMP_PATTERN, value):
        return None
    return value


def year_month(timestamp: str) -> str:
    """Grouping folder name (YYYY-MM) for a canonical timestamp."""
    return f"{timestamp[:4]}-{timestamp[4:6]}"


def get_capture_timestamp(file_path: Path) -> Optional[str]:
    """Read DateTimeOriginal with exiftool, formatted as YYYYMMDD_HHMMSS.

    Any failure (missing tool, unreadable file, absent or malformed tag)
    yields None so the caller can treat the file as undated.
    """
    if not exiftool_available():
        return None

    try:
        result = subprocess.run([
            "exiftool",
            "-s3",
            "-d", TIMESTAMP_FORMAT,
            "-DateTimeOriginal",
            str(file_path)],
            capture_output=True, text=True, check=True
        )
    except subprocess.CalledProcessError as e:
        logger.debug(f"exiftool failed for {file_path}: {e}")
        return None
    except OSError as e:
        logger.debug(f"Could not run exiftool for {file_path}: {e}")
        return None

    # exiftool prints one line per file; keep the first non-empty one
    lines = [line for line in result.stdout.splitlines() if line.strip()]
    timestamp = normalize_timestamp(lines[0]) if lines else None
    if timestamp is None:
        logger.debug(f"No usable DateTimeOriginal for {file_path}: {result.stdout.strip()!r}")
    return timestamp
