"""
Configuration management for mediasort.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import yaml

from .constants import MEDIA_EXTENSIONS, PROGRAM, RAW_EXTENSIONS, SIDECAR_EXTENSIONS


def normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """Lowercase extensions and make sure each one carries a leading dot."""
    normalized = []
    for ext in extensions:
        ext = str(ext).strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


@dataclass(frozen=True)
class SortOptions:
    """Immutable run-level options shared by every pipeline stage."""
    source: Path
    output: Path
    recursive: bool = False
    move_files: bool = True
    dry_run: bool = False
    include_uncategorized: bool = False
    skip_duplicates: bool = False
    ignore_file: Optional[Path] = None
    extensions: Tuple[str, ...] = MEDIA_EXTENSIONS
    raw_extensions: Tuple[str, ...] = RAW_EXTENSIONS
    sidecar_extensions: Tuple[str, ...] = SIDECAR_EXTENSIONS

    @property
    def mode_label(self) -> str:
        if self.dry_run:
            return "DRY RUN"
        return "MOVE" if self.move_files else "COPY"


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(PROGRAM).warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            logging.getLogger(PROGRAM).warning(
                f"Ignoring config {self.config_path}: expected a mapping")
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except OSError as e:
            logging.getLogger(PROGRAM).error(f"Could not save config: {e}")

    def get_last_source(self) -> Optional[str]:
        """Get the last used source directory."""
        return self.data.get('last_source')

    def get_last_output(self) -> Optional[str]:
        """Get the last used output directory."""
        return self.data.get('last_output')

    def _get_extensions(self, key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
        value = self.data.get(key)
        if not value:
            return default
        if isinstance(value, str):
            value = value.split(",")
        return normalize_extensions(value) or default

    def get_extensions(self) -> Tuple[str, ...]:
        """Get the media extensions to process."""
        return self._get_extensions('extensions', MEDIA_EXTENSIONS)

    def get_raw_extensions(self) -> Tuple[str, ...]:
        """Get the extensions whose sidecars are propagated."""
        return self._get_extensions('raw_extensions', RAW_EXTENSIONS)

    def get_sidecar_extensions(self) -> Tuple[str, ...]:
        """Get the sidecar extensions copied alongside raw files."""
        return self._get_extensions('sidecar_extensions', SIDECAR_EXTENSIONS)

    def update_paths(self, source: str, output: str) -> None:
        """Update and save the last used paths."""
        self.data['last_source'] = source
        self.data['last_output'] = output
        self.save_config()
