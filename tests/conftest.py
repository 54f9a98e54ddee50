"""
pytest configuration and fixtures for mediasort tests.
"""

import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from mediasort.config import SortOptions


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


@pytest.fixture
def test_config_path(tmp_path):
    """Test-specific config path so runs never touch ~/.mediasort."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir / "config.yml"


@pytest.fixture
def fake_timestamps(monkeypatch):
    """Replace the exiftool reader with a filename -> timestamp mapping.

    Files whose name is not in the mapping are treated as undated.
    """

    def install(mapping: Dict[str, Optional[str]]) -> None:
        def reader(file_path: Path) -> Optional[str]:
            return mapping.get(file_path.name)
        monkeypatch.setattr("mediasort.core.get_capture_timestamp", reader)

    return install


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None):
        """Run mediasort CLI with given arguments.

        Returns:
            CliResult with exit_code, output, and error
        """
        from mediasort.cli import main
        from mediasort.constants import get_console

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        old_argv = sys.argv
        stdout = io.StringIO()
        stderr = io.StringIO()

        # Wide enough that long temporary paths in log lines are not folded
        console = get_console()
        old_width = console.width
        console.width = 400

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.argv = ['mediasort'] + [str(a) for a in args]

            exit_code = main(config_path=config_path)

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            sys.argv = old_argv
            console.width = old_width

    return run_cli


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific contents."""

    def create_files(file_specs: List[dict], root: str = "source") -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: path relative to the root directory
                - content: file content (optional)

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / root
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', f"content of {spec['name']}".encode())
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

        return test_dir

    return create_files


@pytest.fixture
def make_options(tmp_path):
    """Build SortOptions rooted in the test's temporary directory."""

    def build(**overrides) -> SortOptions:
        values = {
            "source": tmp_path / "source",
            "output": tmp_path / "output",
        }
        values.update(overrides)
        return SortOptions(**values)

    return build


@pytest.fixture
def tree_snapshot():
    """Map of relative path -> bytes for every file under a directory."""

    def snapshot(root: Path) -> Dict[str, bytes]:
        if not root.exists():
            return {}
        return {
            str(path.relative_to(root)): path.read_bytes()
            for path in sorted(root.rglob("*")) if path.is_file()
        }

    return snapshot


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {"2023-07": {"jpg": ["20230715_120000.jpg"]}}
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"

                if isinstance(value, dict):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    check_level(item_path, value)
                elif isinstance(value, list):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
