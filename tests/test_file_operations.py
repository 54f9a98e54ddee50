"""
Test non-clobbering transfers, dry-run gating and sidecar propagation.
"""

import pytest

from mediasort.file_operations import FileOperations


class TestTransfer:
    """Test copy and move of primary files."""

    def test_copy_creates_directories_and_keeps_source(self, tmp_path):
        source = tmp_path / "a.jpg"
        source.write_bytes(b"photo")
        dest = tmp_path / "out" / "2023-07" / "jpg" / "20230715_120000.jpg"

        FileOperations(dry_run=False, move_files=False).transfer(source, dest)

        assert dest.read_bytes() == b"photo"
        assert source.exists()

    def test_move_removes_source(self, tmp_path):
        source = tmp_path / "a.jpg"
        source.write_bytes(b"photo")
        dest = tmp_path / "out" / "20230715_120000.jpg"

        FileOperations(dry_run=False, move_files=True).transfer(source, dest)

        assert dest.read_bytes() == b"photo"
        assert not source.exists()

    def test_never_overwrites(self, tmp_path):
        source = tmp_path / "a.jpg"
        source.write_bytes(b"new")
        dest = tmp_path / "20230715_120000.jpg"
        dest.write_bytes(b"old")

        with pytest.raises(FileExistsError):
            FileOperations(dry_run=False, move_files=True).transfer(source, dest)

        assert dest.read_bytes() == b"old"
        assert source.exists()

    def test_dry_run_changes_nothing(self, tmp_path):
        source = tmp_path / "a.jpg"
        source.write_bytes(b"photo")
        dest = tmp_path / "out" / "2023-07" / "jpg" / "20230715_120000.jpg"
        file_ops = FileOperations(dry_run=True, move_files=True)

        file_ops.transfer(source, dest)

        assert source.exists()
        assert not (tmp_path / "out").exists()
        # Planned placements are visible to later decisions
        assert file_ops.exists(dest)
        assert file_ops.checksum(dest) == FileOperations.file_checksum(source)

    def test_dry_run_refuses_planned_target(self, tmp_path):
        first = tmp_path / "a.jpg"
        second = tmp_path / "b.jpg"
        first.write_bytes(b"one")
        second.write_bytes(b"two")
        dest = tmp_path / "out" / "x.jpg"
        file_ops = FileOperations(dry_run=True, move_files=False)

        file_ops.transfer(first, dest)
        with pytest.raises(FileExistsError):
            file_ops.transfer(second, dest)


class TestSidecars:
    """Test sidecar copies next to raw files."""

    def test_sidecar_copied_under_target_name(self, tmp_path):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")
        (tmp_path / "raw1.xmp").write_bytes(b"<xmp/>")
        dest = tmp_path / "out" / "20230715_120000.cr2"
        file_ops = FileOperations(dry_run=False, move_files=True)

        file_ops.transfer(source, dest)
        copied = file_ops.copy_sidecars(source, dest, (".xmp",))

        assert copied == [tmp_path / "out" / "20230715_120000.xmp"]
        assert (tmp_path / "out" / "20230715_120000.xmp").read_bytes() == b"<xmp/>"
        # Sidecars are copied, never moved
        assert (tmp_path / "raw1.xmp").exists()

    def test_uppercase_sidecar_found(self, tmp_path):
        source = tmp_path / "RAW1.CR2"
        source.write_bytes(b"raw")
        (tmp_path / "RAW1.XMP").write_bytes(b"<xmp/>")
        dest = tmp_path / "out" / "20230715_120000.cr2"
        dest.parent.mkdir()

        copied = FileOperations(dry_run=False, move_files=False).copy_sidecars(source, dest, (".xmp",))

        assert copied == [tmp_path / "out" / "20230715_120000.xmp"]

    def test_mixed_case_sidecar_found(self, tmp_path):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")
        (tmp_path / "raw1.Xmp").write_bytes(b"<xmp/>")
        (tmp_path / "raw10.xmp").write_bytes(b"<other/>")
        dest = tmp_path / "out" / "20230715_120000.cr2"
        dest.parent.mkdir()

        copied = FileOperations(dry_run=False, move_files=False).copy_sidecars(source, dest, (".xmp",))

        assert copied == [tmp_path / "out" / "20230715_120000.xmp"]
        assert (tmp_path / "out" / "20230715_120000.xmp").read_bytes() == b"<xmp/>"

    def test_no_sidecar(self, tmp_path):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")

        copied = FileOperations(dry_run=False, move_files=False).copy_sidecars(
            source, tmp_path / "out" / "x.cr2", (".xmp",))

        assert copied == []

    def test_existing_sidecar_not_overwritten(self, tmp_path):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")
        (tmp_path / "raw1.xmp").write_bytes(b"new")
        dest = tmp_path / "out" / "20230715_120000.cr2"
        dest.parent.mkdir()
        (dest.parent / "20230715_120000.xmp").write_bytes(b"old")

        copied = FileOperations(dry_run=False, move_files=False).copy_sidecars(source, dest, (".xmp",))

        assert copied == []
        assert (dest.parent / "20230715_120000.xmp").read_bytes() == b"old"

    def test_sidecar_failure_is_not_raised(self, tmp_path, monkeypatch):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")
        (tmp_path / "raw1.xmp").write_bytes(b"<xmp/>")
        dest = tmp_path / "out" / "20230715_120000.cr2"

        def failing_copy(src, dst):
            raise PermissionError("read-only destination")

        monkeypatch.setattr("mediasort.file_operations.shutil.copy2", failing_copy)

        copied = FileOperations(dry_run=False, move_files=False).copy_sidecars(source, dest, (".xmp",))

        assert copied == []

    def test_dry_run_sidecar(self, tmp_path):
        source = tmp_path / "raw1.cr2"
        source.write_bytes(b"raw")
        (tmp_path / "raw1.xmp").write_bytes(b"<xmp/>")
        dest = tmp_path / "out" / "20230715_120000.cr2"

        copied = FileOperations(dry_run=True, move_files=False).copy_sidecars(source, dest, (".xmp",))

        assert copied == [tmp_path / "out" / "20230715_120000.xmp"]
        assert not (tmp_path / "out").exists()
