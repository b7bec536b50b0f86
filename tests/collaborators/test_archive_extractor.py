"""Tests for Takeout archive discovery and extraction."""

import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from takeout_reconcile.collaborators.extractor import (
    ArchiveFormat,
    TakeoutArchiveExtractor,
    detect_format,
    discover_archives,
    extraction_dir_for,
    is_safe_path,
)


def make_zip(path: Path, members: dict) -> Path:
    with zipfile.ZipFile(path, 'w') as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


def make_tgz(path: Path, members: dict) -> Path:
    with tarfile.open(path, 'w:gz') as tf:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tf.addfile(info, io.BytesIO(content))
    return path


class TestDetectFormat:

    @pytest.mark.parametrize("name,expected", [
        ("takeout-001.zip", ArchiveFormat.ZIP),
        ("takeout-001.ZIP", ArchiveFormat.ZIP),
        ("takeout-001.tar.gz", ArchiveFormat.TAR_GZ),
        ("takeout-001.tgz", ArchiveFormat.TGZ),
        ("takeout-001.7z", None),
        ("takeout-001", None),
    ])
    def test_detect(self, name, expected):
        assert detect_format(Path(name)) is expected

    @pytest.mark.parametrize("name,expected", [
        ("takeout-001.zip", "takeout-001"),
        ("takeout-001.tar.gz", "takeout-001"),
        ("takeout-001.tgz", "takeout-001"),
    ])
    def test_extraction_dir(self, tmp_path, name, expected):
        assert extraction_dir_for(tmp_path / name) == tmp_path / expected


class TestDiscoverArchives:

    def test_lists_matching_archives_in_order(self, tmp_path):
        for name in ["takeout-002.zip", "takeout-001.tgz", "notes.zip", "takeout-003.txt"]:
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "takeout-004.zip").mkdir()

        names = [p.name for p in discover_archives(tmp_path)]

        assert names == ["takeout-001.tgz", "takeout-002.zip"]

    def test_custom_prefix(self, tmp_path):
        (tmp_path / "export-1.zip").write_bytes(b"")
        (tmp_path / "takeout-1.zip").write_bytes(b"")

        assert [p.name for p in discover_archives(tmp_path, "export")] == ["export-1.zip"]

    def test_missing_directory(self, tmp_path):
        assert discover_archives(tmp_path / "missing") == []


class TestPathSafety:

    def test_safe_member(self, tmp_path):
        assert is_safe_path(tmp_path, "Takeout/Google Photos/a.jpg")

    def test_traversal(self, tmp_path):
        assert not is_safe_path(tmp_path, "../escape.txt")
        assert not is_safe_path(tmp_path, "Takeout/../../escape.txt")


class TestTakeoutArchiveExtractor:

    MEMBERS = {
        "Takeout/Google Photos/Album/IMG_1.jpg": b"jpeg",
        "Takeout/Google Photos/Album/IMG_1.jpg.json": b"{}",
    }

    def test_extracts_zip_and_removes_archive(self, tmp_path):
        archive = make_zip(tmp_path / "takeout-001.zip", self.MEMBERS)

        target = TakeoutArchiveExtractor().extract(archive, extraction_dir_for(archive))

        assert target == tmp_path / "takeout-001"
        assert (target / "Takeout/Google Photos/Album/IMG_1.jpg").read_bytes() == b"jpeg"
        assert (target / "Takeout/Google Photos/Album/IMG_1.jpg.json").exists()
        assert not archive.exists()

    def test_extracts_tgz(self, tmp_path):
        archive = make_tgz(tmp_path / "takeout-001.tgz", self.MEMBERS)

        target = TakeoutArchiveExtractor().extract(archive, extraction_dir_for(archive))

        assert (target / "Takeout/Google Photos/Album/IMG_1.jpg").read_bytes() == b"jpeg"
        assert not archive.exists()

    def test_keeps_archive_when_asked(self, tmp_path):
        archive = make_zip(tmp_path / "takeout-001.zip", self.MEMBERS)

        TakeoutArchiveExtractor(remove_archive=False).extract(archive, tmp_path / "out")

        assert archive.exists()

    def test_skips_unsafe_zip_members(self, tmp_path):
        archive = make_zip(tmp_path / "takeout-001.zip", {
            "../escape.txt": b"x",
            "Takeout/ok.txt": b"ok",
        })

        target = TakeoutArchiveExtractor().extract(archive, tmp_path / "out")

        assert (target / "Takeout" / "ok.txt").exists()
        assert not (tmp_path / "escape.txt").exists()

    def test_rejects_unsupported_format(self, tmp_path):
        archive = tmp_path / "takeout-001.7z"
        archive.write_bytes(b"7z")

        with pytest.raises(ValueError):
            TakeoutArchiveExtractor().extract(archive, tmp_path / "out")
        assert archive.exists()

    def test_keeps_member_names_verbatim(self, tmp_path):
        archive = make_zip(tmp_path / "takeout-001.zip", {"Takeout/Album: Best/a.jpg": b"x"})

        target = TakeoutArchiveExtractor().extract(archive, tmp_path / "out")

        assert (target / "Takeout" / "Album: Best" / "a.jpg").read_bytes() == b"x"
