"""Tests for duplicate-marker relabelling."""

import pytest

from takeout_reconcile.reconciler.duplicates import (
    DuplicateMarker,
    find_marked_files,
    parse_duplicate_marker,
    reconcile_duplicates,
    relabel,
)


class TestParseDuplicateMarker:
    """Tests for parse_duplicate_marker()."""

    def test_marked_name(self):
        marker = parse_duplicate_marker("IMG_1.jpg-1700000000000-duplicate")
        assert marker == DuplicateMarker(timestamp="1700000000000", original_name="IMG_1.jpg")
        assert marker.relabeled_name == "duplicate-1700000000000-IMG_1.jpg"

    @pytest.mark.parametrize("name", [
        "IMG_1.jpg",
        "IMG_1-duplicate.jpg",
        "IMG_1.jpg-duplicate",
        "IMG_1.jpg-abc-duplicate",
        "IMG_1.jpg-1700000000000-duplicate.jpg",
        "duplicate-1700000000000-IMG_1.jpg",
    ])
    def test_unmarked_names(self, name):
        assert parse_duplicate_marker(name) is None

    def test_only_last_marker_is_parsed(self):
        marker = parse_duplicate_marker("IMG_1.jpg-1-duplicate-2-duplicate")
        assert marker.timestamp == "2"
        assert marker.original_name == "IMG_1.jpg-1-duplicate"


class TestRelabel:
    """Tests for relabel()."""

    def test_relabels_media(self):
        assert relabel("IMG_1.jpg-42-duplicate") == "duplicate-42-IMG_1.jpg"

    def test_relabels_sidecar(self):
        assert relabel("IMG_1.jpg.json-42-duplicate") == "duplicate-42-IMG_1.jpg.json"

    def test_unmarked_name_unchanged(self):
        assert relabel("IMG_1.jpg") == "IMG_1.jpg"

    def test_relabelled_name_is_stable(self):
        once = relabel("IMG_1.jpg-42-duplicate")
        assert relabel(once) == once


class TestReconcileDuplicates:
    """Tests for in-place renaming of marked files."""

    def test_renames_in_place(self, tmp_path, media):
        album = tmp_path / "Album"
        media(album / "IMG_1.jpg")
        media(album / "IMG_1.jpg-1700000000000-duplicate")

        renamed = reconcile_duplicates(tmp_path)

        assert renamed == 1
        assert sorted(p.name for p in album.iterdir()) == [
            "IMG_1.jpg",
            "duplicate-1700000000000-IMG_1.jpg",
        ]

    def test_keeps_file_content(self, tmp_path, media):
        media(tmp_path / "IMG_1.jpg-5-duplicate", b"incoming")

        reconcile_duplicates(tmp_path)

        assert (tmp_path / "duplicate-5-IMG_1.jpg").read_bytes() == b"incoming"

    def test_renames_nested_directories(self, tmp_path, media):
        media(tmp_path / "a" / "b" / "x.png-1-duplicate")
        media(tmp_path / "c" / "y.mp4-2-duplicate")

        assert reconcile_duplicates(tmp_path) == 2
        assert (tmp_path / "a" / "b" / "duplicate-1-x.png").exists()
        assert (tmp_path / "c" / "duplicate-2-y.mp4").exists()

    def test_second_run_renames_nothing(self, tmp_path, media):
        media(tmp_path / "IMG_1.jpg-1700000000000-duplicate")

        assert reconcile_duplicates(tmp_path) == 1
        assert reconcile_duplicates(tmp_path) == 0
        assert find_marked_files(tmp_path) == []

    def test_no_marked_files(self, tmp_path, media, caplog):
        media(tmp_path / "IMG_1.jpg")

        with caplog.at_level("INFO"):
            assert reconcile_duplicates(tmp_path) == 0

        assert "There are no backup files created by rsync" in caplog.text

    def test_missing_directory(self, tmp_path):
        assert reconcile_duplicates(tmp_path / "missing") == 0
