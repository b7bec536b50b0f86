"""Tests for recursive directory listing."""

from takeout_reconcile.reconciler.walker import FileEntry, list_files, walk


def test_walk_lists_files_and_directories(tmp_path):
    (tmp_path / "album").mkdir()
    (tmp_path / "album" / "IMG_1.jpg").write_bytes(b"x")
    (tmp_path / "top.txt").write_text("x")

    entries = set(walk(tmp_path))

    assert entries == {
        FileEntry(tmp_path / "album", True),
        FileEntry(tmp_path / "album" / "IMG_1.jpg", False),
        FileEntry(tmp_path / "top.txt", False),
    }


def test_walk_includes_hidden_files(tmp_path):
    (tmp_path / ".DS_Store").write_bytes(b"x")

    assert walk(tmp_path) == [FileEntry(tmp_path / ".DS_Store", False)]


def test_walk_missing_root(tmp_path):
    assert walk(tmp_path / "missing") == []


def test_list_files_excludes_directories(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "b" / "c.jpg").write_bytes(b"x")

    assert list_files(tmp_path) == [tmp_path / "a" / "b" / "c.jpg"]


def test_list_files_reflects_disk_changes(tmp_path):
    (tmp_path / "a.jpg").write_bytes(b"x")
    assert list_files(tmp_path) == [tmp_path / "a.jpg"]

    (tmp_path / "a.jpg").rename(tmp_path / "b.jpg")
    assert list_files(tmp_path) == [tmp_path / "b.jpg"]
