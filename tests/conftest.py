"""Shared fixtures: in-memory stand-ins for the external collaborators."""

import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

import pytest

from takeout_reconcile.collaborators.base import (
    ArchiveExtractor,
    RunMarker,
    TimestampStamper,
    TreeMerger,
)


class RecordingStamper(TimestampStamper):
    """Records every stamp call instead of running SetFile."""

    def __init__(self):
        self.calls: List[Tuple[Path, str, str]] = []

    def stamp(self, path: Path, date_string: str, time_string: str) -> None:
        self.calls.append((Path(path), date_string, time_string))


class MovingTreeMerger(TreeMerger):
    """Pure-Python merge with rsync --backup semantics.

    Dotfiles stay behind, a colliding destination file is renamed with a
    ``-<ms>-duplicate`` suffix, and the source tree is deleted afterwards.
    """

    def __init__(self, start_ms: int = 1700000000000):
        self.next_ms = start_ms
        self.merges: List[Tuple[Path, Path]] = []

    def merge(self, source_dir: Path, dest_dir: Path) -> None:
        self.merges.append((Path(source_dir), Path(dest_dir)))
        suffix = f"-{self.next_ms}-duplicate"
        self.next_ms += 1

        for path in sorted(Path(source_dir).rglob("*")):
            if not path.is_file() or path.name.startswith("."):
                continue
            target = Path(dest_dir) / path.relative_to(source_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.exists():
                target.rename(target.with_name(target.name + suffix))
            shutil.move(str(path), str(target))

        shutil.rmtree(source_dir)


class CopyingExtractor(ArchiveExtractor):
    """Pretends to extract: copies a prepared tree and deletes the archive."""

    def __init__(self, trees: dict):
        self.trees = trees
        self.extracted: List[Path] = []

    def extract(self, archive: Path, target_dir: Path) -> Path:
        shutil.copytree(self.trees[archive.name], target_dir, dirs_exist_ok=True)
        archive.unlink()
        self.extracted.append(archive)
        return target_dir


class MemoryRunMarker(RunMarker):
    def __init__(self):
        self.writes: List[datetime] = []

    def write(self, completed_at: datetime) -> Path:
        self.writes.append(completed_at)
        return Path("last-takeout.txt")


def write_sidecar(path: Path, timestamp="1609459200") -> Path:
    """Write a Takeout-style JSON sidecar."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "title": path.name,
        "photoTakenTime": {
            "timestamp": timestamp,
            "formatted": "Jan 1, 2021, 12:00:00 AM UTC",
        },
    }), encoding="utf-8")
    return path


def write_media(path: Path, content: bytes = b"\xff\xd8\xff") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def stamper():
    return RecordingStamper()


@pytest.fixture
def merger():
    return MovingTreeMerger()


@pytest.fixture
def run_marker():
    return MemoryRunMarker()


@pytest.fixture
def media():
    """Factory fixture: media(path) creates a small media file."""
    return write_media


@pytest.fixture
def sidecar():
    """Factory fixture: sidecar(path, timestamp=...) creates a JSON sidecar."""
    return write_sidecar
