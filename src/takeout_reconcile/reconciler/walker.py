"""Recursive directory listing shared by every reconciliation step."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """A single directory entry seen during a walk.

    Entries are recomputed on every walk; stage directories change between
    steps, so nothing is cached.
    """
    path: Path
    is_dir: bool


def walk(root: Path) -> List[FileEntry]:
    """List every entry under ``root`` recursively.

    Order is not significant. A missing root yields an empty list, since a
    stage directory that does not exist yet simply has nothing to do.

    Symlinked directories are not followed.
    """
    root = Path(root)
    if not root.exists():
        logger.debug(f"Walk root does not exist: {{'path': {str(root)!r}}}")
        return []

    entries: List[FileEntry] = []
    for dirpath, dirnames, filenames in os.walk(root):
        parent = Path(dirpath)
        entries.extend(FileEntry(parent / name, True) for name in dirnames)
        entries.extend(FileEntry(parent / name, False) for name in filenames)
    return entries


def list_files(root: Path) -> List[Path]:
    """List all file paths (no directories) under ``root``."""
    return [entry.path for entry in walk(root) if not entry.is_dir]
