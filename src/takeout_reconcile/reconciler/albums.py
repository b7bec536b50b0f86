"""Removal of album directories left without media after a merge."""

import logging
import shutil
from pathlib import Path
from typing import List

from .sidecar_matcher import is_hidden, is_sidecar

logger = logging.getLogger(__name__)


def is_exhausted_album(directory: Path) -> bool:
    """True if ``directory`` directly holds nothing but dotfiles and JSON sidecars.

    Subdirectories count as content.
    """
    for entry in directory.iterdir():
        if entry.is_dir() and not is_hidden(entry):
            return False
        if not (is_hidden(entry) or is_sidecar(entry)):
            return False
    return True


def prune_empty_albums(photos_dir: Path) -> List[Path]:
    """Delete album directories of ``photos_dir`` that have no media left.

    Args:
        photos_dir: Library root whose immediate subdirectories are albums

    Returns:
        Deleted album directories
    """
    photos_dir = Path(photos_dir)
    if not photos_dir.exists():
        return []

    pruned = []
    for album in sorted(p for p in photos_dir.iterdir() if p.is_dir()):
        if is_exhausted_album(album):
            logger.info(f"Deleting empty {album.name} directory")
            shutil.rmtree(album)
            pruned.append(album)
    return pruned
