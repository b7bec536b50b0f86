"""Duplicate-marker relabelling.

When rsync merges a takeout into a tree that already holds a file with the
same name, it keeps the existing file and renames the incoming one by
appending ``-<epoch ms>-duplicate`` to the full name:

    IMG_1234.jpg            (already in the destination)
    IMG_1234.jpg-1700000000000-duplicate   (incoming copy)

The suffix has no extension, so extension-based logic would treat such a
file as extensionless and sidecar lookups would go wrong. Every marked file
is renamed in place to ``duplicate-<timestamp>-<original name>``, which keeps
the original extension last and sorts duplicates by conflict time.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .walker import list_files

logger = logging.getLogger(__name__)

DUPLICATE_MARKER_PATTERN = re.compile(r"-([0-9]+)-duplicate$")
DUPLICATE_PREFIX = "duplicate"


@dataclass(frozen=True)
class DuplicateMarker:
    """A parsed ``-<timestamp>-duplicate`` suffix."""
    timestamp: str
    original_name: str

    @property
    def relabeled_name(self) -> str:
        return f"{DUPLICATE_PREFIX}-{self.timestamp}-{self.original_name}"


def parse_duplicate_marker(name: str) -> Optional[DuplicateMarker]:
    """Parse a duplicate marker from a file name.

    Args:
        name: File name (not a full path)

    Returns:
        DuplicateMarker, or None if the name carries no marker

    Example:
        >>> parse_duplicate_marker("IMG_1.jpg-1700000000000-duplicate")
        DuplicateMarker(timestamp='1700000000000', original_name='IMG_1.jpg')
    """
    match = DUPLICATE_MARKER_PATTERN.search(name)
    if match is None:
        return None
    return DuplicateMarker(
        timestamp=match.group(1),
        original_name=name[:match.start()],
    )


def relabel(name: str) -> str:
    """Return the relabelled name for a marked file, or ``name`` unchanged."""
    marker = parse_duplicate_marker(name)
    return marker.relabeled_name if marker else name


def find_marked_files(root: Path) -> List[Path]:
    """List every file under ``root`` whose name ends with a duplicate marker."""
    return [path for path in list_files(root) if DUPLICATE_MARKER_PATTERN.search(path.name)]


def reconcile_duplicates(root: Path) -> int:
    """Rename every marked file under ``root`` in place.

    Running it again on the same tree finds no markers and renames nothing.
    Targets are not checked for collisions: the rsync timestamp is unique per
    merge, so two identical targets would need the same original name and
    the same conflict millisecond.

    Args:
        root: Stage directory to reconcile (missing directories are skipped)

    Returns:
        Number of renamed files
    """
    root = Path(root)
    marked = find_marked_files(root)

    if not marked:
        logger.info(f"There are no backup files created by rsync in {root.name} directory")
        return 0

    for path in marked:
        marker = parse_duplicate_marker(path.name)
        target = path.with_name(marker.relabeled_name)
        logger.debug(f"Relabel duplicate: {{'from': {str(path)!r}, 'to': {target.name!r}}}")
        path.rename(target)

    logger.info(f"Renamed {len(marked)} backup files created by rsync in {root.name} directory")
    return len(marked)
