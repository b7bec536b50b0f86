"""Interfaces for the external steps the reconciler drives."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path


class ArchiveExtractor(ABC):
    """Unpacks one export archive."""

    @abstractmethod
    def extract(self, archive: Path, target_dir: Path) -> Path:
        """Extract ``archive`` into ``target_dir`` and remove the archive.

        Returns:
            The directory holding the extracted tree
        """


class TreeMerger(ABC):
    """Moves every file of one tree into another."""

    @abstractmethod
    def merge(self, source_dir: Path, dest_dir: Path) -> None:
        """Move files from ``source_dir`` into ``dest_dir``, keeping relative paths.

        On a name collision both copies are kept: one of them gets a
        ``-<epoch ms>-duplicate`` suffix appended to its full name.
        """


class TimestampStamper(ABC):
    """Sets a file's creation time."""

    @abstractmethod
    def stamp(self, path: Path, date_string: str, time_string: str) -> None:
        """Set the creation time of ``path``.

        Args:
            path: Media file
            date_string: ``M/D/YYYY``
            time_string: ``H:MM:SS`` (24 hour)
        """


class RunMarker(ABC):
    """Records when the last run completed."""

    @abstractmethod
    def write(self, completed_at: datetime) -> Path:
        """Overwrite the marker with ``completed_at`` and return its path."""
