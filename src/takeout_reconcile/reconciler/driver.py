"""Reconciliation run: extract, merge, relabel, match, stamp, merge, prune.

Every step runs to completion before the next starts. Steps whose input
directory does not exist yet have nothing to do and are skipped.
"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, List, Optional

from takeout_reconcile.collaborators.base import (
    ArchiveExtractor,
    RunMarker,
    TimestampStamper,
    TreeMerger,
)
from takeout_reconcile.collaborators.extractor import discover_archives, extraction_dir_for
from takeout_reconcile.common import LogContext

from .albums import prune_empty_albums
from .config import ReconcilerConfig
from .duplicates import reconcile_duplicates
from .progress import ProgressCallback
from .sidecar_matcher import match_sidecars
from .timestamps import apply_timestamps
from .walker import list_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelinePaths:
    """Every location a run touches, resolved once at startup."""
    working_dir: Path
    photos_dir: Path
    merge_dir: Path
    merge_photos_dir: Path
    run_marker_file: Path
    archive_prefix: str = "takeout"

    @classmethod
    def from_config(cls, working_dir: Path, config: ReconcilerConfig) -> "PipelinePaths":
        working_dir = Path(working_dir).resolve()
        merge_dir = working_dir / config.paths.merge_dir_name
        return cls(
            working_dir=working_dir,
            photos_dir=working_dir / config.paths.photos_dir_name,
            merge_dir=merge_dir,
            merge_photos_dir=merge_dir / config.paths.takeout_photos_subpath,
            run_marker_file=working_dir / config.paths.run_marker_name,
            archive_prefix=config.paths.archive_prefix,
        )


@dataclass
class RunSummary:
    """Counts of what a run did."""
    archives_extracted: int = 0
    takeouts_merged: int = 0
    import_duplicates_renamed: int = 0
    media_matched: int = 0
    media_stamped: int = 0
    albums_merged: int = 0
    library_duplicates_renamed: int = 0
    albums_pruned: List[Path] = field(default_factory=list)
    run_marker: Optional[Path] = None


class ReconciliationDriver:
    """Runs one reconciliation over a working directory.

    The driver holds no tree state between steps; each step walks the disk
    again because the merge collaborator changes it underneath.
    """

    def __init__(
        self,
        paths: PipelinePaths,
        extractor: ArchiveExtractor,
        merger: TreeMerger,
        stamper: TimestampStamper,
        run_marker: RunMarker,
        tz: Optional[tzinfo] = None,
        progress_callback: Optional[ProgressCallback] = None,
        progress_log_interval: int = 100,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.paths = paths
        self.extractor = extractor
        self.merger = merger
        self.stamper = stamper
        self.run_marker = run_marker
        self.tz = tz
        self.progress_callback = progress_callback
        self.progress_log_interval = progress_log_interval
        self.clock = clock

    def run(self) -> RunSummary:
        """Run every step in order.

        Raises:
            UnmatchedSidecarError: Some imported media has no sidecar; nothing was stamped
            SidecarParseError: A matched sidecar has no usable timestamp
            CollaboratorError: Extraction, merge or stamping failed
        """
        summary = RunSummary()

        self.create_photos_dir()
        summary.archives_extracted = self.extract_takeouts()
        summary.takeouts_merged = self.merge_takeouts()

        with LogContext(logger, stage="import"):
            summary.import_duplicates_renamed = reconcile_duplicates(self.paths.merge_dir)
            summary.media_matched, summary.media_stamped = self.fix_metadata(self.paths.merge_photos_dir)

        summary.albums_merged = self.merge_photos()

        with LogContext(logger, stage="library"):
            summary.library_duplicates_renamed = reconcile_duplicates(self.paths.photos_dir)
            summary.albums_pruned = prune_empty_albums(self.paths.photos_dir)

        self.delete_merge_dir()
        summary.run_marker = self.run_marker.write(self.clock())

        logger.info(f"Run complete: {summary}")
        return summary

    def create_photos_dir(self) -> None:
        self.paths.photos_dir.mkdir(parents=True, exist_ok=True)

    def extract_takeouts(self) -> int:
        """Extract every takeout archive in the working directory next to itself."""
        archives = discover_archives(self.paths.working_dir, self.paths.archive_prefix)
        if not archives:
            logger.info("There are no Google Takeout archive files")
            return 0

        for archive in archives:
            self.extractor.extract(archive, extraction_dir_for(archive))
        return len(archives)

    def merge_takeouts(self) -> int:
        """Merge every extracted takeout directory into the scratch merge directory."""
        working_dir = self.paths.working_dir
        takeouts = sorted(
            p for p in working_dir.iterdir()
            if p.is_dir() and p.name.startswith(self.paths.archive_prefix)
        )
        if not takeouts:
            logger.info("There are no Google Takeout directories")
            return 0

        for takeout in takeouts:
            self.merger.merge(takeout, self.paths.merge_dir)
        return len(takeouts)

    def fix_metadata(self, directory: Path) -> tuple[int, int]:
        """Match sidecars for every media file under ``directory`` and stamp them.

        Nothing is stamped unless every media file has a sidecar.

        Returns:
            Tuple of (matched, stamped)
        """
        result = match_sidecars(list_files(directory))
        result.raise_if_incomplete()

        stamped = apply_timestamps(
            result.pairs,
            self.stamper,
            tz=self.tz,
            progress_callback=self.progress_callback,
            log_interval=self.progress_log_interval,
        )
        return len(result.pairs), stamped

    def merge_photos(self) -> int:
        """Merge the imported albums into the library one album at a time."""
        source = self.paths.merge_photos_dir
        if not source.exists():
            return 0

        albums = sorted(p for p in source.iterdir() if p.is_dir())
        for album in albums:
            self.merger.merge(album, self.paths.photos_dir / album.name)
        return len(albums)

    def delete_merge_dir(self) -> None:
        if not self.paths.merge_dir.exists():
            return
        logger.info(f"Deleting {self.paths.merge_dir.name} directory")
        shutil.rmtree(self.paths.merge_dir)
