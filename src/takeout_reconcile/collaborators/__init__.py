"""External steps driven by the reconciler: extract, merge, stamp, mark."""

from .base import ArchiveExtractor, TreeMerger, TimestampStamper, RunMarker
from .extractor import TakeoutArchiveExtractor, discover_archives, extraction_dir_for
from .merger import RsyncTreeMerger
from .stamper import SetFileStamper
from .run_marker import TextRunMarker

__all__ = [
    'ArchiveExtractor',
    'TreeMerger',
    'TimestampStamper',
    'RunMarker',
    'TakeoutArchiveExtractor',
    'discover_archives',
    'extraction_dir_for',
    'RsyncTreeMerger',
    'SetFileStamper',
    'TextRunMarker',
]
