"""Takeout archive discovery and extraction."""

import logging
import shutil
import tarfile
import zipfile
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .base import ArchiveExtractor

logger = logging.getLogger(__name__)


class ArchiveFormat(Enum):
    """Supported archive formats."""
    ZIP = ".zip"
    TAR_GZ = ".tar.gz"
    TGZ = ".tgz"


def detect_format(path: Path) -> Optional[ArchiveFormat]:
    """Detect archive format from the file name, or None if unsupported."""
    name = path.name.lower()
    for fmt in ArchiveFormat:
        if name.endswith(fmt.value):
            return fmt
    return None


def extraction_dir_for(archive: Path) -> Path:
    """Sibling directory named after the archive without its extension.

    ``takeout-001.zip`` -> ``takeout-001``
    """
    fmt = detect_format(archive)
    name = archive.name[:-len(fmt.value)] if fmt else archive.stem
    return archive.with_name(name)


def discover_archives(directory: Path, prefix: str = "takeout") -> List[Path]:
    """List supported archives directly inside ``directory`` whose names start with ``prefix``.

    Sorted by name so that split exports (-001, -002, ...) extract in order.
    """
    if not directory.exists():
        return []
    archives = [
        path for path in directory.iterdir()
        if path.is_file() and path.name.startswith(prefix) and detect_format(path)
    ]
    return sorted(archives, key=lambda p: p.name)


def is_safe_path(base_dir: Path, member_path: str) -> bool:
    """Check that an archive member stays inside ``base_dir`` (no path traversal)."""
    target_path = (base_dir / member_path).resolve()
    base = base_dir.resolve()
    return target_path == base or base in target_path.parents


class TakeoutArchiveExtractor(ArchiveExtractor):
    """Extracts ZIP and gzipped TAR exports in-process."""

    def __init__(self, remove_archive: bool = True):
        self.remove_archive = remove_archive

    def extract(self, archive: Path, target_dir: Path) -> Path:
        archive = Path(archive)
        target_dir = Path(target_dir)
        fmt = detect_format(archive)
        if fmt is None:
            raise ValueError(f"Unsupported archive format: {archive}")

        logger.info(f"Extracting {archive.name} to {target_dir.name} directory")
        target_dir.mkdir(parents=True, exist_ok=True)

        if fmt is ArchiveFormat.ZIP:
            count = self._extract_zip(archive, target_dir)
        else:
            count = self._extract_tar(archive, target_dir)

        logger.debug(f"Extracted archive: {{'archive': {archive.name!r}, 'files': {count}}}")

        if self.remove_archive:
            archive.unlink()
        return target_dir

    def _extract_zip(self, archive_path: Path, extract_to: Path) -> int:
        count = 0
        with zipfile.ZipFile(archive_path, 'r') as zip_ref:
            for info in zip_ref.infolist():
                if not is_safe_path(extract_to, info.filename):
                    logger.warning(f"Skipping unsafe path: {info.filename}")
                    continue

                target_path = extract_to / info.filename
                if info.is_dir():
                    target_path.mkdir(parents=True, exist_ok=True)
                    continue

                target_path.parent.mkdir(parents=True, exist_ok=True)
                with zip_ref.open(info) as source, open(target_path, 'wb') as target:
                    shutil.copyfileobj(source, target)
                count += 1
        return count

    def _extract_tar(self, archive_path: Path, extract_to: Path) -> int:
        count = 0
        with tarfile.open(archive_path, 'r:gz') as tar_ref:
            for member in tar_ref.getmembers():
                if not is_safe_path(extract_to, member.name):
                    logger.warning(f"Skipping unsafe path: {member.name}")
                    continue
                if not (member.isfile() or member.isdir()):
                    continue
                tar_ref.extract(member, extract_to, filter='data')
                if member.isfile():
                    count += 1
        return count
