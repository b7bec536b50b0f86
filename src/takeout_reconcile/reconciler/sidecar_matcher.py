"""JSON sidecar matching for Google Takeout media files.

Google Takeout writes one ``<media name>.json`` sidecar per media file, but
the sidecar name is often not the media name plus ``.json``:

- ``IMG_1234-edited.jpg`` keeps its metadata in ``IMG_1234.jpg.json``
- ``IMG_1234(1).jpg`` uses ``IMG_1234.jpg(1).json`` or ``IMG_1234.jpg.json``
- Live Photo videos (``IMG_1234.MOV``) share ``IMG_1234.HEIC.json``
- Long names are cut to 46 characters before ``.json`` is appended

Each quirk is one row in ``NAME_RULES`` or ``EXTENSION_ALIASES``. For every
media file the rows generate an ordered list of candidate sidecar names,
from the most literal guess to the most speculative one, and the first
candidate present on disk wins.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from takeout_reconcile.common import casefold_path

from .errors import UnmatchedSidecarError

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".json"

# Google Photos never writes a sidecar name longer than this before ".json"
MAX_SIDECAR_NAME_LENGTH = 46

COUNTER_PATTERN = re.compile(r"\(\d+\)")
EDITED_PATTERN = re.compile(re.escape("-edited"))
COLLAGE_PATTERN = re.compile(re.escape("-collage"), re.IGNORECASE)


@dataclass(frozen=True)
class NameRule:
    """One hypothesis about how Takeout derived a sidecar name.

    ``transform`` receives the media stem and extension (with its dot) and
    returns the sidecar name without ``.json``, or None when the rule does
    not apply to this file.
    """
    name: str
    transform: Callable[[str, str], Optional[str]]


@dataclass(frozen=True)
class ExtensionAlias:
    """Replace the first case-insensitive occurrence of one extension."""
    source: str
    target: str

    def apply(self, name: str) -> str:
        return re.sub(re.escape(self.source), self.target, name, count=1, flags=re.IGNORECASE)


def _direct(stem: str, ext: str) -> Optional[str]:
    return stem + ext


def _strip_edited(stem: str, ext: str) -> Optional[str]:
    return EDITED_PATTERN.sub("", stem, count=1) + ext


def _strip_collage(stem: str, ext: str) -> Optional[str]:
    return COLLAGE_PATTERN.sub("", stem, count=1) + ext


def _counter_after_extension(stem: str, ext: str) -> Optional[str]:
    if not COUNTER_PATTERN.search(stem):
        return None
    return COUNTER_PATTERN.sub(lambda m: ext + m.group(0), stem, count=1)


def _strip_counter(stem: str, ext: str) -> Optional[str]:
    return COUNTER_PATTERN.sub("", stem, count=1) + ext


# Order is priority: most literal first
NAME_RULES: Tuple[NameRule, ...] = (
    NameRule("direct", _direct),                                      # file.jpg -> file.jpg.json
    NameRule("strip_edited", _strip_edited),                          # file-edited.jpg -> file.jpg.json
    NameRule("strip_collage", _strip_collage),                        # file-COLLAGE.jpg -> file.jpg.json
    NameRule("counter_after_extension", _counter_after_extension),    # file(1).jpg -> file.jpg(1).json
    NameRule("strip_counter", _strip_counter),                        # file(1).jpg -> file.jpg.json
)

# Tried after the unchanged name, for every NAME_RULES candidate
EXTENSION_ALIASES: Tuple[ExtensionAlias, ...] = (
    ExtensionAlias(".jpg", ".heic"),
    ExtensionAlias(".heic", ".jpg"),
    ExtensionAlias(".mov", ".heic"),  # Live Photo video filed under the still
)


@dataclass(frozen=True)
class MatchedPair:
    """A media file and the sidecar found for it in the same directory."""
    media_path: Path
    sidecar_path: Path


@dataclass
class MatchResult:
    """Outcome of matching every media file in a tree."""
    pairs: List[MatchedPair] = field(default_factory=list)
    unmatched: List[Path] = field(default_factory=list)

    @property
    def media_count(self) -> int:
        return len(self.pairs) + len(self.unmatched)

    @property
    def is_complete(self) -> bool:
        return not self.unmatched

    def raise_if_incomplete(self) -> None:
        """Fail the batch if any media file is unmatched.

        Raises:
            UnmatchedSidecarError: With every unmatched path attached
        """
        if self.unmatched:
            raise UnmatchedSidecarError(self.unmatched)


class SidecarIndex:
    """Case-insensitive set of sidecar paths, built once per tree."""

    def __init__(self, sidecars: Iterable[Path] = ()) -> None:
        self._by_key: Dict[str, Path] = {}
        for path in sidecars:
            self.add(path)

    def add(self, path: Path) -> None:
        self._by_key.setdefault(casefold_path(path), Path(path))

    def lookup(self, path: Path) -> Optional[Path]:
        """Return the on-disk spelling of ``path`` if a sidecar matches."""
        return self._by_key.get(casefold_path(path))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and casefold_path(path) in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def is_sidecar(path: Path) -> bool:
    return path.name.lower().endswith(SIDECAR_SUFFIX)


def partition_files(files: Iterable[Path]) -> Tuple[List[Path], List[Path]]:
    """Split a file list into media files and JSON sidecars.

    Hidden files (leading dot) belong to neither group.

    Returns:
        Tuple of (media_files, sidecar_files)
    """
    media: List[Path] = []
    sidecars: List[Path] = []
    for path in files:
        path = Path(path)
        if is_hidden(path):
            continue
        if is_sidecar(path):
            sidecars.append(path)
        else:
            media.append(path)
    return media, sidecars


def _split_name(name: str) -> Tuple[str, str]:
    """Split a file name into stem and extension the way Takeout sees it.

    A leading dot does not start an extension, matching ``Path.suffix``.
    """
    dot = name.rfind(".")
    if dot <= 0:
        return name, ""
    return name[:dot], name[dot:]


def candidate_names(media_path: Path) -> List[str]:
    """Generate candidate sidecar file names for a media file, in priority order.

    Args:
        media_path: Media file path (only the name is used)

    Returns:
        De-duplicated list of ``<candidate>.json`` file names

    Example:
        >>> candidate_names(Path("IMG_1(1).jpg"))[:3]
        ['IMG_1(1).jpg.json', 'IMG_1(1).heic.json', 'IMG_1.jpg(1).json']
    """
    # Takeout truncates composed (NFC) names; macOS hands out decomposed ones
    name = unicodedata.normalize('NFC', Path(media_path).name)
    stem, ext = _split_name(name)

    names: List[str] = []
    seen = set()
    for rule in NAME_RULES:
        base = rule.transform(stem, ext)
        if base is None:
            continue
        for variant in (base, *(alias.apply(base) for alias in EXTENSION_ALIASES)):
            candidate = variant[:MAX_SIDECAR_NAME_LENGTH] + SIDECAR_SUFFIX
            if candidate not in seen:
                seen.add(candidate)
                names.append(candidate)
    return names


def find_sidecar(media_path: Path, index: SidecarIndex) -> Optional[Path]:
    """Find the sidecar for one media file.

    Candidates are tried in order and the first one present in ``index``
    wins, even when a later candidate also exists.

    Returns:
        Sidecar path as spelled on disk, or None
    """
    media_path = Path(media_path)
    found: Optional[Path] = None
    for name in candidate_names(media_path):
        sidecar = index.lookup(media_path.parent / name)
        if sidecar is None:
            continue
        if found is None:
            found = sidecar
        else:
            logger.debug(
                f"Additional sidecar candidate ignored: {{'media': {str(media_path)!r}, "
                f"'chosen': {found.name!r}, 'ignored': {sidecar.name!r}}}"
            )
            break
    return found


def match_sidecars(files: Iterable[Path]) -> MatchResult:
    """Pair every media file in a file list with its sidecar.

    Unmatched media files are collected rather than raised on, so that a
    single run reports all of them.

    Args:
        files: Every file in one directory tree

    Returns:
        MatchResult with pairs and unmatched media files
    """
    media_files, sidecars = partition_files(files)
    index = SidecarIndex(sidecars)

    result = MatchResult()
    for media_path in sorted(media_files):
        sidecar = find_sidecar(media_path, index)
        if sidecar is None:
            logger.warning(f"Unable to locate the metadata file for {media_path} file")
            result.unmatched.append(media_path)
        else:
            result.pairs.append(MatchedPair(media_path, sidecar))

    logger.info(
        f"Sidecar matching complete: {{'media': {result.media_count}, "
        f"'matched': {len(result.pairs)}, 'unmatched': {len(result.unmatched)}, "
        f"'sidecars': {len(index)}}}"
    )
    return result
