"""Capture-time resolution from sidecars and stamping onto media files.

Takeout sidecars carry the capture time as epoch seconds in a string:

    {"photoTakenTime": {"timestamp": "1609459200", "formatted": "..."}}

The value is turned into a point in time in the local zone and handed to the
stamping collaborator as two strings, ``M/D/YYYY`` and ``H:MM:SS`` (24 hour).
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any, Optional, Sequence

from takeout_reconcile.collaborators.base import TimestampStamper

from .errors import SidecarParseError
from .progress import ProgressCallback, ProgressTracker, notify
from .sidecar_matcher import MatchedPair

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD = ("photoTakenTime", "timestamp")


@dataclass(frozen=True)
class ResolvedTimestamp:
    """Capture time of one media file."""
    epoch_seconds: int
    moment: datetime

    @property
    def epoch_ms(self) -> int:
        return self.epoch_seconds * 1000

    @property
    def date_string(self) -> str:
        """Numeric ``month/day/year`` without zero padding, e.g. ``1/1/2021``."""
        return f"{self.moment.month}/{self.moment.day}/{self.moment.year}"

    @property
    def time_string(self) -> str:
        """24-hour ``hour:minute:second``, e.g. ``0:00:00`` or ``13:05:09``."""
        return f"{self.moment.hour}:{self.moment.minute:02d}:{self.moment.second:02d}"


def from_epoch_seconds(epoch_seconds: int, tz: Optional[tzinfo] = None) -> ResolvedTimestamp:
    """Build a ResolvedTimestamp in ``tz``, or the local zone when None."""
    epoch_ms = epoch_seconds * 1000
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    moment = moment.astimezone(tz) if tz is not None else moment.astimezone()
    return ResolvedTimestamp(epoch_seconds=epoch_seconds, moment=moment)


def _extract_field(data: Any, sidecar_path: Path) -> Any:
    value = data
    for key in TIMESTAMP_FIELD:
        if not isinstance(value, dict) or key not in value:
            raise SidecarParseError(
                f"Sidecar has no {'.'.join(TIMESTAMP_FIELD)} field: {sidecar_path}",
                path=str(sidecar_path),
            )
        value = value[key]
    return value


def parse_epoch_seconds(value: Any, sidecar_path: Path) -> int:
    """Parse a sidecar timestamp value as a base-10 integer."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise SidecarParseError(
            f"Sidecar timestamp is not numeric: {sidecar_path}",
            path=str(sidecar_path),
            value=repr(value),
        )
    try:
        return int(str(value).strip(), 10)
    except ValueError as e:
        raise SidecarParseError(
            f"Sidecar timestamp is not numeric: {sidecar_path}",
            path=str(sidecar_path),
            value=repr(value),
        ) from e


def resolve_timestamp(sidecar_path: Path, tz: Optional[tzinfo] = None) -> ResolvedTimestamp:
    """Read a sidecar and resolve its capture time.

    Args:
        sidecar_path: Path to the JSON sidecar
        tz: Zone to express the time in (local zone when None)

    Returns:
        ResolvedTimestamp

    Raises:
        SidecarParseError: If the file is not JSON or lacks a numeric timestamp
    """
    sidecar_path = Path(sidecar_path)
    try:
        with open(sidecar_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SidecarParseError(
            f"Sidecar is not valid JSON: {sidecar_path}",
            path=str(sidecar_path),
            error=str(e),
        ) from e

    value = _extract_field(data, sidecar_path)
    return from_epoch_seconds(parse_epoch_seconds(value, sidecar_path), tz=tz)


def apply_timestamps(
    pairs: Sequence[MatchedPair],
    stamper: TimestampStamper,
    tz: Optional[tzinfo] = None,
    progress_callback: Optional[ProgressCallback] = None,
    log_interval: int = 100,
) -> int:
    """Stamp every media file with the capture time from its sidecar.

    One collaborator call per file, in order. Parse and stamping errors
    propagate and stop the batch; files stamped before the failure stay
    stamped.

    Args:
        pairs: Matched media/sidecar pairs
        stamper: Timestamp stamping collaborator
        tz: Zone for the date and time strings (local zone when None)
        progress_callback: Optional callback(current, total, media_path)
        log_interval: Log a progress line every N files

    Returns:
        Number of stamped files
    """
    total = len(pairs)
    tracker = ProgressTracker(total, action="Updated metadata of", log_interval=log_interval)

    for current, pair in enumerate(pairs, start=1):
        resolved = resolve_timestamp(pair.sidecar_path, tz=tz)
        notify(progress_callback, current, total, str(pair.media_path))
        stamper.stamp(pair.media_path, resolved.date_string, resolved.time_string)
        tracker.increment()

    if total:
        tracker.log_final_summary()
    return total

