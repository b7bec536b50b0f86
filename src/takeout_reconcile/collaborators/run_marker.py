"""Plain-text marker recording when the last run finished."""

from datetime import datetime
from pathlib import Path

from .base import RunMarker


def format_completion_time(moment: datetime) -> str:
    """Format like ``October 19, 2026, 2:05:09 PM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment:%B} {moment.day}, {moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


class TextRunMarker(RunMarker):
    """Overwrites a single text file on every run."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def write(self, completed_at: datetime) -> Path:
        self.path.write_text(format_completion_time(completed_at), encoding='utf-8')
        return self.path

    def read(self) -> str | None:
        """Return the recorded completion time, or None before the first run."""
        if not self.path.exists():
            return None
        return self.path.read_text(encoding='utf-8')
