"""Progress tracking for long-running per-file steps."""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# (current, total, item) where current is 1-based
ProgressCallback = Callable[[int, int, str], None]


class ProgressTracker:
    """Counts processed files and reports rate and ETA.

    Logs a progress line every ``log_interval`` files and a summary line
    from ``log_final_summary``.
    """

    def __init__(self, total_files: int, action: str = "Processed", log_interval: int = 100):
        self.total_files = total_files
        self.action = action
        self.log_interval = max(1, log_interval)

        self.files_processed = 0
        self.start_time = time.monotonic()

    def increment(self, count: int = 1) -> None:
        self.files_processed += count

        if self.files_processed % self.log_interval == 0:
            self._log_progress()

    def get_progress(self) -> dict:
        """Get current progress statistics."""
        elapsed_time = time.monotonic() - self.start_time
        rate = self.files_processed / elapsed_time if elapsed_time > 0 else 0.0
        percentage = (self.files_processed / self.total_files) * 100 if self.total_files > 0 else 0.0

        remaining_files = self.total_files - self.files_processed
        eta_seconds = remaining_files / rate if rate > 0 and remaining_files > 0 else 0.0

        return {
            "total_files": self.total_files,
            "files_processed": self.files_processed,
            "remaining_files": remaining_files,
            "percentage": percentage,
            "elapsed_seconds": elapsed_time,
            "rate_files_per_sec": rate,
            "eta_seconds": eta_seconds,
        }

    def _log_progress(self) -> None:
        progress = self.get_progress()
        logger.info(
            f"Progress: {self.files_processed} of {self.total_files} "
            f"({progress['percentage']:.1f}%) - "
            f"{progress['rate_files_per_sec']:.1f} files/sec - "
            f"ETA: {format_duration(progress['eta_seconds'])}"
        )

    def log_final_summary(self) -> None:
        elapsed_time = time.monotonic() - self.start_time
        logger.info(
            f"{self.action} {self.files_processed} files "
            f"in {format_duration(elapsed_time)}"
        )


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable time, e.g. ``"2h 15m 30s"``."""
    if seconds <= 0:
        return "0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)


def log_progress(logger: logging.Logger, action: str) -> ProgressCallback:
    """Build a callback that logs ``"<action> <item>. N of total."`` at INFO."""

    def callback(current: int, total: int, item: str) -> None:
        logger.info(f"{action} {item}. {current} of {total}.")

    return callback


def notify(callback: Optional[ProgressCallback], current: int, total: int, item: str) -> None:
    if callback is not None:
        callback(current, total, item)
