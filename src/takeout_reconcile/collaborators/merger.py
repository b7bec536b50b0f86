"""Tree merge through rsync."""

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, List

from ._subprocess import run_tool
from .base import TreeMerger

logger = logging.getLogger(__name__)


def duplicate_suffix(epoch_ms: int) -> str:
    """Backup suffix rsync appends on a name collision."""
    return f"-{epoch_ms}-duplicate"


def _now_ms() -> int:
    return int(time.time() * 1000)


class RsyncTreeMerger(TreeMerger):
    """Moves a tree into another with ``rsync --remove-source-files --backup``.

    Dotfiles are not transferred. The source directory is deleted once rsync
    succeeds, since rsync leaves empty directories and excluded dotfiles
    behind.
    """

    def __init__(self, rsync: str = "rsync", clock: Callable[[], int] = _now_ms):
        self.rsync = rsync
        self.clock = clock

    def build_command(self, source_dir: Path, dest_dir: Path) -> List[str]:
        return [
            self.rsync,
            "-av",
            "--crtimes",
            "--remove-source-files",
            "--exclude=.*",
            "--backup",
            f"--suffix={duplicate_suffix(self.clock())}",
            f"{source_dir}/",
            f"{dest_dir}/",
        ]

    def merge(self, source_dir: Path, dest_dir: Path) -> None:
        source_dir = Path(source_dir)
        dest_dir = Path(dest_dir)
        logger.info(f"Merging {source_dir.name} with {dest_dir.name}")

        dest_dir.mkdir(parents=True, exist_ok=True)
        run_tool(self.build_command(source_dir, dest_dir), "merge")
        shutil.rmtree(source_dir)
