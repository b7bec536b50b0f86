"""Creation-time stamping through the macOS ``SetFile`` tool."""

import logging
from pathlib import Path
from typing import List

from ._subprocess import run_tool
from .base import TimestampStamper

logger = logging.getLogger(__name__)


class SetFileStamper(TimestampStamper):
    """Sets the creation date with ``SetFile -d "M/D/YYYY H:MM:SS" <file>``."""

    def __init__(self, setfile: str = "SetFile"):
        self.setfile = setfile

    def build_command(self, path: Path, date_string: str, time_string: str) -> List[str]:
        return [self.setfile, "-d", f"{date_string} {time_string}", str(path)]

    def stamp(self, path: Path, date_string: str, time_string: str) -> None:
        run_tool(self.build_command(path, date_string, time_string), "stamp")
