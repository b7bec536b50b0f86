"""Subprocess helper shared by the command-line collaborators."""

import logging
import subprocess
from typing import List

from takeout_reconcile.reconciler.errors import CollaboratorError

logger = logging.getLogger(__name__)


def run_tool(args: List[str], action: str) -> subprocess.CompletedProcess:
    """Run an external tool and fail the run if it exits non-zero.

    Args:
        args: Command line, tool first
        action: Short description for errors, e.g. "merge"

    Raises:
        CollaboratorError: If the tool is missing or exits non-zero
    """
    logger.debug(f"Running tool: {{'action': {action!r}, 'args': {args!r}}}")
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            encoding='utf-8',
            check=True,
        )
    except FileNotFoundError as e:
        raise CollaboratorError(
            f"{action} failed: {args[0]} is not installed",
            tool=args[0],
        ) from e
    except subprocess.CalledProcessError as e:
        raise CollaboratorError(
            f"{action} failed: {args[0]} exited with status {e.returncode}",
            tool=args[0],
            returncode=e.returncode,
            stderr=(e.stderr or "").strip(),
        ) from e
