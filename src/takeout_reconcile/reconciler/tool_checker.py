"""Tool availability checker for external dependencies."""

import logging
import re
import shutil
import subprocess
from typing import Dict, Optional

from .config import ToolsConfig
from .errors import ToolNotFoundError

logger = logging.getLogger(__name__)

RSYNC_VERSION_PATTERN = re.compile(r"^rsync\s+version\s+v?(\d+)\.")


def get_rsync_major_version(rsync: str = "rsync") -> Optional[int]:
    """Return rsync's major version, or None if rsync is missing or unparseable.

    Apple ships rsync 2.6.9, which lacks ``--crtimes``.
    """
    if shutil.which(rsync) is None:
        return None
    try:
        result = subprocess.run(
            [rsync, "--version"],
            capture_output=True,
            text=True,
            encoding='utf-8',
            check=True,
            timeout=30,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"rsync --version failed: {{'error': {str(e)!r}}}")
        return None

    match = RSYNC_VERSION_PATTERN.match(result.stdout)
    return int(match.group(1)) if match else None


def check_tool_availability(tools: Optional[ToolsConfig] = None) -> Dict[str, bool]:
    """
    Check availability of the external tools a run needs.

    Returns:
        Dictionary mapping tool names to availability status:
        - 'rsync': rsync at or above the configured major version (tree merge)
        - 'setfile': SetFile from the Xcode command line tools (stamping)
    """
    tools = tools or ToolsConfig()
    version = get_rsync_major_version(tools.rsync)

    return {
        'rsync': version is not None and version >= tools.rsync_min_major_version,
        'setfile': shutil.which(tools.setfile) is not None,
    }


def check_required_tools(tools: Optional[ToolsConfig] = None) -> None:
    """
    Verify every required tool before anything on disk is touched.

    Raises:
        ToolNotFoundError: For the first missing tool, with installation instructions
    """
    tools = tools or ToolsConfig()
    availability = check_tool_availability(tools)

    for tool_name, available in availability.items():
        if available:
            logger.info(f"Tool available: {{'tool': {tool_name!r}}}")
            continue
        logger.error(f"Tool not found: {{'tool': {tool_name!r}, 'required': True}}")
        raise ToolNotFoundError(
            f"Install `{tool_name}` to continue.\n\n{_get_installation_instructions(tool_name, tools)}",
            tool=tool_name,
        )


def _get_installation_instructions(tool_name: str, tools: ToolsConfig) -> str:
    """Get installation instructions for a missing tool."""
    instructions = {
        'rsync': (
            f"rsync version {tools.rsync_min_major_version} or later is required:\n"
            "  - macOS: brew install rsync\n"
            "  - Linux: sudo apt-get install rsync (Debian/Ubuntu)"
        ),
        'setfile': (
            "SetFile is part of the Xcode command line tools:\n"
            "  - macOS: xcode-select --install"
        ),
    }

    return instructions.get(tool_name, f"Please install {tool_name}")
