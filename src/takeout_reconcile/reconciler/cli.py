"""CLI command for reconciling Google Takeout exports in the current directory."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from takeout_reconcile.collaborators.extractor import TakeoutArchiveExtractor
from takeout_reconcile.collaborators.merger import RsyncTreeMerger
from takeout_reconcile.collaborators.run_marker import TextRunMarker
from takeout_reconcile.collaborators.stamper import SetFileStamper
from takeout_reconcile.common import ConfigLoader, setup_logging

from .config import ReconcilerConfig
from .driver import PipelinePaths, ReconciliationDriver
from .errors import ReconcileError, ToolNotFoundError, UnmatchedSidecarError
from .progress import log_progress
from .tool_checker import check_required_tools

APP_NAME = "takeout-reconcile"


def build_driver(config: ReconcilerConfig, working_dir: Path) -> ReconciliationDriver:
    """Wire the production collaborators for a run in ``working_dir``."""
    paths = PipelinePaths.from_config(working_dir, config)
    logger = logging.getLogger(__package__ or __name__)

    return ReconciliationDriver(
        paths=paths,
        extractor=TakeoutArchiveExtractor(),
        merger=RsyncTreeMerger(rsync=config.tools.rsync),
        stamper=SetFileStamper(setfile=config.tools.setfile),
        run_marker=TextRunMarker(paths.run_marker_file),
        progress_callback=log_progress(logger, "Updating metadata of"),
        progress_log_interval=config.stamping.progress_log_interval,
    )


def reconcile_command(config: ReconcilerConfig, working_dir: Path) -> int:
    """Check tools, then run one reconciliation.

    Returns:
        Exit code (0 for success)
    """
    # Use __package__ to avoid __main__ when run as module
    logger = logging.getLogger(__package__ or __name__)

    try:
        check_required_tools(config.tools)
    except ToolNotFoundError as e:
        logger.error(e.message)
        return 1

    try:
        logger.info(f"Configuration: {{'working_dir': {str(working_dir)!r}, 'photos_dir': {config.paths.photos_dir_name!r}}}")
        summary = build_driver(config, working_dir).run()
        logger.info(
            f"Reconciliation complete: {{'stamped': {summary.media_stamped}, "
            f"'duplicates_renamed': {summary.import_duplicates_renamed + summary.library_duplicates_renamed}, "
            f"'albums_pruned': {len(summary.albums_pruned)}}}"
        )
        return 0

    except UnmatchedSidecarError as e:
        logger.error(e.message)
        return 1

    except ReconcileError as e:
        logger.error(f"Reconciliation failed: {e.message} {e.context}")
        return 1

    except KeyboardInterrupt:
        logger.warning("Reconciliation interrupted by user; completed steps stay applied")
        return 130

    except Exception as e:
        logger.exception(f"Reconciliation failed: {e}")
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point; works on the current working directory."""
    parser = argparse.ArgumentParser(
        description="Merge Google Takeout exports in the current directory into a "
                    "deduplicated, timestamp-correct photo library"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to config file (default: ./{APP_NAME}.toml if present)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (overrides config)"
    )
    parser.add_argument(
        "--log-format",
        choices=["simple", "detailed", "json"],
        type=str.lower,
        help="Log format (overrides config)"
    )

    args = parser.parse_args(argv)

    loader = ConfigLoader(app_name=APP_NAME, config_class=ReconcilerConfig)
    config = loader.load(defaults_path=args.config)

    setup_logging(
        level=args.log_level or config.logging.level,
        format=args.log_format or config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
    )

    return reconcile_command(config, Path.cwd())


if __name__ == "__main__":
    sys.exit(main())
