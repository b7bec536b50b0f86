"""Common utilities shared by the reconciler and its collaborators."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import TakeoutReconcileError
from .path_utils import normalize_path, casefold_path

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'TakeoutReconcileError',
    'normalize_path',
    'casefold_path',
]
