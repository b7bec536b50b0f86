"""Sidecar matching and duplicate reconciliation for Google Takeout exports."""

from .config import ReconcilerConfig, PathsConfig, ToolsConfig, StampingConfig
from .driver import PipelinePaths, ReconciliationDriver, RunSummary
from .duplicates import reconcile_duplicates
from .sidecar_matcher import MatchedPair, MatchResult, match_sidecars
from .timestamps import apply_timestamps, resolve_timestamp

__all__ = [
    'ReconcilerConfig',
    'PathsConfig',
    'ToolsConfig',
    'StampingConfig',
    'PipelinePaths',
    'ReconciliationDriver',
    'RunSummary',
    'reconcile_duplicates',
    'MatchedPair',
    'MatchResult',
    'match_sidecars',
    'apply_timestamps',
    'resolve_timestamp',
]
