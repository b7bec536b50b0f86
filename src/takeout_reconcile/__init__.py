"""Reconcile Google Takeout photo exports into a deduplicated library."""

__version__ = "0.1.0"
