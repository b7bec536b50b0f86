"""Path utilities for consistent path handling."""

import unicodedata
from pathlib import Path


def normalize_path(path: Path | str) -> str:
    """
    Normalize a path for consistent comparison.

    Applies:
    - Unicode NFC normalization so composed and decomposed names compare equal
      (macOS hands out NFD names, Takeout archives carry NFC)
    - Forward slash conversion for cross-platform consistency

    Args:
        path: Path object or string to normalize

    Returns:
        Normalized path string with forward slashes and NFC Unicode normalization

    Examples:
        >>> normalize_path(Path("café/résumé.jpg"))
        'café/résumé.jpg'
        >>> normalize_path(r"C:\\Users\\test\\photos")
        'C:/Users/test/photos'
    """
    normalized = unicodedata.normalize('NFC', str(path))
    return normalized.replace('\\', '/')


def casefold_path(path: Path | str) -> str:
    """Normalize a path and lower-case it for case-insensitive lookups."""
    return normalize_path(path).lower()
