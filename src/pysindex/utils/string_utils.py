"""
String normalization helpers for species and zone codes.
"""
from typing import Optional


def normalize_code(code: Optional[str]) -> str:
    """Uppercase a code and drop every space inside it.

    Args:
        code: Raw code, e.g. ' fd c'

    Returns:
        Normalized code, e.g. 'FDC'. ``None`` becomes an empty string.
    """
    if code is None:
        return ""
    return "".join(str(code).split()).upper()


def normalize_species_code(code: Optional[str]) -> str:
    """Normalize a species code for catalog lookups.

    Species codes in the catalog are stored uppercase ('FDC', 'SW').
    """
    return normalize_code(code)


def normalize_fiz(code: Optional[str]) -> str:
    """Return the first character of a forest inventory zone code, uppercased."""
    normalized = normalize_code(code)
    return normalized[:1]
