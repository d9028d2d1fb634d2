"""
Utility functions for pysindex.

This module provides common utilities used throughout the codebase.
"""

from .string_utils import normalize_code, normalize_species_code, normalize_fiz

__all__ = [
    "normalize_code",
    "normalize_species_code",
    "normalize_fiz",
]
