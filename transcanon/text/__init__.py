"""Text canonicalization components.

This package provides the whitespace rules applied to authored text runs
before they are hashed or rendered.
"""

from .whitespace import (
    has_significant_whitespace,
    is_normal_whitespace,
    is_significant_whitespace,
    normalize_whitespace,
    trim_normal_whitespace,
)

__all__ = [
    "has_significant_whitespace",
    "is_normal_whitespace",
    "is_significant_whitespace",
    "normalize_whitespace",
    "trim_normal_whitespace",
]
