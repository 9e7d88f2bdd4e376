"""Top-level package for transcanon.

This package canonicalizes authored UI content, fingerprints it for
translation lookup, and reconciles fetched translations back onto the
authored structure. The main entry points are `compute_fingerprint` and
`reconcile`.
"""

from .content import assign_ids, compute_fingerprint, decode_source, decode_target
from .reconcile import reconcile, render_default
from .text import normalize_whitespace

__all__ = [
    "__version__",
    "assign_ids",
    "compute_fingerprint",
    "decode_source",
    "decode_target",
    "normalize_whitespace",
    "reconcile",
    "render_default",
]

__version__ = "0.1.0"
