"""Content tree canonicalization components.

This package assigns structural ids, sanitizes trees for hashing, computes
fingerprints, and converts trees to and from the compact wire format.
"""

from .hashing import (
    DEFAULT_DATA_FORMAT,
    STATIC_FINGERPRINT,
    canonical_json,
    compute_fingerprint,
    contains_static,
    hash_source,
    hash_string,
)
from .ids import assign_ids, strip_ids
from .sanitize import sanitize, translatable_attributes
from .wire import decode_source, decode_target, encode_source

__all__ = [
    "DEFAULT_DATA_FORMAT",
    "STATIC_FINGERPRINT",
    "assign_ids",
    "canonical_json",
    "compute_fingerprint",
    "contains_static",
    "decode_source",
    "decode_target",
    "encode_source",
    "hash_source",
    "hash_string",
    "sanitize",
    "strip_ids",
    "translatable_attributes",
]
