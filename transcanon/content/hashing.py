"""Content fingerprinting over sanitized trees.

Responsibilities:
- Serialize the hash envelope canonically (sorted keys, compact separators).
- Digest the canonical string into a 16-character lowercase hex fingerprint.
- Short-circuit to `""` for content holding a static variable anywhere.
"""

from __future__ import annotations

from hashlib import blake2b
import json
from typing import Any

from ..models.tree import VARIABLE_KIND_CODES, VARIABLE_KIND_STATIC
from .sanitize import sanitize

DEFAULT_DATA_FORMAT = "JSX"
FINGERPRINT_HEX_LENGTH = 16
STATIC_FINGERPRINT = ""

_STATIC_CODE = VARIABLE_KIND_CODES[VARIABLE_KIND_STATIC]


def canonical_json(value: Any) -> str:
    """Serialize `value` with alphabetically ordered keys and no extra whitespace."""

    return json.dumps(
        value,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )


def hash_string(text: str) -> str:
    """Return the 64-bit hex digest of `text`'s UTF-8 bytes."""

    digest = blake2b(text.encode("utf-8"), digest_size=FINGERPRINT_HEX_LENGTH // 2)
    return digest.hexdigest()


def contains_static(sanitized: Any) -> bool:
    """Return whether a sanitized tree holds a static variable at any depth.

    Every branch arm is inspected, including arms that can never be selected.
    """

    if isinstance(sanitized, list):
        return any(contains_static(item) for item in sanitized)
    if not isinstance(sanitized, dict):
        return False
    if sanitized and set(sanitized) <= {"k", "v"}:
        return sanitized.get("v") == _STATIC_CODE
    if contains_static(sanitized.get("c")):
        return True
    data = sanitized.get("d")
    if isinstance(data, dict) and isinstance(data.get("b"), dict):
        return any(contains_static(arm) for arm in data["b"].values())
    return False


def hash_source(
    sanitized: Any,
    context: str | None = None,
    id: str | None = None,
    data_format: str = DEFAULT_DATA_FORMAT,
) -> str:
    """Hash an already sanitized tree together with its context envelope.

    Returns:
        16 lowercase hex characters, or `""` when the tree contains a static
        variable and must never be fetched or cached remotely.
    """

    if contains_static(sanitized):
        return STATIC_FINGERPRINT

    envelope: dict[str, Any] = {"dataFormat": data_format}
    if sanitized is not None:
        envelope["source"] = sanitized
    if context:
        envelope["context"] = context
    if id:
        envelope["id"] = id
    return hash_string(canonical_json(envelope))


def compute_fingerprint(
    tree: Any,
    context: str | None = None,
    id: str | None = None,
    data_format: str = DEFAULT_DATA_FORMAT,
) -> str:
    """Sanitize an authored or id-carrying tree and return its fingerprint."""

    return hash_source(sanitize(tree), context=context, id=id, data_format=data_format)
