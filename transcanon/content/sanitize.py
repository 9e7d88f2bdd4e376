"""Hash-ready sanitization of content trees.

Responsibilities:
- Strip structural ids, variable defaults, and non-translatable attributes.
- Emit the compact JSON-compatible wire shape used as hash input.
- Omit every field that sanitizes to nothing instead of emitting nulls.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..models.tree import (
    BRANCH_KIND_CODES,
    TRANSLATABLE_ATTRIBUTES,
    VARIABLE_KIND_CODES,
    Branch,
    Element,
    SourceTree,
    Variable,
)

_ATTRIBUTE_CODES_BY_NAME = {name: code for code, name in TRANSLATABLE_ATTRIBUTES.items()}


def translatable_attributes(attributes: Mapping[str, Any]) -> dict[str, str]:
    """Reduce an attribute map to translatable string props keyed by wire code.

    Both full attribute names (`aria-label`) and wire codes (`arl`) are accepted.
    Non-string and empty values are dropped.
    """

    props: dict[str, str] = {}
    for name, value in attributes.items():
        code = _ATTRIBUTE_CODES_BY_NAME.get(name)
        if code is None and name in TRANSLATABLE_ATTRIBUTES:
            code = name
        if code is None or not isinstance(value, str) or not value:
            continue
        props[code] = value
    return dict(sorted(props.items()))


def _sanitize_element(element: Element) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    if isinstance(element.tag, str) and element.tag:
        sanitized["t"] = element.tag
    children = sanitize(element.children)
    if children is not None:
        sanitized["c"] = children
    props = translatable_attributes(element.attributes)
    if props:
        sanitized["d"] = props
    return sanitized


def _sanitize_variable(variable: Variable) -> dict[str, Any]:
    # Non-serializable key or unknown kind: drop the field, keep hashing.
    sanitized: dict[str, Any] = {}
    if isinstance(variable.key, str):
        sanitized["k"] = variable.key
    kind_code = VARIABLE_KIND_CODES.get(variable.kind) if isinstance(variable.kind, str) else None
    if kind_code is not None:
        sanitized["v"] = kind_code
    return sanitized


def _sanitize_branch(branch: Branch) -> dict[str, Any]:
    data: dict[str, Any] = {}
    arms: dict[str, Any] = {}
    for key in sorted(branch.arms, key=str):
        arm = sanitize(branch.arms[key])
        if arm is not None:
            arms[str(key)] = arm
    if arms:
        data["b"] = arms
    if isinstance(branch.selector_key, str) and branch.selector_key:
        data["s"] = branch.selector_key
    kind_code = BRANCH_KIND_CODES.get(branch.kind)
    if kind_code is not None:
        data["t"] = kind_code

    sanitized: dict[str, Any] = {}
    fallback = sanitize(branch.fallback)
    if fallback is not None:
        sanitized["c"] = fallback
    if data:
        sanitized["d"] = data
    return sanitized


def sanitize(tree: Any) -> Any:
    """Return the hash-ready form of a content tree.

    Args:
        tree: A `SourceTree`, a single node, a node sequence, or `None`.

    Returns:
        Strings for text, dicts for elements/variables/branches, lists for
        sequences, or `None` when nothing translatable remains.
    """

    if isinstance(tree, SourceTree):
        return sanitize(tree.root)
    if tree is None:
        return None
    if isinstance(tree, str):
        return tree
    if isinstance(tree, (list, tuple)):
        items = [sanitize(child) for child in tree]
        items = [item for item in items if item is not None]
        return items or None
    if isinstance(tree, Element):
        return _sanitize_element(tree)
    if isinstance(tree, Variable):
        return _sanitize_variable(tree)
    if isinstance(tree, Branch):
        return _sanitize_branch(tree)
    if isinstance(tree, (int, float)) and not isinstance(tree, bool):
        return str(tree)
    return None
