"""Compact JSON wire format for authored content and translation payloads.

Responsibilities:
- Decode authoring JSON into source trees (strict; malformed input raises).
- Decode fetched translation payloads into target nodes (lenient; malformed
  items decode to `None` and never raise).
- Encode id-carrying source trees as translation request payloads.

Vocabulary:
- text: JSON string
- element: `{"t": tag, "i": id, "c": children, "d": {translatable props}}`
- variable: `{"k": key, "v": kind code, "i": id}`
- branch: `{"i": id, "c": fallback, "d": {"t": "p"|"b", "s": selector, "b": {arm: children}}}`
"""

from __future__ import annotations

from typing import Any, Mapping

from ..models.tree import (
    BRANCH_KIND_BRANCH,
    BRANCH_KIND_CODES,
    BRANCH_KIND_PLURAL,
    BRANCH_KINDS_BY_CODE,
    MISSING,
    TRANSLATABLE_ATTRIBUTES,
    VARIABLE_KIND_CODES,
    VARIABLE_KIND_GENERIC,
    VARIABLE_KINDS_BY_CODE,
    Branch,
    Element,
    SourceTree,
    TargetBranch,
    TargetElement,
    TargetVariable,
    Variable,
)
from ..text.whitespace import normalize_whitespace
from .sanitize import translatable_attributes

_DEFAULT_SELECTOR_KEYS = {BRANCH_KIND_PLURAL: "n", BRANCH_KIND_BRANCH: "branch"}


def _variable_kind(value: Any) -> str | None:
    """Resolve a variable kind from a wire code or a full kind name."""

    if value is None:
        return VARIABLE_KIND_GENERIC
    if not isinstance(value, str):
        return None
    if value in VARIABLE_KINDS_BY_CODE:
        return VARIABLE_KINDS_BY_CODE[value]
    if value in VARIABLE_KIND_CODES:
        return value
    return None


def _branch_kind(value: Any) -> str | None:
    """Resolve a branch kind from a wire code or a full kind name."""

    if value is None:
        return BRANCH_KIND_BRANCH
    if not isinstance(value, str):
        return None
    if value in BRANCH_KINDS_BY_CODE:
        return BRANCH_KINDS_BY_CODE[value]
    if value in BRANCH_KIND_CODES:
        return value
    return None


def _is_branch_payload(payload: Mapping[str, Any]) -> bool:
    data = payload.get("d")
    return isinstance(data, Mapping) and (
        "b" in data or data.get("t") in BRANCH_KINDS_BY_CODE
    )


def _full_attribute_names(props: Mapping[str, Any]) -> dict[str, str]:
    """Map wire-coded translatable props to full attribute names."""

    return {
        TRANSLATABLE_ATTRIBUTES[code]: value
        for code, value in props.items()
        if code in TRANSLATABLE_ATTRIBUTES and isinstance(value, str)
    }


class _SourceDecoder:
    """Strict decoder for authoring JSON."""

    def __init__(self, normalize: bool) -> None:
        self.normalize = normalize

    def children(self, payload: Any, path: str) -> Any:
        if payload is None:
            return None
        if isinstance(payload, list):
            decoded = (self.node(item, f"{path}[{index}]") for index, item in enumerate(payload))
            return tuple(item for item in decoded if item is not None)
        return self.node(payload, path)

    def node(self, payload: Any, path: str) -> Any:
        if isinstance(payload, str):
            return normalize_whitespace(payload) if self.normalize else payload
        if isinstance(payload, bool):
            raise ValueError(f"Boolean content is not renderable at `{path}`.")
        if isinstance(payload, (int, float)):
            return str(payload)
        if payload is None:
            return None
        if not isinstance(payload, Mapping):
            raise ValueError(f"Unsupported content at `{path}`: {type(payload).__name__}.")
        if "k" in payload:
            return self.variable(payload, path)
        if _is_branch_payload(payload):
            return self.branch(payload, path)
        return self.element(payload, path)

    def variable(self, payload: Mapping[str, Any], path: str) -> Variable:
        key = payload.get("k")
        if not isinstance(key, str) or not key:
            raise ValueError(f"Variable key at `{path}` must be a non-empty string.")
        kind = _variable_kind(payload.get("v"))
        if kind is None:
            raise ValueError(f"Unknown variable kind `{payload.get('v')}` at `{path}`.")
        options = payload.get("options") or {}
        if not isinstance(options, Mapping):
            raise ValueError(f"Variable options at `{path}` must be a mapping.")
        return Variable(
            key=key,
            kind=kind,
            default_value=payload.get("default"),
            options=dict(options),
        )

    def branch(self, payload: Mapping[str, Any], path: str) -> Branch:
        data = payload["d"]
        kind = _branch_kind(data.get("t"))
        if kind is None:
            raise ValueError(f"Unknown branch kind `{data.get('t')}` at `{path}`.")
        raw_arms = data.get("b") or {}
        if not isinstance(raw_arms, Mapping):
            raise ValueError(f"Branch arms at `{path}` must be a mapping.")
        arms = {
            str(key): self.children(value, f"{path}.b.{key}")
            for key, value in raw_arms.items()
        }
        selector_key = data.get("s") or _DEFAULT_SELECTOR_KEYS[kind]
        if not isinstance(selector_key, str):
            raise ValueError(f"Branch selector at `{path}` must be a string.")
        return Branch(
            selector_key=selector_key,
            arms=arms,
            fallback=self.children(payload.get("c"), f"{path}.c"),
            kind=kind,
            selector_value=payload.get("value", payload.get("n", MISSING)),
        )

    def element(self, payload: Mapping[str, Any], path: str) -> Element:
        tag = payload.get("t", "")
        if not isinstance(tag, str):
            raise ValueError(f"Element tag at `{path}` must be a string.")
        attributes = payload.get("a") or {}
        if not isinstance(attributes, Mapping):
            raise ValueError(f"Element attributes at `{path}` must be a mapping.")
        merged = dict(attributes)
        props = payload.get("d") or {}
        if isinstance(props, Mapping):
            merged.update(_full_attribute_names(props))
        return Element(
            tag=tag,
            attributes=merged,
            children=self.children(payload.get("c"), f"{path}.c"),
        )


def decode_source(payload: Any, normalize: bool = True) -> Any:
    """Decode authoring JSON into an authored (id-less) content tree.

    Args:
        payload: Parsed JSON value in the wire vocabulary. Variables may carry
            `default` and `options`; branches may carry a `value` (or plural `n`) selector;
            elements may carry a full attribute map under `a`.
        normalize: Run each text run through `normalize_whitespace`.

    Raises:
        ValueError: If the payload does not follow the wire vocabulary.
    """

    return _SourceDecoder(normalize).children(payload, "$")


def _parse_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _decode_target_node(payload: Any) -> Any:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, (TargetElement, TargetVariable, TargetBranch)):
        return payload
    if isinstance(payload, bool) or payload is None:
        return None
    if isinstance(payload, (int, float)):
        return str(payload)
    if isinstance(payload, (list, tuple)):
        return tuple(_decode_target_node(item) for item in payload)
    if not isinstance(payload, Mapping):
        return None
    if "k" in payload:
        key = payload.get("k")
        kind = _variable_kind(payload.get("v"))
        if not isinstance(key, str) or not key or kind is None:
            return None
        return TargetVariable(key=key, kind=kind)
    if _is_branch_payload(payload):
        data = payload["d"]
        kind = _branch_kind(data.get("t"))
        raw_arms = data.get("b") or {}
        if kind is None or not isinstance(raw_arms, Mapping):
            return None
        return TargetBranch(
            id=_parse_id(payload.get("i")),
            kind=kind,
            arms={str(key): _decode_target_node(value) for key, value in raw_arms.items()},
            fallback=_decode_target_node(payload.get("c")),
        )
    props = payload.get("d") or {}
    return TargetElement(
        id=_parse_id(payload.get("i")),
        children=_decode_target_node(payload.get("c")),
        attributes=_full_attribute_names(props) if isinstance(props, Mapping) else {},
    )


def decode_target(payload: Any) -> Any:
    """Decode a translation payload into target nodes without raising.

    Items that match no known shape decode to `None`, which reconciliation
    treats as an absent target for that subtree only.
    """

    return _decode_target_node(payload)


def encode_source(tree: Any) -> Any:
    """Encode an id-carrying tree as a translation request payload.

    Ids are kept so translations can reference source structure; defaults and
    non-translatable attributes are dropped.
    """

    if isinstance(tree, SourceTree):
        return encode_source(tree.root)
    if tree is None or isinstance(tree, str):
        return tree
    if isinstance(tree, (list, tuple)):
        return [encode_source(child) for child in tree]
    if isinstance(tree, Variable):
        payload: dict[str, Any] = {"k": tree.key, "v": VARIABLE_KIND_CODES.get(tree.kind, "v")}
        if tree.id is not None:
            payload["i"] = tree.id
        return payload
    if isinstance(tree, Branch):
        payload = {
            "d": {
                "b": {key: encode_source(value) for key, value in sorted(tree.arms.items())},
                "s": tree.selector_key,
                "t": BRANCH_KIND_CODES.get(tree.kind, "b"),
            }
        }
        if tree.id is not None:
            payload["i"] = tree.id
        if tree.fallback is not None:
            payload["c"] = encode_source(tree.fallback)
        return payload
    if isinstance(tree, Element):
        payload = {}
        if tree.tag:
            payload["t"] = tree.tag
        if tree.id is not None:
            payload["i"] = tree.id
        if tree.children is not None:
            payload["c"] = encode_source(tree.children)
        props = translatable_attributes(tree.attributes)
        if props:
            payload["d"] = props
        return payload
    raise TypeError(f"Unsupported content node type: {type(tree).__name__}.")
