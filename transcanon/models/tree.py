"""Content tree datatypes shared across transcanon modules.

Responsibilities:
- Represent authored source trees, decoded translation targets, and the
  hoisted variable scope produced by structural id assignment.
- Keep every node immutable so trees can be shared across rendering contexts.

Key types:
- Source nodes: `Element`, `Variable`, `Branch` (text runs are plain `str`).
- Target nodes: `TargetElement`, `TargetVariable`, `TargetBranch`.
- `SourceTree`: an id-carrying root plus its hoisted variable defaults.

The concrete node class is the discriminant of each union; consumers dispatch
with `isinstance` checks, most specific case first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


VARIABLE_KIND_GENERIC = "variable"
VARIABLE_KIND_NUMBER = "number"
VARIABLE_KIND_DATE = "date"
VARIABLE_KIND_CURRENCY = "currency"
VARIABLE_KIND_STATIC = "static"

BRANCH_KIND_BRANCH = "branch"
BRANCH_KIND_PLURAL = "plural"

VARIABLE_KIND_CODES: Mapping[str, str] = {
    VARIABLE_KIND_GENERIC: "v",
    VARIABLE_KIND_NUMBER: "n",
    VARIABLE_KIND_DATE: "d",
    VARIABLE_KIND_CURRENCY: "c",
    VARIABLE_KIND_STATIC: "s",
}
VARIABLE_KINDS_BY_CODE: Mapping[str, str] = {
    code: kind for kind, code in VARIABLE_KIND_CODES.items()
}

BRANCH_KIND_CODES: Mapping[str, str] = {
    BRANCH_KIND_BRANCH: "b",
    BRANCH_KIND_PLURAL: "p",
}
BRANCH_KINDS_BY_CODE: Mapping[str, str] = {
    code: kind for kind, code in BRANCH_KIND_CODES.items()
}

# Translatable attributes, keyed by their compact wire names.
TRANSLATABLE_ATTRIBUTES: Mapping[str, str] = {
    "pl": "placeholder",
    "ti": "title",
    "alt": "alt",
    "arl": "aria-label",
    "arb": "aria-labelledby",
    "ard": "aria-describedby",
}


class _Missing:
    """Marker type for an absent selector value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True, slots=True)
class Element:
    """A structural element carrying children and rendering attributes.

    Attributes:
        tag: Element tag name.
        id: Structural id assigned by `assign_ids`, or `None` before assignment.
        attributes: Full attribute map; only translatable keys reach the hash.
        children: A single child, a tuple of children, or `None`.
    """

    tag: str
    id: int | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    children: Children = None


@dataclass(frozen=True, slots=True)
class Variable:
    """A typed placeholder whose value is supplied at render time.

    Attributes:
        key: Variable name, unique within its scope.
        kind: One of the `VARIABLE_KIND_*` constants.
        id: Structural id assigned by `assign_ids`.
        default_value: Authored value rendered when no override is bound.
        options: Renderer options (currency code, date style, ...).
    """

    key: str
    kind: str = VARIABLE_KIND_GENERIC
    id: int | None = None
    default_value: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Branch:
    """A set of labeled alternatives chosen by a selector value.

    Attributes:
        selector_key: Scope key holding the selector value (`n` for plurals).
        arms: Alternative subtrees keyed by arm label.
        fallback: Default subtree used when no arm applies.
        kind: `BRANCH_KIND_BRANCH` or `BRANCH_KIND_PLURAL`.
        id: Structural id assigned by `assign_ids`.
        selector_value: Authored selector value, or `MISSING` to read it from scope.
    """

    selector_key: str
    arms: Mapping[str, Children] = field(default_factory=dict)
    fallback: Children = None
    kind: str = BRANCH_KIND_BRANCH
    id: int | None = None
    selector_value: Any = MISSING


TreeNode = Union[str, Element, Variable, Branch]
Children = Union[TreeNode, tuple, None]


@dataclass(frozen=True, slots=True)
class SourceTree:
    """Id-carrying authored tree with its hoisted variable scope.

    Attributes:
        root: Root children with structural ids assigned.
        variables: Default value per variable key (first occurrence wins).
        variable_options: Renderer options per variable key.
        variable_kinds: Variable kind per key.
        node_count: Number of ids handed out during assignment.
    """

    root: Children
    variables: Mapping[str, Any] = field(default_factory=dict)
    variable_options: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    variable_kinds: Mapping[str, str] = field(default_factory=dict)
    node_count: int = 0


@dataclass(frozen=True, slots=True)
class TargetElement:
    """Element reference inside a translation payload, matched to Source by id."""

    id: int | None
    children: TargetChildren = None
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TargetVariable:
    """Variable reference inside a translation payload (key and kind only)."""

    key: str
    kind: str = VARIABLE_KIND_GENERIC


@dataclass(frozen=True, slots=True)
class TargetBranch:
    """Branch-selection payload carrying translated arms."""

    id: int | None
    kind: str = BRANCH_KIND_BRANCH
    arms: Mapping[str, TargetChildren] = field(default_factory=dict)
    fallback: TargetChildren = None


TargetNode = Union[str, TargetElement, TargetVariable, TargetBranch]
TargetChildren = Union[TargetNode, tuple, None]


def as_sequence(children: Any) -> tuple:
    """Return children as a tuple, treating `None` as empty and scalars as one item."""

    if children is None:
        return ()
    if isinstance(children, (list, tuple)):
        return tuple(children)
    return (children,)
