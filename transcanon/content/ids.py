"""Structural id assignment for authored content trees.

Responsibilities:
- Number every `Element`, `Variable`, and `Branch` in one pre-order walk.
- Visit every branch arm in sorted key order, then the fallback, whatever arm
  is selected later, so numbering is reproducible.
- Hoist variable defaults, options, and kinds into the tree's scope
  (first occurrence of a key wins).

The counter lives in a walk object created per `assign_ids` call, so
concurrent builds of different trees never share state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from ..models.tree import Branch, Element, SourceTree, Variable


@dataclass(slots=True)
class _IdWalk:
    """State for one id-assignment walk over a single authored tree."""

    counter: int = 0
    variables: dict[str, Any] = field(default_factory=dict)
    variable_options: dict[str, dict[str, Any]] = field(default_factory=dict)
    variable_kinds: dict[str, str] = field(default_factory=dict)

    def next_id(self) -> int:
        """Return the next structural id."""

        self.counter += 1
        return self.counter

    def visit_children(self, children: Any) -> Any:
        """Assign ids across a single child, a child sequence, or `None`."""

        if children is None:
            return None
        if isinstance(children, (list, tuple)):
            visited = (self.visit(child) for child in children if child is not None)
            return tuple(visited)
        return self.visit(children)

    def visit(self, node: Any) -> Any:
        """Assign ids to one node and its descendants."""

        if isinstance(node, str):
            return node
        if isinstance(node, bool):
            raise TypeError("Boolean values are not renderable content.")
        if isinstance(node, (int, float)):
            return str(node)
        if isinstance(node, Element):
            node_id = self.next_id()
            return replace(node, id=node_id, children=self.visit_children(node.children))
        if isinstance(node, Variable):
            node_id = self.next_id()
            self.hoist(node)
            return replace(node, id=node_id)
        if isinstance(node, Branch):
            node_id = self.next_id()
            arms = {key: self.visit_children(node.arms[key]) for key in sorted(node.arms)}
            fallback = self.visit_children(node.fallback)
            return replace(node, id=node_id, arms=arms, fallback=fallback)
        raise TypeError(f"Unsupported content node type: {type(node).__name__}.")

    def hoist(self, variable: Variable) -> None:
        """Record a variable's default into scope unless the key is already bound."""

        if not isinstance(variable.key, str) or variable.key in self.variables:
            return
        self.variables[variable.key] = variable.default_value
        self.variable_options[variable.key] = dict(variable.options)
        self.variable_kinds[variable.key] = variable.kind


def assign_ids(tree: Any) -> SourceTree:
    """Build a `SourceTree` from authored content.

    Args:
        tree: Authored children (a node, a list/tuple of nodes, or `None`).
            Existing ids are overwritten.

    Returns:
        A `SourceTree` with ids 1..N assigned in pre-order and hoisted
        variable scope.
    """

    walk = _IdWalk()
    root = walk.visit_children(tree)
    return SourceTree(
        root=root,
        variables=walk.variables,
        variable_options=walk.variable_options,
        variable_kinds=walk.variable_kinds,
        node_count=walk.counter,
    )


def strip_ids(children: Any) -> Any:
    """Return a copy of a tree with every structural id cleared."""

    if children is None or isinstance(children, str):
        return children
    if isinstance(children, (list, tuple)):
        return tuple(strip_ids(child) for child in children)
    if isinstance(children, Element):
        return replace(children, id=None, children=strip_ids(children.children))
    if isinstance(children, Variable):
        return replace(children, id=None)
    if isinstance(children, Branch):
        return replace(
            children,
            id=None,
            arms={key: strip_ids(value) for key, value in children.arms.items()},
            fallback=strip_ids(children.fallback),
        )
    return children
