"""Merge translated target trees onto authored source trees.

Responsibilities:
- Dispatch each (source, target) pair to the most specific merge rule.
- Resolve relocated variable references from scope and render them by kind.
- Match element references to source structure by id, dropping references
  the source never declared.
- Degrade malformed targets to the source rendering for that subtree only.

Dispatch order:
1. Target absent: render the source as authored.
2. Target is text: the target overrides the whole subtree.
3. Target is a sequence: absorb the source's direct variables, then walk the
   target emitting text, rendering variable references, and recursing into
   element references matched by id.
4. Target selects a branch: pick the arm per the locale chain and recurse
   with the selector value bound in scope.
5. Both are elements: recurse into children, keep source properties.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..content.hashing import DEFAULT_DATA_FORMAT
from ..content.wire import decode_target
from ..errors import MissingSelectorError
from ..models.output import OutputElement
from ..models.tree import (
    MISSING,
    Branch,
    Element,
    SourceTree,
    TargetBranch,
    TargetElement,
    TargetVariable,
    Variable,
    as_sequence,
)
from ..telemetry.logger import EventLogger
from .branches import PluralResolver, select_arm_key
from .scope import DEFAULT_RENDERERS, RenderScope, VariableRenderer, render_variable

_STRUCTURED_DATA_FORMATS = frozenset({"JSX"})


def _extend(output: list[Any], rendered: Any) -> None:
    """Append a rendered node, splicing sequences into `output`."""

    if rendered is None:
        return
    if isinstance(rendered, tuple):
        output.extend(item for item in rendered if item is not None)
        return
    output.append(rendered)


class Reconciler:
    """Stateless merge engine bound to one locale chain and renderer registry."""

    def __init__(
        self,
        locales: tuple[str, ...] | list[str],
        renderers: Mapping[str, VariableRenderer] | None = None,
        plural_resolver: PluralResolver | None = None,
        logger: EventLogger | None = None,
        data_format: str = DEFAULT_DATA_FORMAT,
    ) -> None:
        """Initialize the locale chain, renderers, and optional event logger."""

        self.locales = tuple(locales)
        self.renderers = {**DEFAULT_RENDERERS, **(renderers or {})}
        self.plural_resolver = plural_resolver
        self.logger = logger
        self.data_format = data_format

    def _degrade(self, reason: str, **context: object) -> None:
        if self.logger is not None:
            self.logger.log_degradation("reconcile", reason, **context)

    def _render_reference(self, key: str, kind: str, scope: RenderScope) -> Any:
        if not scope.has(key):
            self._degrade("unresolved_variable", key=key)
        return render_variable(key, kind, scope, self.locales, self.renderers)

    def _selector_value(self, branch: Branch, scope: RenderScope) -> Any:
        value = branch.selector_value
        if value is MISSING:
            value = scope.lookup(branch.selector_key)
        if value is MISSING:
            raise MissingSelectorError(branch.selector_key, branch.id)
        return value

    # ----- rule 1: source fallback ----- #

    def render_default(self, source: Any, scope: RenderScope) -> Any:
        """Render source content as authored, without structural ids."""

        if source is None or isinstance(source, str):
            return source
        if isinstance(source, (list, tuple)):
            scope = scope.absorb(node for node in source if isinstance(node, Variable))
            output: list[Any] = []
            for node in source:
                _extend(output, self.render_default(node, scope))
            return tuple(output)
        if isinstance(source, Element):
            return OutputElement(
                tag=source.tag,
                attributes=dict(source.attributes),
                children=self.render_default(source.children, scope),
            )
        if isinstance(source, Variable):
            if not scope.has(source.key):
                scope = scope.bind(source.key, source.default_value)
            scope = scope.absorb((source,))
            return render_variable(source.key, source.kind, scope, self.locales, self.renderers)
        if isinstance(source, Branch):
            value = self._selector_value(source, scope)
            key = select_arm_key(
                source.kind, value, self.locales, source.arms, self.plural_resolver
            )
            arm = source.arms[key] if key is not None else source.fallback
            return self.render_default(arm, scope.bind(source.selector_key, value))
        return str(source)

    # ----- dispatch ----- #

    def reconcile(self, source: Any, target: Any, scope: RenderScope) -> Any:
        """Merge one source subtree with its (possibly absent) target."""

        if target is None:
            return self.render_default(source, scope)
        if isinstance(target, str):
            return target
        if self.data_format not in _STRUCTURED_DATA_FORMATS:
            self._degrade("structured_target_for_flat_format", data_format=self.data_format)
            return self.render_default(source, scope)

        if isinstance(target, tuple):
            if isinstance(source, Element) and not self._references_node(target, source):
                return self._reconcile_element_children(source, target, scope)
            return self._reconcile_sequence(as_sequence(source), target, scope)

        if isinstance(source, (list, tuple)):
            return self._reconcile_sequence(tuple(source), (target,), scope)
        if isinstance(target, TargetBranch) and isinstance(source, Branch):
            return self._reconcile_branch(source, target, scope)
        if isinstance(target, TargetElement) and isinstance(source, Element):
            return self._reconcile_element(source, target, scope)
        if isinstance(target, TargetVariable) and isinstance(source, Variable):
            scope = scope.absorb((source,))
            return self._render_reference(target.key, target.kind, scope)

        self._degrade(
            "malformed_target",
            source_type=type(source).__name__,
            target_type=type(target).__name__,
        )
        return self.render_default(source, scope)

    @staticmethod
    def _references_node(target: tuple, node: Element | Branch) -> bool:
        """Return whether a target sequence references `node` by id."""

        return node.id is not None and any(
            isinstance(item, (TargetElement, TargetBranch)) and item.id == node.id
            for item in target
        )

    # ----- rule 3: sequences ----- #

    def _reconcile_sequence(
        self, source: tuple, target: tuple, scope: RenderScope
    ) -> tuple:
        scope = scope.absorb(node for node in source if isinstance(node, Variable))
        structural: dict[int, Element | Branch] = {}
        for node in source:
            if isinstance(node, (Element, Branch)) and node.id is not None:
                structural.setdefault(node.id, node)

        output: list[Any] = []
        for index, item in enumerate(target):
            if isinstance(item, str):
                output.append(item)
            elif isinstance(item, TargetVariable):
                output.append(self._render_reference(item.key, item.kind, scope))
            elif isinstance(item, (TargetElement, TargetBranch)):
                matched = structural.get(item.id) if item.id is not None else None
                if matched is None:
                    self._degrade("unmatched_reference", index=index, id=item.id)
                    continue
                _extend(output, self.reconcile(matched, item, scope))
            elif isinstance(item, tuple):
                _extend(output, self._reconcile_sequence(source, item, scope))
            else:
                self._degrade("malformed_target_item", index=index)
        return tuple(output)

    # ----- rule 4: branches ----- #

    def _reconcile_branch(
        self, source: Branch, target: TargetBranch, scope: RenderScope
    ) -> Any:
        value = self._selector_value(source, scope)
        arm_scope = scope.bind(source.selector_key, value)
        key = select_arm_key(
            source.kind, value, self.locales, target.arms, self.plural_resolver
        )
        if key is None:
            if target.fallback is not None:
                return self.reconcile(source.fallback, target.fallback, arm_scope)
            return self.render_default(source, scope)

        if key in source.arms:
            source_arm = source.arms[key]
        else:
            source_key = select_arm_key(
                source.kind, value, self.locales, source.arms, self.plural_resolver
            )
            source_arm = source.arms[source_key] if source_key is not None else source.fallback
        return self.reconcile(source_arm, target.arms[key], arm_scope)

    # ----- rule 5: elements ----- #

    def _reconcile_element_children(
        self, source: Element, target_children: Any, scope: RenderScope
    ) -> OutputElement:
        return OutputElement(
            tag=source.tag,
            attributes=dict(source.attributes),
            children=self.reconcile(source.children, target_children, scope),
        )

    def _reconcile_element(
        self, source: Element, target: TargetElement, scope: RenderScope
    ) -> OutputElement:
        attributes = dict(source.attributes)
        attributes.update(target.attributes)
        if target.children is None:
            children = self.render_default(source.children, scope)
        else:
            children = self.reconcile(source.children, target.children, scope)
        return OutputElement(tag=source.tag, attributes=attributes, children=children)


def reconcile(
    source: Any,
    target: Any,
    locales: tuple[str, ...] | list[str],
    data_format: str = DEFAULT_DATA_FORMAT,
    variables: Mapping[str, Any] | None = None,
    variable_options: Mapping[str, Mapping[str, Any]] | None = None,
    renderers: Mapping[str, VariableRenderer] | None = None,
    plural_resolver: PluralResolver | None = None,
    logger: EventLogger | None = None,
) -> Any:
    """Merge a target tree onto a source tree and return the output tree.

    Args:
        source: A `SourceTree` from `assign_ids`, or a bare id-carrying tree.
        target: Target nodes, a raw wire payload, or any mix of both; `None`
            means no translation.
        locales: Locale preference chain, most specific first.
        data_format: Payload format; only `JSX` targets carry structure.
        variables: Render-time values overriding hoisted defaults.
        variable_options: Render-time renderer options per key.
        renderers: Renderer overrides keyed by variable kind.
        plural_resolver: Maps `(value, locale)` to a plural category.
        logger: Receives degradation events.

    Raises:
        MissingSelectorError: If a rendered branch has no selector value.
    """

    if target is not None and not isinstance(target, str):
        target = decode_target(target)
    scope = RenderScope.from_source(source, variables, variable_options)
    root = source.root if isinstance(source, SourceTree) else source
    engine = Reconciler(
        locales,
        renderers=renderers,
        plural_resolver=plural_resolver,
        logger=logger,
        data_format=data_format,
    )
    return engine.reconcile(root, target, scope)


def render_default(
    source: Any,
    locales: tuple[str, ...] | list[str],
    variables: Mapping[str, Any] | None = None,
    variable_options: Mapping[str, Mapping[str, Any]] | None = None,
    renderers: Mapping[str, VariableRenderer] | None = None,
    plural_resolver: PluralResolver | None = None,
) -> Any:
    """Render a source tree as authored (the absent-target path)."""

    return reconcile(
        source,
        None,
        locales,
        variables=variables,
        variable_options=variable_options,
        renderers=renderers,
        plural_resolver=plural_resolver,
    )
