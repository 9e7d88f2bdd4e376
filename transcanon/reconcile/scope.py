"""Variable scope and renderer registry used during reconciliation.

Responsibilities:
- Hold bound variable values and accumulated per-key renderer options.
- Extend scope without mutation so sibling subtrees never observe each other.
- Dispatch bound variables to the renderer registered for their kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from ..models.output import RenderedVariable
from ..models.tree import (
    MISSING,
    VARIABLE_KIND_CURRENCY,
    VARIABLE_KIND_DATE,
    VARIABLE_KIND_GENERIC,
    VARIABLE_KIND_NUMBER,
    VARIABLE_KIND_STATIC,
    SourceTree,
    Variable,
)

VariableRenderer = Callable[[RenderedVariable], Any]


def _render_bound(binding: RenderedVariable) -> Any:
    """Default renderer: emit the binding itself for the UI layer to format."""

    return binding


DEFAULT_RENDERERS: Mapping[str, VariableRenderer] = {
    VARIABLE_KIND_GENERIC: _render_bound,
    VARIABLE_KIND_NUMBER: _render_bound,
    VARIABLE_KIND_DATE: _render_bound,
    VARIABLE_KIND_CURRENCY: _render_bound,
    VARIABLE_KIND_STATIC: _render_bound,
}


@dataclass(frozen=True, slots=True)
class RenderScope:
    """Immutable variable scope for one reconciliation subtree.

    Attributes:
        values: Bound value per variable key.
        options: Accumulated renderer options per variable key.
    """

    values: Mapping[str, Any] = field(default_factory=dict)
    options: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_source(
        cls,
        source: Any,
        variables: Mapping[str, Any] | None = None,
        variable_options: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> RenderScope:
        """Build the root scope: caller values override hoisted source defaults."""

        values: dict[str, Any] = {}
        options: dict[str, dict[str, Any]] = {}
        if isinstance(source, SourceTree):
            values.update(source.variables)
            for key, key_options in source.variable_options.items():
                options[key] = dict(key_options)
        values.update(variables or {})
        for key, key_options in (variable_options or {}).items():
            options[key] = {**options.get(key, {}), **key_options}
        return cls(values=values, options=options)

    def has(self, key: str) -> bool:
        """Return whether `key` is bound."""

        return key in self.values

    def lookup(self, key: str) -> Any:
        """Return the bound value for `key`, or `MISSING`."""

        return self.values.get(key, MISSING)

    def bind(self, key: str, value: Any) -> RenderScope:
        """Return a scope with `key` bound to `value`."""

        return RenderScope(values={**self.values, key: value}, options=self.options)

    def absorb(self, variables: Iterable[Variable]) -> RenderScope:
        """Return a scope that binds defaults for currently unbound variables.

        Renderer options accumulate for every absorbed key; options already in
        scope win over the variable's own options.
        """

        values = dict(self.values)
        options = {key: dict(value) for key, value in self.options.items()}
        changed = False
        for variable in variables:
            if not isinstance(variable.key, str):
                continue
            if variable.key not in values:
                values[variable.key] = variable.default_value
                changed = True
            if variable.options:
                options[variable.key] = {**variable.options, **options.get(variable.key, {})}
                changed = True
        if not changed:
            return self
        return RenderScope(values=values, options=options)


def render_variable(
    key: str,
    kind: str,
    scope: RenderScope,
    locales: tuple[str, ...],
    renderers: Mapping[str, VariableRenderer],
) -> Any:
    """Bind `key` from scope and render it with the renderer for `kind`."""

    value = scope.lookup(key)
    resolved = value is not MISSING
    binding = RenderedVariable(
        key=key,
        kind=kind,
        value=value if resolved else None,
        options=dict(scope.options.get(key, {})),
        locales=locales,
        resolved=resolved,
    )
    renderer = renderers.get(kind) or renderers.get(VARIABLE_KIND_GENERIC) or _render_bound
    return renderer(binding)
