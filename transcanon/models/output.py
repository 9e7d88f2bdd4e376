"""Renderable output datatypes produced by reconciliation.

Output trees carry no structural ids; they are recomputed on every
reconciliation call and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


UNRESOLVED_PLACEHOLDER = "undefined"


@dataclass(frozen=True, slots=True)
class OutputElement:
    """Rendered element with source attributes and reconciled children."""

    tag: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    children: OutputChildren = None


@dataclass(frozen=True, slots=True)
class RenderedVariable:
    """A variable bound to its resolved value, ready for a kind-specific renderer.

    Attributes:
        key: Variable key.
        kind: Variable kind constant.
        value: Bound value, or `None` when unresolved.
        options: Accumulated renderer options for the key.
        locales: Locale preference chain used for formatting.
        resolved: Whether a value was bound for the key.
    """

    key: str
    kind: str
    value: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)
    locales: tuple[str, ...] = ()
    resolved: bool = True

    @property
    def text(self) -> str:
        """Return the plain-text rendering of the bound value."""

        if not self.resolved:
            return UNRESOLVED_PLACEHOLDER
        if self.value is None:
            return ""
        return str(self.value)


OutputNode = Union[str, OutputElement, RenderedVariable]
OutputChildren = Union[OutputNode, tuple, None]


def render_text(output: Any) -> str:
    """Flatten an output tree into its visible text."""

    if output is None:
        return ""
    if isinstance(output, str):
        return output
    if isinstance(output, (list, tuple)):
        return "".join(render_text(item) for item in output)
    if isinstance(output, OutputElement):
        return render_text(output.children)
    if isinstance(output, RenderedVariable):
        return output.text
    return str(output)


def output_to_payload(output: Any) -> Any:
    """Convert an output tree into JSON-compatible data for CLI display."""

    if output is None or isinstance(output, str):
        return output
    if isinstance(output, (list, tuple)):
        return [output_to_payload(item) for item in output]
    if isinstance(output, OutputElement):
        payload: dict[str, Any] = {"tag": output.tag}
        if output.attributes:
            payload["attributes"] = {key: str(value) for key, value in output.attributes.items()}
        if output.children is not None:
            payload["children"] = output_to_payload(output.children)
        return payload
    if isinstance(output, RenderedVariable):
        return {
            "key": output.key,
            "kind": output.kind,
            "text": output.text,
            "resolved": output.resolved,
        }
    return str(output)
