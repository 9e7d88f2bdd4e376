"""Shared typed data models for transcanon.

This package contains the content tree dataclasses used across id assignment,
hashing, and reconciliation modules to avoid circular imports.
"""

from .output import (
    UNRESOLVED_PLACEHOLDER,
    OutputElement,
    RenderedVariable,
    output_to_payload,
    render_text,
)
from .tree import (
    BRANCH_KIND_BRANCH,
    BRANCH_KIND_PLURAL,
    MISSING,
    VARIABLE_KIND_CURRENCY,
    VARIABLE_KIND_DATE,
    VARIABLE_KIND_GENERIC,
    VARIABLE_KIND_NUMBER,
    VARIABLE_KIND_STATIC,
    Branch,
    Element,
    SourceTree,
    TargetBranch,
    TargetElement,
    TargetVariable,
    Variable,
)

__all__ = [
    "BRANCH_KIND_BRANCH",
    "BRANCH_KIND_PLURAL",
    "MISSING",
    "UNRESOLVED_PLACEHOLDER",
    "VARIABLE_KIND_CURRENCY",
    "VARIABLE_KIND_DATE",
    "VARIABLE_KIND_GENERIC",
    "VARIABLE_KIND_NUMBER",
    "VARIABLE_KIND_STATIC",
    "Branch",
    "Element",
    "OutputElement",
    "RenderedVariable",
    "SourceTree",
    "TargetBranch",
    "TargetElement",
    "TargetVariable",
    "Variable",
    "output_to_payload",
    "render_text",
]
