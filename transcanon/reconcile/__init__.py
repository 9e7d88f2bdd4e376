"""Reconciliation of translated content onto authored content.

This package merges target trees onto source trees, binding variables from
scope and selecting branch arms along a locale preference chain.
"""

from .branches import default_plural_resolver, select_arm_key
from .reconciler import Reconciler, reconcile, render_default
from .scope import DEFAULT_RENDERERS, RenderScope, render_variable

__all__ = [
    "DEFAULT_RENDERERS",
    "Reconciler",
    "RenderScope",
    "default_plural_resolver",
    "reconcile",
    "render_default",
    "render_variable",
    "select_arm_key",
]
