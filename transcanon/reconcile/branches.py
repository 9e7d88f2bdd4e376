"""Branch arm selection over a locale preference chain.

The engine never encodes locale plural rules: a plural resolver supplied by
the caller maps `(selector value, locale)` to a category name. The default
resolver only accepts an already resolved category string.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from ..models.tree import BRANCH_KIND_PLURAL

PluralResolver = Callable[[Any, str], "str | None"]

_ARM_SYNONYMS: Mapping[str, tuple[str, ...]] = {
    "one": ("singular",),
    "singular": ("one",),
    "other": ("plural",),
    "plural": ("other",),
}


def default_plural_resolver(value: Any, locale: str) -> str | None:
    """Return `value` when it is already a category name, else `None`."""

    _ = locale
    if isinstance(value, str) and value:
        return value
    return None


def _match_arm(candidate: str, arms: Mapping[str, Any]) -> str | None:
    """Return the arm key matching `candidate` or one of its synonyms."""

    if candidate in arms:
        return candidate
    for synonym in _ARM_SYNONYMS.get(candidate, ()):
        if synonym in arms:
            return synonym
    return None


def select_arm_key(
    kind: str,
    selector_value: Any,
    locales: tuple[str, ...],
    arms: Mapping[str, Any],
    plural_resolver: PluralResolver | None = None,
) -> str | None:
    """Pick the arm key for a selector value, or `None` to use the default.

    Plural branches resolve a category per locale, most specific first, and
    take the first category the arms actually define. Other branches match
    the selector value's string form directly.
    """

    if not arms:
        return None
    if kind != BRANCH_KIND_PLURAL:
        key = str(selector_value)
        return key if key in arms else None

    resolver = plural_resolver or default_plural_resolver
    for locale in locales:
        category = resolver(selector_value, locale)
        if not category:
            continue
        matched = _match_arm(category, arms)
        if matched is not None:
            return matched
    return None
