"""Locale preference chain resolution."""

from __future__ import annotations

from typing import Iterable

from ..parsing import normalize_optional_string


def standardize_locale(locale: str) -> str:
    """Normalize BCP-47 casing: `en_us` -> `en-US`, `zh-hant-tw` -> `zh-Hant-TW`."""

    parts = [part for part in locale.replace("_", "-").split("-") if part]
    if not parts:
        return ""
    normalized = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            normalized.append(part.title())
        elif len(part) == 2 and part.isalpha():
            normalized.append(part.upper())
        elif len(part) == 3 and part.isdigit():
            normalized.append(part)
        else:
            normalized.append(part.lower())
    return "-".join(normalized)


def _with_parents(locale: str) -> list[str]:
    """Return `locale` followed by each shorter subtag prefix."""

    parts = locale.split("-")
    return ["-".join(parts[:size]) for size in range(len(parts), 0, -1)]


def resolve_locale_chain(requested: str | Iterable[str] | None, default: str) -> tuple[str, ...]:
    """Return candidate locales, most specific first, ending with the default.

    Example: `("fr-CA", "en")` for requested `fr-ca` yields
    `("fr-CA", "fr", "en")`.
    """

    if requested is None:
        requested_items: list[str] = []
    elif isinstance(requested, str):
        requested_items = [requested]
    else:
        requested_items = list(requested)

    chain: list[str] = []
    for item in [*requested_items, default]:
        normalized = normalize_optional_string(item)
        if normalized is None:
            continue
        standardized = standardize_locale(normalized)
        if not standardized:
            continue
        for candidate in _with_parents(standardized):
            if candidate not in chain:
                chain.append(candidate)
    return tuple(chain)
