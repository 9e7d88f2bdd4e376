"""Shared parsing helpers for config, environment, and CLI value normalization."""

from __future__ import annotations

from typing import Iterable


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_positive_float(value: object, field_name: str) -> float:
    """Parse a strictly positive number of seconds or similar quantity.

    Raises:
        ValueError: If the value is not a finite positive number.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a positive number.")
    normalized = normalize_optional_string(value)
    if normalized is None:
        raise ValueError(f"`{field_name}` must be a positive number.")
    try:
        parsed = float(normalized)
    except ValueError as exc:
        raise ValueError(f"`{field_name}` must be a positive number.") from exc
    if not parsed > 0.0 or parsed == float("inf"):
        raise ValueError(f"`{field_name}` must be a positive number.")
    return parsed


def parse_locale_list(value: object) -> tuple[str, ...]:
    """Parse a comma-separated string or sequence into an ordered locale tuple.

    Blank entries are skipped and duplicates keep their first position.
    """

    if value is None:
        return ()
    if isinstance(value, str):
        raw_items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw_items = value
    else:
        raise ValueError("Locales must be a comma-separated string or a list of strings.")

    locales: list[str] = []
    for item in raw_items:
        normalized = normalize_optional_string(item)
        if normalized is not None and normalized not in locales:
            locales.append(normalized)
    return tuple(locales)


def parse_key_value_pairs(items: Iterable[str]) -> dict[str, str]:
    """Parse `key=value` tokens into a mapping; later tokens override earlier ones.

    Raises:
        ValueError: If a token has no `=` or an empty key.
    """

    parsed: dict[str, str] = {}
    for item in items:
        key, separator, value = item.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ValueError(f"Expected `key=value`, got `{item}`.")
        parsed[key] = value
    return parsed
