"""Whitespace canonicalization for authored text runs.

Responsibilities:
- Treat only space, tab, LF and CR as insignificant whitespace.
- Preserve every other Unicode space-like code point verbatim.
- Collapse line-broken runs so re-indenting content never changes its fingerprint.
"""

from __future__ import annotations

import re


NORMAL_WHITESPACE = frozenset({" ", "\t", "\n", "\r"})
_NORMAL_WHITESPACE_CHARS = " \t\n\r"

# Invisible spacing/format characters that `str.isspace` does not report.
_SIGNIFICANT_FORMAT_CHARS = frozenset(
    {
        "\u00ad",  # soft hyphen
        "\u180e",  # mongolian vowel separator
        "\u200b",  # zero width space
        "\u200c",  # zero width non-joiner
        "\u200d",  # zero width joiner
        "\u2060",  # word joiner
        "\ufeff",  # zero width no-break space
    }
)

_SPACE_TAB_RUN_RE = re.compile(r"[ \t]+")
_LEADING_NORMAL_RE = re.compile(r"^[ \t\n\r]+")
_TRAILING_NORMAL_RE = re.compile(r"[ \t\n\r]+$")


def is_normal_whitespace(character: str) -> bool:
    """Return whether `character` is exactly one insignificant whitespace char."""

    return len(character) == 1 and character in NORMAL_WHITESPACE


def is_significant_whitespace(character: str) -> bool:
    """Return whether `character` is a preserved space-like code point."""

    if len(character) != 1 or character in NORMAL_WHITESPACE:
        return False
    return character.isspace() or character in _SIGNIFICANT_FORMAT_CHARS


def has_significant_whitespace(text: str) -> bool:
    """Return whether `text` contains any significant whitespace character."""

    return any(is_significant_whitespace(character) for character in text)


def trim_normal_whitespace(text: str) -> str:
    """Strip only insignificant whitespace from both ends of `text`."""

    return text.strip(_NORMAL_WHITESPACE_CHARS)


def _has_content(text: str) -> bool:
    """Return whether `text` holds any character other than insignificant whitespace."""

    return bool(text.strip(_NORMAL_WHITESPACE_CHARS))


def _trim_line_broken_edges(text: str) -> str:
    """Drop leading/trailing insignificant runs that contain a line break."""

    leading = _LEADING_NORMAL_RE.match(text)
    if leading is not None and "\n" in leading.group(0):
        text = text[leading.end():]
    trailing = _TRAILING_NORMAL_RE.search(text)
    if trailing is not None and "\n" in trailing.group(0):
        text = text[: trailing.start()]
    return text


def _join_lines(text: str) -> str:
    """Fold line breaks into single spaces, skipping indentation after each break."""

    result: list[str] = []
    in_line_break = False
    for character in text:
        if character == "\n":
            if _has_content("".join(result)):
                result.append(" ")
            else:
                result.clear()
            in_line_break = True
            continue
        if in_line_break and character in NORMAL_WHITESPACE:
            continue
        in_line_break = False
        result.append(character)
    return "".join(result)


def normalize_whitespace(raw_text: str, collapse: bool = False) -> str | None:
    """Canonicalize one raw text run.

    Runs without a line break pass through unchanged unless `collapse` is set,
    in which case consecutive spaces/tabs become one space. Runs containing a
    line break have CRLF/CR folded to LF, space/tab runs collapsed, edge runs
    that hold a line break dropped, and every interior line break replaced by
    one space (only after text with content; indentation on the next line is
    skipped).

    Args:
        raw_text: Text run exactly as authored.
        collapse: Collapse space/tab runs even when no line break is present.

    Returns:
        The normalized text, or `None` when the run should be omitted.
    """

    if "\n" not in raw_text and "\r" not in raw_text:
        if collapse:
            return _SPACE_TAB_RUN_RE.sub(" ", raw_text)
        return raw_text

    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    text = _SPACE_TAB_RUN_RE.sub(" ", text)
    if not _has_content(text):
        return None

    text = _trim_line_broken_edges(text)
    text = _join_lines(text)
    text = _SPACE_TAB_RUN_RE.sub(" ", text)
    if not text:
        return None
    return text
