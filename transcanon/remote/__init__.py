"""Translation loading collaborators.

This package fetches target payloads by fingerprint, memoizes them per
`(fingerprint, locale)`, and resolves locale preference chains.
"""

from .fetcher import HttpTranslationFetcher, TranslationFetcher, TranslationFetchError
from .locales import resolve_locale_chain, standardize_locale
from .memo import TranslationMemo

__all__ = [
    "HttpTranslationFetcher",
    "TranslationFetchError",
    "TranslationFetcher",
    "TranslationMemo",
    "resolve_locale_chain",
    "standardize_locale",
]
