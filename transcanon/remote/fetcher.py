"""HTTP client for fetching translation payloads by fingerprint.

Responsibilities:
- GET one translation payload per `(fingerprint, locale)` from a cache service.
- Treat missing entries as an absent target rather than an error.
- Raise `TranslationFetchError` with a failure classification otherwise.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import requests


class TranslationFetchError(RuntimeError):
    """Raised when a translation request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize fetch error metadata for diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code


class TranslationFetcher(Protocol):
    """Protocol for translation payload sources."""

    def fetch(
        self,
        fingerprint: str,
        locale: str,
        context: str | None,
        timeout_seconds: float,
    ) -> Any:
        """Return the raw target payload, or `None` when no translation exists."""


class HttpTranslationFetcher:
    """Fetch translation payloads from `{cache_url}/{project_id}/{locale}/{fingerprint}`."""

    def __init__(
        self,
        *,
        cache_url: str,
        project_id: str,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize endpoint settings and an optional shared HTTP session."""

        self.cache_url = cache_url.rstrip("/")
        self.project_id = project_id.strip("/")
        self.session = session if session is not None else requests.Session()

    def endpoint(self, fingerprint: str, locale: str) -> str:
        """Return the request URL for one translation entry."""

        return f"{self.cache_url}/{self.project_id}/{locale}/{fingerprint}"

    def fetch(
        self,
        fingerprint: str,
        locale: str,
        context: str | None,
        timeout_seconds: float,
    ) -> Any:
        """GET one translation payload, returning `None` for missing entries."""

        params = {"context": context} if context else None
        try:
            response = self.session.get(
                self.endpoint(fingerprint, locale),
                params=params,
                timeout=timeout_seconds,
            )
        except requests.Timeout as exc:
            raise TranslationFetchError(
                "Translation request timed out.", failure_kind="timeout"
            ) from exc
        except requests.RequestException as exc:
            raise TranslationFetchError(
                f"Translation request transport error: {exc}", failure_kind="transport"
            ) from exc

        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise TranslationFetchError(
                f"Translation request failed with HTTP {response.status_code}.",
                failure_kind="http",
                status_code=response.status_code,
            ) from exc

        body = bytes(response.content)
        if not body.strip():
            return None
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TranslationFetchError(
                "Translation response is not valid JSON.", failure_kind="malformed"
            ) from exc
        if payload == {} or payload == []:
            return None
        return payload
