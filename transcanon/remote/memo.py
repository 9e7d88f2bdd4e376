"""Single-flight memo for translation fetches.

Responsibilities:
- Keep at most one in-flight fetch per `(fingerprint, locale)` key.
- Cap every wait by a hard maximum timeout and report timeouts/errors as an
  absent target (`None`) instead of raising.
- Memoize successful payloads for the memo's lifetime; never memoize results
  of a fetch that timed out or was superseded by `invalidate`.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
import threading
from typing import Any

from ..telemetry.logger import EventLogger
from .fetcher import TranslationFetcher

MemoKey = tuple[str, str]


@dataclass(frozen=True, slots=True)
class _InFlight:
    """One running fetch and the key generation it was started under."""

    future: Future
    generation: int


class TranslationMemo:
    """Thread-safe memo of target payloads keyed by fingerprint and locale."""

    def __init__(
        self,
        fetcher: TranslationFetcher,
        *,
        timeout_seconds: float = 8.0,
        max_timeout_seconds: float = 60.0,
        max_workers: int = 4,
        logger: EventLogger | None = None,
    ) -> None:
        """Initialize fetch policy and the worker pool used for fetches."""

        if timeout_seconds <= 0.0 or max_timeout_seconds <= 0.0:
            raise ValueError("Fetch timeouts must be positive.")
        self._fetcher = fetcher
        self.timeout_seconds = timeout_seconds
        self.max_timeout_seconds = max_timeout_seconds
        self._logger = logger
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="transcanon-fetch"
        )
        self._lock = threading.Lock()
        self._results: dict[MemoKey, Any] = {}
        self._inflight: dict[MemoKey, _InFlight] = {}
        self._generations: dict[MemoKey, int] = {}
        self.fetch_count = 0

    def __enter__(self) -> TranslationMemo:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop accepting fetches; running fetches finish in the background."""

        self._executor.shutdown(wait=False, cancel_futures=True)

    def effective_timeout(self, timeout_seconds: float | None) -> float:
        """Return the caller timeout clamped to the hard maximum."""

        requested = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        return max(0.0, min(requested, self.max_timeout_seconds))

    def _degrade(self, reason: str, **context: object) -> None:
        if self._logger is not None:
            self._logger.log_degradation("fetch", reason, **context)

    def _settle(self, key: MemoKey, entry: _InFlight) -> None:
        """Record a successful fetch unless it was superseded."""

        with self._lock:
            if self._inflight.get(key) is entry:
                del self._inflight[key]
            if entry.generation != self._generations.get(key, 0):
                return
            payload = entry.future.result()
            if payload is not None:
                self._results[key] = payload

    def _supersede(self, key: MemoKey, entry: _InFlight) -> None:
        """Detach a failed or timed-out fetch so its result is never memoized."""

        with self._lock:
            if self._inflight.get(key) is entry:
                del self._inflight[key]
                self._generations[key] = self._generations.get(key, 0) + 1

    def _start(self, key: MemoKey, context: str | None, timeout: float) -> _InFlight:
        """Start a fetch for `key`; the caller must hold the lock."""

        fingerprint, locale = key
        future = self._executor.submit(self._fetcher.fetch, fingerprint, locale, context, timeout)
        entry = _InFlight(future=future, generation=self._generations.get(key, 0))
        self._inflight[key] = entry
        self.fetch_count += 1
        return entry

    def get(
        self,
        fingerprint: str,
        locale: str,
        context: str | None = None,
        timeout_seconds: float | None = None,
    ) -> Any:
        """Return the target payload for a key, or `None` when it is absent.

        An empty fingerprint marks fully static content and never fetches.
        """

        if not fingerprint:
            return None
        key = (fingerprint, locale)
        timeout = self.effective_timeout(timeout_seconds)
        with self._lock:
            if key in self._results:
                return self._results[key]
            entry = self._inflight.get(key)
            if entry is None:
                entry = self._start(key, context, timeout)

        try:
            payload = entry.future.result(timeout=timeout)
        except FutureTimeoutError:
            self._supersede(key, entry)
            self._degrade("timeout", fingerprint=fingerprint, locale=locale)
        except Exception as exc:
            self._supersede(key, entry)
            self._degrade(
                "fetch_error",
                fingerprint=fingerprint,
                locale=locale,
                error_type=type(exc).__name__,
            )
        else:
            self._settle(key, entry)
            return payload
        return None

    def peek(self, fingerprint: str, locale: str) -> Any:
        """Return a memoized payload without fetching."""

        with self._lock:
            return self._results.get((fingerprint, locale))

    def invalidate(self, fingerprint: str, locale: str) -> None:
        """Forget a memoized payload and supersede any in-flight fetch.

        Waiters already blocked on the in-flight fetch still receive its
        result, but that result is not memoized.
        """

        key = (fingerprint, locale)
        with self._lock:
            self._results.pop(key, None)
            self._inflight.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
