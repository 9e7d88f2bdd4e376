"""Unit tests for the single-flight translation memo."""

from __future__ import annotations

import io
import threading
from typing import Any

import pytest

from transcanon.remote import TranslationFetchError, TranslationMemo
from transcanon.telemetry.logger import EventLogger


class _GatedFetcher:
    """Fetcher double that blocks until released and counts calls."""

    def __init__(self, payload: Any = "Bonjour") -> None:
        self.payload = payload
        self.release = threading.Event()
        self.started = threading.Event()
        self.calls: list[tuple[str, str, str | None, float]] = []
        self._lock = threading.Lock()

    def fetch(
        self, fingerprint: str, locale: str, context: str | None, timeout_seconds: float
    ) -> Any:
        """Record the call, wait for release, then return or raise the payload."""

        with self._lock:
            self.calls.append((fingerprint, locale, context, timeout_seconds))
        self.started.set()
        self.release.wait(timeout=5.0)
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_memo_runs_one_fetch_for_concurrent_waiters() -> None:
    """Concurrent callers for the same key should share one in-flight fetch."""

    fetcher = _GatedFetcher(payload=["Bonjour"])
    results: list[Any] = []
    results_lock = threading.Lock()

    with TranslationMemo(fetcher, timeout_seconds=5.0) as memo:

        def _worker() -> None:
            value = memo.get("abc", "fr")
            with results_lock:
                results.append(value)

        threads = [threading.Thread(target=_worker) for _ in range(6)]
        for thread in threads:
            thread.start()
        assert fetcher.started.wait(timeout=5.0)
        fetcher.release.set()
        for thread in threads:
            thread.join(timeout=5.0)

        assert results == [["Bonjour"]] * 6
        assert memo.fetch_count == 1
        assert memo.peek("abc", "fr") == ["Bonjour"]
        assert memo.get("abc", "fr") == ["Bonjour"]
        assert len(fetcher.calls) == 1


def test_memo_keys_by_fingerprint_and_locale() -> None:
    """Different locales for one fingerprint are separate cache entries."""

    fetcher = _GatedFetcher()
    fetcher.release.set()

    with TranslationMemo(fetcher) as memo:
        memo.get("abc", "fr", context="home")
        memo.get("abc", "de")

    assert [call[:3] for call in fetcher.calls] == [("abc", "fr", "home"), ("abc", "de", None)]


def test_memo_never_fetches_static_fingerprint() -> None:
    """The empty static sentinel should short-circuit to an absent target."""

    fetcher = _GatedFetcher()

    with TranslationMemo(fetcher) as memo:
        assert memo.get("", "fr") is None
        assert memo.fetch_count == 0


def test_memo_timeout_returns_absent_and_discards_late_result(
    event_logger: EventLogger, event_stream: io.StringIO
) -> None:
    """A timed-out wait yields `None`; the late result is not memoized."""

    fetcher = _GatedFetcher(payload="tard")

    with TranslationMemo(
        fetcher, timeout_seconds=0.05, logger=event_logger
    ) as memo:
        assert memo.get("abc", "fr") is None
        fetcher.release.set()

        assert memo.get("abc", "fr", timeout_seconds=5.0) == "tard"
        assert memo.fetch_count == 2

    assert "reason=timeout" in event_stream.getvalue()


def test_memo_fetch_errors_return_absent_and_are_not_memoized(
    event_logger: EventLogger, event_stream: io.StringIO
) -> None:
    """A failing fetch should degrade to `None` and allow a later retry."""

    fetcher = _GatedFetcher(payload=TranslationFetchError("boom", failure_kind="http"))
    fetcher.release.set()

    with TranslationMemo(fetcher, logger=event_logger) as memo:
        assert memo.get("abc", "fr") is None
        assert memo.peek("abc", "fr") is None
        fetcher.payload = "ok"
        assert memo.get("abc", "fr") == "ok"

    assert "error_type=TranslationFetchError" in event_stream.getvalue()
    assert "reason=fetch_error" in event_stream.getvalue()


def test_memo_invalidate_forces_refetch() -> None:
    """Invalidating a key should drop the memoized payload."""

    fetcher = _GatedFetcher(payload="v1")
    fetcher.release.set()

    with TranslationMemo(fetcher) as memo:
        assert memo.get("abc", "fr") == "v1"
        memo.invalidate("abc", "fr")
        assert memo.peek("abc", "fr") is None
        fetcher.payload = "v2"
        assert memo.get("abc", "fr") == "v2"
        assert memo.fetch_count == 2


def test_memo_invalidate_discards_superseded_in_flight_result() -> None:
    """Waiters on a superseded fetch still get its result, but it is not memoized."""

    fetcher = _GatedFetcher(payload="stale")
    results: list[Any] = []

    with TranslationMemo(fetcher, timeout_seconds=5.0) as memo:
        waiter = threading.Thread(target=lambda: results.append(memo.get("abc", "fr")))
        waiter.start()
        assert fetcher.started.wait(timeout=5.0)
        memo.invalidate("abc", "fr")
        fetcher.release.set()
        waiter.join(timeout=5.0)

        assert results == ["stale"]
        assert memo.peek("abc", "fr") is None


def test_memo_caps_timeouts_at_hard_maximum() -> None:
    """Caller timeouts should never exceed the configured maximum."""

    with TranslationMemo(_GatedFetcher(), timeout_seconds=8.0, max_timeout_seconds=60.0) as memo:
        assert memo.effective_timeout(None) == 8.0
        assert memo.effective_timeout(600.0) == 60.0
        assert memo.effective_timeout(1.5) == 1.5


def test_memo_rejects_non_positive_timeouts() -> None:
    """Timeout policy values must be positive."""

    with pytest.raises(ValueError):
        TranslationMemo(_GatedFetcher(), timeout_seconds=0.0)
