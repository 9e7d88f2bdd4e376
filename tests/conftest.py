"""Shared pytest fixtures for the full transcanon test suite."""

from __future__ import annotations

import io

import pytest

from transcanon.models import Element, Variable
from transcanon.telemetry.logger import EventLogger


@pytest.fixture
def greeting_content() -> Element:
    """Provide the authored `<div>Hello {name}</div>` tree with a default name."""

    return Element(
        tag="div",
        children=("Hello ", Variable(key="name", default_value="World")),
    )


@pytest.fixture
def event_stream() -> io.StringIO:
    """Provide an in-memory sink for engine event lines."""

    return io.StringIO()


@pytest.fixture
def event_logger(event_stream: io.StringIO) -> EventLogger:
    """Provide an event logger writing deterministic lines to `event_stream`."""

    return EventLogger(sink=event_stream, level="DEBUG")
