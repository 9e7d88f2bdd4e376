"""Telemetry and observability helpers.

This package emits deterministic engine events for auditing degradations.
"""

from .logger import EventLogger

__all__ = ["EventLogger"]
