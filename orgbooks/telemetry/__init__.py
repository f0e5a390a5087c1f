"""Telemetry and observability helpers.

This package emits deterministic operation events for auditing CLI runs.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
