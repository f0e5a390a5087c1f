"""Structured operation logging utilities.

Responsibilities:
- Emit concise, deterministic operation-level runtime logs through `loguru`.
- Keep document text, titles and authors out of failure records.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from loguru import logger as _loguru_logger


_UNSAFE_TOKEN_RE = re.compile(r"[^\w./-]+")


def _context_token(value: object) -> str:
    """Collapse a context value into one space-free token (`none` when blank)."""

    token = _UNSAFE_TOKEN_RE.sub("_", str(value).strip())
    return token or "none"


def _format_context(context: dict[str, object]) -> str:
    """Render context as ` key=value` pairs sorted by key."""

    return "".join(f" {key}={_context_token(context[key])}" for key in sorted(context))


class RunLogger:
    """Emit deterministic operation logs for CLI-observable reading-list activity."""

    def __init__(self, sink: TextIO | None = None) -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level="INFO", colorize=False)

    def _emit(self, level: str, event: str, operation: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[op] level={level} operation={operation} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_operation_start(self, operation: str, **context: object) -> None:
        """Emit an operation-start runtime event."""

        self._emit("INFO", "start", operation, **context)

    def log_operation_complete(self, operation: str, **context: object) -> None:
        """Emit an operation-complete runtime event."""

        self._emit("INFO", "complete", operation, **context)

    def log_operation_failure(self, operation: str, error_type: str) -> None:
        """Emit an operation-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", operation, error_type=error_type)
