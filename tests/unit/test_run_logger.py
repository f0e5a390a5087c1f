"""Unit tests for deterministic operation log lines."""

from __future__ import annotations

import io

from orgbooks.telemetry.logger import RunLogger


def test_run_logger_emits_sorted_sanitized_context() -> None:
    """Context keys are sorted and runs of unsafe characters become one underscore."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)

    run_logger.log_operation_start("add", placement="top: yes", file="/tmp/my  books.org")
    run_logger.log_operation_complete("add", note="")

    assert sink.getvalue().splitlines() == [
        "[op] level=INFO operation=add event=start file=/tmp/my_books.org placement=top_yes",
        "[op] level=INFO operation=add event=complete note=none",
    ]


def test_run_logger_failure_records_only_error_type() -> None:
    """Failure lines carry the exception class name and nothing else."""

    sink = io.StringIO()

    RunLogger(sink=sink).log_operation_failure("resolve", "MetadataResolutionFailed")

    assert sink.getvalue() == (
        "[op] level=ERROR operation=resolve event=failure error_type=MetadataResolutionFailed\n"
    )
