"""Reconciliation of a loaded world against the current research state."""

from .sweeper import (
    ReconciliationSweeper,
    RemovalFailure,
    SweepReport,
    Violation,
    failure_messages,
    partition_name,
    summary_messages,
)

__all__ = [
    "ReconciliationSweeper",
    "RemovalFailure",
    "SweepReport",
    "Violation",
    "failure_messages",
    "partition_name",
    "summary_messages",
]
