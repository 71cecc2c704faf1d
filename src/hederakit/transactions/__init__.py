"""
Transaction model: pending transactions, schedules and execution results.
"""

from hederakit.transactions.pending import (
    TRANSACTION_VALID_DURATION_SECONDS,
    PendingTransaction,
    TransactionId,
    TransactionKind,
)
from hederakit.transactions.results import (
    BuiltTransaction,
    ExecutionOptions,
    ExecutionResult,
    Notes,
    TransactionReceipt,
)
from hederakit.transactions.schedule import ScheduleEntity

__all__ = [
    "TRANSACTION_VALID_DURATION_SECONDS",
    "PendingTransaction",
    "TransactionId",
    "TransactionKind",
    "ScheduleEntity",
    "BuiltTransaction",
    "ExecutionOptions",
    "ExecutionResult",
    "Notes",
    "TransactionReceipt",
]
