"""
hederakit Execution.

- ExecutionEngine: plain or scheduled submission, bytes serialization
- ModeDispatcher: execute now / create schedule / return bytes
- OPERATIONS: built-in operation catalogue
"""

from hederakit.execution.engine import ExecutionEngine
from hederakit.execution.dispatcher import (
    DispatchOutcome,
    DispatchResult,
    MetaOptions,
    ModeDispatcher,
    TransactionOperation,
    select_outcome,
)
from hederakit.execution.operations import OPERATIONS

__all__ = [
    # Engine
    "ExecutionEngine",
    # Dispatch
    "DispatchOutcome",
    "DispatchResult",
    "MetaOptions",
    "ModeDispatcher",
    "TransactionOperation",
    "select_outcome",
    # Catalogue
    "OPERATIONS",
]
