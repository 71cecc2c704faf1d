"""
Execution types: options, receipts, results and Notes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from hederakit.keys.types import Key
from hederakit.transactions.pending import PendingTransaction


class Notes:
    """
    Ordered, human-readable explanations of applied defaults.

    A fresh instance is created for every operation and passed explicitly
    through construction, execution and dispatch.

    Example:
        ```python
        notes = Notes()
        notes.add("Your account (0.0.100) has been set as the token's treasury.")
        result = await engine.execute(tx, options, notes)
        result.notes.as_list()  # construction notes, then scheduling notes
        ```
    """

    def __init__(self, items: Optional[Iterable[str]] = None) -> None:
        self._items: List[str] = list(items or [])

    def add(self, note: str) -> None:
        self._items.append(note)

    def extend(self, notes: Union["Notes", Iterable[str]]) -> None:
        for note in notes:
            self.add(note)

    def as_list(self) -> List[str]:
        return list(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, note: object) -> bool:
        return note in self._items

    def __repr__(self) -> str:
        return f"Notes({self._items!r})"


@dataclass
class BuiltTransaction:
    """Value returned by every builder construction method."""

    transaction: PendingTransaction
    notes: Notes = field(default_factory=Notes)


@dataclass
class ExecutionOptions:
    """
    How a transaction should be submitted.

    Args:
        schedule: Wrap the transaction in a schedule-create
        schedule_memo: Memo for the schedule entity
        schedule_payer_account_id: Payer used when no end-user account exists
        schedule_admin_key: Admin key used as given instead of being derived
    """

    schedule: bool = False
    schedule_memo: Optional[str] = None
    schedule_payer_account_id: Optional[str] = None
    schedule_admin_key: Optional[Key] = None


@dataclass
class TransactionReceipt:
    """Normalized receipt returned by a signer's response."""

    status: str
    schedule_id: Optional[str] = None
    account_id: Optional[str] = None
    token_id: Optional[str] = None
    topic_id: Optional[str] = None
    contract_id: Optional[str] = None
    topic_sequence_number: Optional[int] = None
    serials: List[int] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == "SUCCESS"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status}
        for name in (
            "schedule_id",
            "account_id",
            "token_id",
            "topic_id",
            "contract_id",
            "topic_sequence_number",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.serials:
            data["serials"] = list(self.serials)
        return data


@dataclass
class ExecutionResult:
    """
    Outcome of a submission attempt.

    ``transaction_id`` is kept on failure for correlation; ``notes`` are
    attached whether or not the submission succeeded.
    """

    success: bool
    receipt: Optional[TransactionReceipt] = None
    error: Optional[str] = None
    transaction_id: Optional[str] = None
    schedule_id: Optional[str] = None
    notes: Notes = field(default_factory=Notes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.receipt is not None:
            data["receipt"] = self.receipt.to_dict()
        if self.error is not None:
            data["error"] = self.error
        if self.transaction_id is not None:
            data["transaction_id"] = self.transaction_id
        if self.schedule_id is not None:
            data["schedule_id"] = self.schedule_id
        data["notes"] = self.notes.as_list()
        return data
