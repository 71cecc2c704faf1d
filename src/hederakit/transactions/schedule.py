"""
Schedule Entity

Wraps an inner PendingTransaction for deferred, multi-party execution.
The schedule-create transaction has its own payer, admin key and
transaction id, independent of the inner transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from hederakit.keys.types import KeyList, PublicKey
from hederakit.transactions.pending import (
    PendingTransaction,
    TransactionId,
    TransactionKind,
)


@dataclass
class ScheduleEntity:
    """
    A schedule-creation request around ``inner``.

    Args:
        inner: The transaction to be executed once enough signatures arrive
        payer_account_id: Account that pays for the inner transaction
        admin_key: Key allowed to delete the schedule (None omits it)
        memo: Optional schedule memo
        transaction_id: Id of the schedule-create transaction itself
    """

    inner: PendingTransaction
    payer_account_id: Optional[str] = None
    admin_key: Optional[Union[PublicKey, KeyList]] = None
    memo: Optional[str] = None
    transaction_id: Optional[TransactionId] = None

    def as_transaction(self) -> PendingTransaction:
        """Build the ScheduleCreate transaction that carries ``inner``."""
        body = {"scheduled_transaction": self.inner}
        if self.payer_account_id:
            body["payer_account_id"] = self.payer_account_id
        if self.admin_key is not None:
            body["admin_key"] = self.admin_key
        if self.memo:
            body["schedule_memo"] = self.memo
        return PendingTransaction(
            kind=TransactionKind.SCHEDULE_CREATE,
            body=body,
            transaction_id=self.transaction_id,
        )
