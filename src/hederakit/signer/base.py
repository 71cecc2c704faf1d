"""
Signer Interfaces

The kit never talks to consensus nodes itself. A signer supplies the
identity (account + key), produces signatures and hands signed
transactions to a submission capability that returns a response whose
receipt reports the outcome.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from hederakit.config import Network, get_network_config
from hederakit.errors import SubmissionFailureError
from hederakit.keys.types import PublicKey
from hederakit.mirror.client import MirrorNodeClient
from hederakit.transactions.pending import PendingTransaction
from hederakit.transactions.results import TransactionReceipt
from hederakit.utils.logging import get_logger

_logger = get_logger(__name__)


@runtime_checkable
class TransactionResponse(Protocol):
    """Handle to a submitted transaction."""

    transaction_id: Optional[str]

    async def get_receipt(self) -> TransactionReceipt:
        ...


@runtime_checkable
class TransactionSubmitter(Protocol):
    """Capability that delivers a signed transaction to the network."""

    async def submit(self, transaction: PendingTransaction) -> TransactionResponse:
        ...


class AbstractSigner(ABC):
    """
    Base class for signers.

    Subclasses provide identity, signing and submission. The public key is
    looked up through the mirror node so that it reflects the account's
    current on-ledger key.
    """

    mirror_node: MirrorNodeClient

    @abstractmethod
    def get_account_id(self) -> str:
        """Account id of the signing identity."""

    @abstractmethod
    def get_network(self) -> Network:
        """Network the signer operates on."""

    @abstractmethod
    async def sign(self, transaction: PendingTransaction) -> PendingTransaction:
        """Sign a frozen transaction in place and return it."""

    @abstractmethod
    async def execute(self, transaction: PendingTransaction) -> TransactionResponse:
        """Submit a signed transaction."""

    async def get_public_key(self) -> PublicKey:
        """
        Current public key of the signer's account (one mirror query).

        Raises:
            QueryFailureError: If the key cannot be retrieved
        """
        return await self.mirror_node.get_public_key(self.get_account_id())

    def freeze(self, transaction: PendingTransaction) -> PendingTransaction:
        """Freeze with this signer as payer and the network's default nodes."""
        nodes = get_network_config(self.get_network()).node_account_ids
        return transaction.freeze_with(self.get_account_id(), nodes)

    async def sign_and_execute_transaction(
        self,
        transaction: PendingTransaction,
    ) -> TransactionReceipt:
        """
        Freeze if needed, sign, submit and wait for the receipt.

        Raises:
            SubmissionFailureError: If the receipt status is not SUCCESS
        """
        if not transaction.is_frozen:
            self.freeze(transaction)
        signed = await self.sign(transaction)
        response = await self.execute(signed)
        receipt = await response.get_receipt()
        if not receipt.succeeded:
            raise SubmissionFailureError(
                f"Transaction failed with status {receipt.status}",
                status=receipt.status,
                transaction_id=str(signed.transaction_id) if signed.transaction_id else None,
                schedule_id=receipt.schedule_id,
            )
        _logger.debug(
            "Transaction executed",
            extra={"transaction_id": str(signed.transaction_id), "status": receipt.status},
        )
        return receipt
