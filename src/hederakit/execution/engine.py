"""
Execution Engine

Takes a built transaction to the ledger, either directly or wrapped in a
schedule-create, and normalizes the outcome.

Submission never raises: failures come back as ``ExecutionResult`` with
``success=False`` and the transaction id kept for correlation.
Construction errors (bad parameters, frozen transactions) are raised
before anything is submitted.

Schedule wrapping:
- inner transaction id generated for the end-user account when unset
- payer: end-user account → explicit schedule payer → agent (with Note)
- admin key: threshold-1 list of agent key + end-user key, unless an
  explicit ``schedule_admin_key`` is given
"""

from __future__ import annotations

from typing import Optional, Union

from hederakit.config import get_network_config
from hederakit.context import AgentContext
from hederakit.errors import HederaKitError, IllegalStateError
from hederakit.keys.types import KeyList, PublicKey, as_public
from hederakit.mirror.client import MirrorNodeClient
from hederakit.signer.base import AbstractSigner
from hederakit.transactions.pending import PendingTransaction, TransactionId
from hederakit.transactions.results import ExecutionOptions, ExecutionResult, Notes
from hederakit.transactions.schedule import ScheduleEntity
from hederakit.utils.logging import get_logger

_logger = get_logger(__name__)

NO_TRANSACTION_ERROR = "No transaction to execute."


class ExecutionEngine:
    """
    Plain or scheduled submission of pending transactions.

    Args:
        context: Agent session context (signer, mode, end-user account)
        mirror_node: Used to look up the end-user key for schedule admin keys

    Example:
        ```python
        engine = ExecutionEngine(context, mirror)
        built = await kit.hts().create_fungible_token({...})
        result = await engine.execute(built.transaction, notes=built.notes)
        if result.success:
            print(result.receipt.token_id)
        ```
    """

    def __init__(self, context: AgentContext, mirror_node: MirrorNodeClient) -> None:
        self._context = context
        self._mirror = mirror_node

    @property
    def signer(self) -> AbstractSigner:
        return self._context.signer

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def execute(
        self,
        transaction: Optional[PendingTransaction],
        options: Optional[ExecutionOptions] = None,
        notes: Optional[Notes] = None,
    ) -> ExecutionResult:
        """
        Sign and submit ``transaction`` with the agent signer.

        With ``options.schedule`` the transaction is wrapped in a
        schedule-create first. Never raises for submission failures.

        Args:
            transaction: Transaction to submit (None gives a failure result)
            options: Scheduling options
            notes: Notes accumulated during construction

        Returns:
            ExecutionResult carrying ``notes`` plus any scheduling notes
        """
        options = options or ExecutionOptions()
        notes = Notes(notes)

        if transaction is None:
            return ExecutionResult(success=False, error=NO_TRANSACTION_ERROR, notes=notes)

        to_submit = transaction
        if options.schedule:
            to_submit = await self._build_schedule(transaction, options, notes)

        reported_id = _id_string(transaction.transaction_id)
        try:
            if not to_submit.is_frozen:
                self.signer.freeze(to_submit)
            reported_id = _id_string(to_submit.transaction_id) or reported_id

            receipt = await self.signer.sign_and_execute_transaction(to_submit)
        except Exception as e:
            _logger.error(
                "Transaction execution failed",
                extra={
                    "kind": to_submit.kind.value,
                    "transaction_id": reported_id,
                    "error": str(e),
                },
            )
            return ExecutionResult(
                success=False,
                error=str(e) or "An unknown error occurred during transaction execution.",
                transaction_id=reported_id,
                notes=notes,
            )

        result = ExecutionResult(
            success=True,
            receipt=receipt,
            transaction_id=reported_id,
            notes=notes,
        )
        if options.schedule and receipt.schedule_id:
            result.schedule_id = receipt.schedule_id

        _logger.info(
            "Transaction executed",
            extra={
                "kind": to_submit.kind.value,
                "transaction_id": reported_id,
                "schedule_id": result.schedule_id,
            },
        )
        return result

    async def get_transaction_bytes(
        self,
        transaction: Optional[PendingTransaction],
        options: Optional[ExecutionOptions] = None,
        notes: Optional[Notes] = None,
    ) -> str:
        """
        Serialize ``transaction`` (or its schedule wrapper) to base64.

        The transaction is frozen with the end-user account as payer when
        one is configured, otherwise the agent. Nothing is submitted.

        Raises:
            IllegalStateError: If there is no transaction
        """
        if transaction is None:
            raise IllegalStateError(
                "No transaction to get bytes for. Call a construction method first.",
                operation="get transaction bytes",
            )
        options = options or ExecutionOptions()
        notes = notes if notes is not None else Notes()

        to_encode = transaction
        if options.schedule:
            to_encode = await self._build_schedule(transaction, options, notes)

        if not to_encode.is_frozen:
            payer = self._context.user_account_id or self._context.signer_account_id
            nodes = get_network_config(self._context.network).node_account_ids
            to_encode.freeze_with(payer, nodes)

        _logger.debug(
            "Serialized transaction",
            extra={"kind": to_encode.kind.value, "transaction_id": str(to_encode.transaction_id)},
        )
        return to_encode.to_base64()

    async def execute_with_signer(
        self,
        transaction: Optional[PendingTransaction],
        signer: AbstractSigner,
        notes: Optional[Notes] = None,
    ) -> ExecutionResult:
        """
        Submit with a different identity than the agent's.

        Raises:
            IllegalStateError: If the transaction is already frozen
        """
        notes = Notes(notes)
        if transaction is None:
            return ExecutionResult(success=False, error=NO_TRANSACTION_ERROR, notes=notes)
        if transaction.is_frozen:
            raise IllegalStateError(
                "Transaction is frozen; build it again before executing with another signer.",
                operation="execute with signer",
            )

        try:
            signer.freeze(transaction)
            receipt = await signer.sign_and_execute_transaction(transaction)
        except Exception as e:
            _logger.error(
                "Transaction execution with signer failed",
                extra={"signer": signer.get_account_id(), "error": str(e)},
            )
            return ExecutionResult(
                success=False,
                error=str(e) or "An unknown error occurred during transaction execution.",
                transaction_id=_id_string(transaction.transaction_id),
                notes=notes,
            )
        return ExecutionResult(
            success=True,
            receipt=receipt,
            transaction_id=_id_string(transaction.transaction_id),
            notes=notes,
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def _build_schedule(
        self,
        inner: PendingTransaction,
        options: ExecutionOptions,
        notes: Notes,
    ) -> PendingTransaction:
        user_account_id = self._context.user_account_id
        signer_account_id = self._context.signer_account_id

        if not inner.is_frozen and inner.transaction_id is None and user_account_id:
            inner.set_transaction_id(TransactionId.generate(user_account_id))

        if user_account_id:
            payer = user_account_id
        elif options.schedule_payer_account_id:
            payer = options.schedule_payer_account_id
        else:
            payer = signer_account_id
            notes.add(
                f"Your agent account ({signer_account_id}) will pay the fee to create this schedule."
            )

        if options.schedule_admin_key is not None:
            admin_key = as_public(options.schedule_admin_key)
        else:
            admin_key = await self._schedule_admin_key(notes)

        entity = ScheduleEntity(
            inner=inner,
            payer_account_id=payer,
            admin_key=admin_key,
            memo=options.schedule_memo,
        )
        return entity.as_transaction()

    async def _schedule_admin_key(self, notes: Notes) -> Optional[KeyList]:
        user_account_id = self._context.user_account_id
        admin_keys = KeyList(threshold=1)

        try:
            admin_keys = admin_keys.with_key(await self.signer.get_public_key())
        except HederaKitError as e:
            _logger.warning(f"Could not get agent public key for schedule admin key: {e}")

        if user_account_id:
            user_key = await self._user_key(user_account_id, notes)
            if user_key is not None:
                admin_keys = admin_keys.with_key(user_key)
                notes.add(
                    f"The schedule admin key allows both your agent and user "
                    f"({user_account_id}) to manage the schedule."
                )

        if not admin_keys.keys:
            notes.add(
                "No admin key could be set for the schedule (agent key missing and "
                "user key not found/retrieved)."
            )
            return None
        return admin_keys

    async def _user_key(self, user_account_id: str, notes: Notes) -> Optional[PublicKey]:
        try:
            account = await self._mirror.request_account(user_account_id)
        except HederaKitError as e:
            _logger.warning(
                f"Failed to get user key for schedule admin key for {user_account_id}: {e}"
            )
            notes.add(
                f"The schedule admin key is set to your agent. "
                f"Could not retrieve user ({user_account_id}) key."
            )
            return None

        user_key: Optional[PublicKey] = None
        if account.key is not None and account.key.key:
            try:
                user_key = PublicKey.from_mirror(account.key.key_type, account.key.key)
            except HederaKitError:
                user_key = None
        if user_key is None:
            notes.add(
                f"The schedule admin key is set to your agent. "
                f"User ({user_account_id}) key not found or not a single key."
            )
        return user_key


def _id_string(transaction_id: Optional[Union[TransactionId, str]]) -> Optional[str]:
    return str(transaction_id) if transaction_id is not None else None
