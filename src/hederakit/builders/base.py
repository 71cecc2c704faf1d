"""
Base Service Builder

Shared behavior of the per-domain builders:
- key resolution (including the ``current_signer`` sentinel)
- exact amount parsing
- end-user account defaults in returnBytes mode
- wrapping each constructed transaction with its Notes

Builders hold no per-call state. Every construction method returns a new
BuiltTransaction, so a builder instance can be shared freely.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

from hederakit.context import AgentContext
from hederakit.errors import IllegalStateError, MissingRequiredFieldError, ValidationError
from hederakit.keys.resolver import KeyInput, KeyResolver
from hederakit.keys.types import KeyList, PublicKey
from hederakit.mirror.client import MirrorNodeClient
from hederakit.transactions.pending import (
    PendingTransaction,
    TransactionId,
    TransactionKind,
)
from hederakit.transactions.results import BuiltTransaction, Notes
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import AmountLike, parse_amount, validate_account_id

_logger = get_logger(__name__)


class BaseServiceBuilder:
    """
    Common construction helpers for domain builders.

    Args:
        context: Agent session context
        mirror_node: Query client used for key and account lookups
    """

    def __init__(self, context: AgentContext, mirror_node: MirrorNodeClient) -> None:
        self._context = context
        self._mirror = mirror_node
        self._keys = KeyResolver(context.signer)

    @property
    def context(self) -> AgentContext:
        return self._context

    @property
    def mirror_node(self) -> MirrorNodeClient:
        return self._mirror

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    async def resolve_key(self, value: KeyInput) -> Optional[Union[PublicKey, KeyList]]:
        """Resolve a key input to public key material (None stays None)."""
        return await self._keys.resolve(value)

    @staticmethod
    def parse_amount(value: AmountLike, field_name: str = "amount") -> int:
        return parse_amount(value, field_name)

    def effective_sender_account_id(self) -> str:
        """End-user account in returnBytes mode, otherwise the signer."""
        if self._context.is_return_bytes and self._context.user_account_id:
            return self._context.user_account_id
        return self._context.signer_account_id

    def default_to_user_account(
        self,
        supplied: Optional[str],
        field_name: str,
        notes: Notes,
        note: str,
    ) -> str:
        """
        Use ``supplied`` or, in returnBytes mode, the end-user account.

        ``note`` may reference ``{account_id}``.

        Raises:
            MissingRequiredFieldError: If nothing was supplied or defaulted
        """
        if supplied:
            return validate_account_id(supplied, field_name)

        user_account_id = self._context.user_account_id
        if user_account_id and self._context.is_return_bytes:
            _logger.info(
                f"Defaulting {field_name} to user account",
                extra={"field": field_name, "account_id": user_account_id},
            )
            notes.add(note.format(account_id=user_account_id))
            return user_account_id

        raise MissingRequiredFieldError(
            field_name,
            message=(
                f"{field_name} is required (supply it explicitly, or set a user "
                "account and use returnBytes mode)"
            ),
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @staticmethod
    def _build(
        kind: TransactionKind,
        body: Dict[str, Any],
        notes: Optional[Notes] = None,
        memo: Optional[str] = None,
    ) -> BuiltTransaction:
        body = {k: v for k, v in body.items() if v is not None}
        return BuiltTransaction(PendingTransaction(kind, body, memo=memo or None), notes or Notes())


def apply_transaction_options(
    built: Optional[BuiltTransaction],
    *,
    memo: Optional[str] = None,
    transaction_id: Optional[str] = None,
    node_account_ids: Optional[Sequence[str]] = None,
) -> BuiltTransaction:
    """
    Apply per-call memo, transaction id and node ids to a built transaction.

    A malformed transaction id is logged and ignored.

    Raises:
        IllegalStateError: If there is no transaction or it is frozen
    """
    if built is None:
        raise IllegalStateError(
            "No transaction has been constructed",
            operation="apply transaction options",
        )

    transaction = built.transaction
    if transaction_id:
        try:
            transaction.set_transaction_id(TransactionId.from_string(transaction_id))
        except ValidationError:
            _logger.warning(f"Invalid transaction id format: {transaction_id}, ignoring.")
    if node_account_ids:
        try:
            transaction.set_node_account_ids(node_account_ids)
        except ValidationError:
            _logger.warning("Invalid node account id format, ignoring.")
    if memo:
        transaction.set_memo(memo)
    return built
