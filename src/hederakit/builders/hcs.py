"""
Consensus Service Builder

Constructs topic transactions: creation, update, deletion and message
submission.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from hederakit.builders.base import BaseServiceBuilder
from hederakit.errors import HederaKitError, MissingRequiredFieldError
from hederakit.keys.resolver import KeyInput
from hederakit.keys.types import KeyList, PublicKey
from hederakit.transactions.pending import TransactionKind
from hederakit.transactions.results import BuiltTransaction, Notes
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import validate_account_id, validate_entity_id

_logger = get_logger(__name__)

DEFAULT_TOPIC_AUTORENEW_PERIOD_SECONDS = 7776000
MAX_SINGLE_MESSAGE_BYTES = 1000

# Marks an update field the caller did not pass; None means "clear".
_UNSET: Any = object()


class HcsBuilder(BaseServiceBuilder):
    """Builder for consensus service (topic) transactions."""

    async def create_topic(
        self,
        *,
        memo: Optional[str] = None,
        admin_key: KeyInput = None,
        submit_key: KeyInput = None,
        fee_schedule_key: KeyInput = None,
        auto_renew_period: Optional[int] = None,
        auto_renew_account_id: Optional[str] = None,
        custom_fees: Sequence[Dict[str, Any]] = (),
        exempt_account_ids: Sequence[str] = (),
    ) -> BuiltTransaction:
        """
        Build a topic creation.

        Fee-exempt accounts are resolved to their current public keys
        through the mirror node. A lookup failure leaves them unset and is
        reported as a Note rather than raised.
        """
        notes = Notes()
        if not auto_renew_period:
            auto_renew_period = DEFAULT_TOPIC_AUTORENEW_PERIOD_SECONDS
            notes.add(
                f"Default auto-renew period of {DEFAULT_TOPIC_AUTORENEW_PERIOD_SECONDS} "
                "seconds applied for topic."
            )

        body: Dict[str, Any] = {
            "topic_memo": memo or None,
            "admin_key": await self.resolve_key(admin_key),
            "submit_key": await self.resolve_key(submit_key),
            "fee_schedule_key": await self.resolve_key(fee_schedule_key),
            "auto_renew_period": int(auto_renew_period),
            "auto_renew_account_id": (
                validate_account_id(auto_renew_account_id, "auto_renew_account_id")
                if auto_renew_account_id
                else None
            ),
            "custom_fees": list(custom_fees) or None,
        }
        if exempt_account_ids:
            body["fee_exempt_keys"] = await self._exempt_keys(
                exempt_account_ids, notes, "topic creation"
            )
        return self._build(TransactionKind.TOPIC_CREATE, body, notes)

    async def update_topic(
        self,
        topic_id: str,
        *,
        memo: Optional[str] = _UNSET,
        admin_key: KeyInput = _UNSET,
        submit_key: KeyInput = _UNSET,
        auto_renew_period: Optional[int] = None,
        auto_renew_account_id: Optional[str] = _UNSET,
        exempt_account_ids: Optional[Sequence[str]] = _UNSET,
    ) -> BuiltTransaction:
        """
        Build a topic update.

        Omitted fields are left unchanged. Passing None explicitly clears
        the field: an empty memo, an empty key list, or auto-renew account
        ``0.0.0``.
        """
        if not topic_id:
            raise MissingRequiredFieldError(
                "topic_id", message="Topic ID is required to update a topic."
            )
        notes = Notes()
        body: Dict[str, Any] = {"topic_id": validate_entity_id(topic_id, "topic_id")}

        if memo is not _UNSET:
            body["topic_memo"] = memo or ""
        for name, value in (("admin_key", admin_key), ("submit_key", submit_key)):
            if value is _UNSET:
                continue
            body[name] = KeyList() if value is None else await self.resolve_key(value)
        if auto_renew_period:
            body["auto_renew_period"] = int(auto_renew_period)
        if auto_renew_account_id is not _UNSET:
            body["auto_renew_account_id"] = (
                validate_account_id(auto_renew_account_id, "auto_renew_account_id")
                if auto_renew_account_id
                else "0.0.0"
            )
        if exempt_account_ids is not _UNSET and exempt_account_ids is not None:
            body["fee_exempt_keys"] = await self._exempt_keys(
                exempt_account_ids, notes, "topic update"
            )

        return self._build(TransactionKind.TOPIC_UPDATE, body, notes)

    def delete_topic(self, topic_id: str) -> BuiltTransaction:
        if not topic_id:
            raise MissingRequiredFieldError(
                "topic_id", message="Topic ID is required to delete a topic."
            )
        return self._build(
            TransactionKind.TOPIC_DELETE, {"topic_id": validate_entity_id(topic_id, "topic_id")}
        )

    def submit_message(
        self,
        topic_id: str,
        message: Union[str, bytes],
        *,
        max_chunks: Optional[int] = None,
        chunk_size: Optional[int] = None,
    ) -> BuiltTransaction:
        """
        Build a topic message submission.

        Messages longer than MAX_SINGLE_MESSAGE_BYTES are split by the
        network into chunks; a Note records it.
        """
        if message is None or message == "" or message == b"":
            raise MissingRequiredFieldError("message")
        payload = message.encode("utf-8") if isinstance(message, str) else bytes(message)

        notes = Notes()
        if len(payload) > MAX_SINGLE_MESSAGE_BYTES:
            _logger.warning(
                f"Message size ({len(payload)} bytes) exceeds the single transaction "
                f"limit ({MAX_SINGLE_MESSAGE_BYTES} bytes)"
            )
            notes.add(
                f"The message is {len(payload)} bytes, above the "
                f"{MAX_SINGLE_MESSAGE_BYTES}-byte single transaction limit, "
                "so it will be submitted in chunks."
            )

        body = {
            "topic_id": validate_entity_id(topic_id, "topic_id"),
            "message": payload,
            "max_chunks": max_chunks,
            "chunk_size": chunk_size,
        }
        return self._build(TransactionKind.TOPIC_MESSAGE_SUBMIT, body, notes)

    async def _exempt_keys(
        self,
        account_ids: Sequence[str],
        notes: Notes,
        action: str,
    ) -> Optional[List[PublicKey]]:
        if not account_ids:
            return []
        try:
            return [await self.mirror_node.get_public_key(a) for a in account_ids]
        except HederaKitError as e:
            _logger.error(f"Failed to process exempt account ids for {action}: {e.message}")
            notes.add(
                f"Error processing fee exempt accounts for {action}: {e.message}. "
                "They may not be set."
            )
            return None
