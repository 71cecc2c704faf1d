"""
Account Service Builder

Constructs account transactions: creation, HBAR transfers, updates,
deletion, allowances and schedule signing.

HBAR amounts are given in HBAR (``"1.5"``, ``2``) and carried in
tinybars in the transaction body.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from hederakit.builders.base import BaseServiceBuilder
from hederakit.errors import MissingRequiredFieldError, ValidationError
from hederakit.keys.resolver import KeyInput
from hederakit.transactions.pending import TransactionKind
from hederakit.transactions.results import BuiltTransaction, Notes
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import (
    AmountLike,
    parse_hbar,
    validate_account_id,
    validate_entity_id,
)

_logger = get_logger(__name__)

DEFAULT_ACCOUNT_AUTORENEW_PERIOD_SECONDS = 7776000


class AccountBuilder(BaseServiceBuilder):
    """
    Builder for account service transactions.

    Example:
        ```python
        built = kit.accounts().transfer_hbar([{"account_id": "0.0.800", "amount": "1.5"}])
        ```
    """

    async def create_account(
        self,
        *,
        key: KeyInput = None,
        initial_balance: AmountLike = None,
        receiver_signature_required: Optional[bool] = None,
        auto_renew_period: Optional[int] = None,
        memo: Optional[str] = None,
        max_automatic_token_associations: Optional[int] = None,
        staked_account_id: Optional[str] = None,
        staked_node_id: Optional[int] = None,
        decline_staking_reward: Optional[bool] = None,
        alias: Optional[str] = None,
    ) -> BuiltTransaction:
        """
        Build an account creation.

        A private key string is accepted for ``key``; only its public half
        is placed in the transaction.
        """
        notes = Notes()
        if not key and not alias:
            _logger.warning(
                "Account creation has neither a key nor an alias; the transaction might fail."
            )

        if auto_renew_period is None:
            auto_renew_period = DEFAULT_ACCOUNT_AUTORENEW_PERIOD_SECONDS
            notes.add(
                f"Default auto-renew period of {DEFAULT_ACCOUNT_AUTORENEW_PERIOD_SECONDS} "
                "seconds applied."
            )

        body: Dict[str, Any] = {
            "key": await self.resolve_key(key),
            "initial_balance": (
                parse_hbar(initial_balance, "initial_balance")
                if initial_balance is not None
                else None
            ),
            "receiver_signature_required": receiver_signature_required,
            "auto_renew_period": int(auto_renew_period),
            "account_memo": memo,
            "max_automatic_token_associations": max_automatic_token_associations,
            "staked_account_id": staked_account_id,
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
            "alias": alias,
        }
        return self._build(TransactionKind.ACCOUNT_CREATE, body, notes)

    def transfer_hbar(
        self,
        transfers: Sequence[Dict[str, Any]],
        memo: Optional[str] = None,
        is_user_initiated: bool = True,
    ) -> BuiltTransaction:
        """
        Build an HBAR transfer.

        ``transfers`` items are ``{"account_id", "amount"}`` with amounts in
        HBAR. In returnBytes mode with an end-user account, a single
        positive transfer is read as "send from the user": the matching
        debit from the user account is added. Otherwise the amounts must
        sum to zero.

        Raises:
            MissingRequiredFieldError: If no transfers are given
            ValidationError: If the transfers do not balance
        """
        if not transfers:
            raise MissingRequiredFieldError(
                "transfers", message="HBAR transfers must include at least one transfer."
            )
        notes = Notes()
        user_account_id = self.context.user_account_id

        if (
            is_user_initiated
            and user_account_id
            and self.context.is_return_bytes
            and len(transfers) == 1
        ):
            only = transfers[0]
            tinybars = parse_hbar(only.get("amount"))
            if tinybars > 0:
                recipient = validate_account_id(only.get("account_id"))
                _logger.info(
                    "Configuring user-initiated HBAR transfer",
                    extra={"from": user_account_id, "to": recipient, "tinybars": tinybars},
                )
                notes.add(
                    f"Configured HBAR transfer from your account ({user_account_id}) "
                    f"to {recipient} for {_format_hbar(tinybars)}."
                )
                body = {
                    "hbar_transfers": [
                        {"account_id": recipient, "amount": tinybars},
                        {"account_id": user_account_id, "amount": -tinybars},
                    ]
                }
                return self._build(TransactionKind.CRYPTO_TRANSFER, body, notes, memo)

        entries = [
            {
                "account_id": validate_account_id(item.get("account_id")),
                "amount": parse_hbar(item.get("amount")),
            }
            for item in transfers
        ]
        if sum(entry["amount"] for entry in entries) != 0:
            raise ValidationError(
                "The sum of all HBAR transfers must be zero.",
                field="transfers",
            )
        return self._build(
            TransactionKind.CRYPTO_TRANSFER, {"hbar_transfers": entries}, notes, memo
        )

    async def update_account(
        self,
        account_id: str,
        *,
        key: KeyInput = None,
        auto_renew_period: Optional[int] = None,
        receiver_signature_required: Optional[bool] = None,
        staked_account_id: Optional[str] = None,
        staked_node_id: Optional[int] = None,
        decline_staking_reward: Optional[bool] = None,
        memo: Optional[str] = None,
        max_automatic_token_associations: Optional[int] = None,
    ) -> BuiltTransaction:
        """Build an account update. Fields left as None are not changed."""
        if not account_id:
            raise MissingRequiredFieldError(
                "account_id", message="account_id is required for updating an account."
            )
        if staked_account_id is not None:
            try:
                staked_account_id = validate_account_id(staked_account_id, "staked_account_id")
            except ValidationError:
                _logger.warning(f"Invalid staked_account_id format: {staked_account_id}. Skipping.")
                staked_account_id = None

        body: Dict[str, Any] = {
            "account_id": validate_account_id(account_id),
            "key": await self.resolve_key(key),
            "auto_renew_period": auto_renew_period,
            "receiver_signature_required": receiver_signature_required,
            "staked_account_id": staked_account_id,
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
            "account_memo": memo,
            "max_automatic_token_associations": max_automatic_token_associations,
        }
        return self._build(TransactionKind.ACCOUNT_UPDATE, body)

    def delete_account(
        self,
        delete_account_id: str,
        transfer_account_id: str,
    ) -> BuiltTransaction:
        """Delete an account, sweeping its remaining HBAR to ``transfer_account_id``."""
        if not delete_account_id:
            raise MissingRequiredFieldError(
                "delete_account_id", message="delete_account_id is required for deleting an account."
            )
        if not transfer_account_id:
            raise MissingRequiredFieldError(
                "transfer_account_id",
                message="transfer_account_id is required for deleting an account.",
            )
        return self._build(
            TransactionKind.ACCOUNT_DELETE,
            {
                "account_id": validate_account_id(delete_account_id, "delete_account_id"),
                "transfer_account_id": validate_account_id(
                    transfer_account_id, "transfer_account_id"
                ),
            },
        )

    def approve_hbar_allowance(
        self,
        spender_account_id: str,
        amount: AmountLike,
        owner_account_id: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> BuiltTransaction:
        """Approve (or, with amount 0, revoke) an HBAR allowance."""
        return self._build(
            TransactionKind.ACCOUNT_ALLOWANCE_APPROVE,
            {
                "hbar_allowances": [
                    {
                        "owner_account_id": self._owner(owner_account_id),
                        "spender_account_id": validate_account_id(
                            spender_account_id, "spender_account_id"
                        ),
                        "amount": parse_hbar(amount),
                    }
                ]
            },
            memo=memo,
        )

    def approve_token_allowance(
        self,
        token_id: str,
        spender_account_id: str,
        amount: AmountLike = None,
        owner_account_id: Optional[str] = None,
        serials: Sequence[int] = (),
        all_serials: bool = False,
        memo: Optional[str] = None,
    ) -> BuiltTransaction:
        """
        Approve a token allowance.

        With ``amount`` this is a fungible allowance in the token's smallest
        unit. With ``serials`` or ``all_serials`` it is an NFT allowance.
        """
        token_id = validate_entity_id(token_id, "token_id")
        owner = self._owner(owner_account_id)
        spender = validate_account_id(spender_account_id, "spender_account_id")

        if all_serials or serials:
            allowance: Dict[str, Any] = {
                "token_id": token_id,
                "owner_account_id": owner,
                "spender_account_id": spender,
            }
            if all_serials:
                allowance["all_serials"] = True
            else:
                allowance["serials"] = [int(s) for s in serials]
            return self._build(
                TransactionKind.ACCOUNT_ALLOWANCE_APPROVE,
                {"nft_allowances": [allowance]},
                memo=memo,
            )

        if amount is None:
            raise MissingRequiredFieldError(
                "amount",
                message="Either amount, serials or all_serials is required for a token allowance.",
            )
        return self._build(
            TransactionKind.ACCOUNT_ALLOWANCE_APPROVE,
            {
                "token_allowances": [
                    {
                        "token_id": token_id,
                        "owner_account_id": owner,
                        "spender_account_id": spender,
                        "amount": self.parse_amount(amount),
                    }
                ]
            },
            memo=memo,
        )

    def prepare_schedule_sign(self, schedule_id: str, memo: Optional[str] = None) -> BuiltTransaction:
        if not schedule_id:
            raise MissingRequiredFieldError(
                "schedule_id", message="schedule_id is required to prepare a schedule signature."
            )
        return self._build(
            TransactionKind.SCHEDULE_SIGN,
            {"schedule_id": validate_entity_id(schedule_id, "schedule_id")},
            memo=memo,
        )

    def _owner(self, owner_account_id: Optional[str]) -> str:
        if owner_account_id:
            return validate_account_id(owner_account_id, "owner_account_id")
        return self.context.signer_account_id


def _format_hbar(tinybars: int) -> str:
    whole, fraction = divmod(abs(tinybars), 100_000_000)
    text = f"{whole}.{fraction:08d}".rstrip("0").rstrip(".")
    return f"{'-' if tinybars < 0 else ''}{text} ℏ"
