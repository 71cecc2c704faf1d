"""
Token Service Builder

Constructs token transactions: creation (fungible and NFT), supply
management, transfers, association, compliance controls, updates and
airdrops.

Defaults applied during token creation:
- symbol derived from the name when omitted
- treasury = end-user account in returnBytes mode
- NFT supply key = treasury account's current key
- 90 day auto-renew period when an auto-renew account is given alone
- custom-fee collectors = end-user account in returnBytes mode
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from hederakit.builders.base import BaseServiceBuilder
from hederakit.errors import HederaKitError, MissingRequiredFieldError, ValidationError
from hederakit.keys.resolver import KeyInput
from hederakit.keys.types import PublicKey
from hederakit.transactions.pending import TransactionKind
from hederakit.transactions.results import BuiltTransaction, Notes
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import (
    AmountLike,
    generate_default_symbol,
    validate_account_id,
    validate_entity_id,
)

_logger = get_logger(__name__)

DEFAULT_AUTORENEW_PERIOD_SECONDS = 7776000
SECONDS_PER_DAY = 24 * 60 * 60

SUPPLY_FINITE = "FINITE"
SUPPLY_INFINITE = "INFINITE"

TOKEN_KEY_FIELDS = (
    "admin_key",
    "kyc_key",
    "freeze_key",
    "wipe_key",
    "supply_key",
    "fee_schedule_key",
    "pause_key",
)

FEE_TYPE_ALIASES = {
    "FIXED": "FIXED",
    "FIXED_FEE": "FIXED",
    "FRACTIONAL": "FRACTIONAL",
    "FRACTIONAL_FEE": "FRACTIONAL",
    "ROYALTY": "ROYALTY",
    "ROYALTY_FEE": "ROYALTY",
}


# ============================================================================
# Parameters
# ============================================================================


@dataclass
class CustomFeeSpec:
    """
    A custom fee attached to a token.

    ``type`` is FIXED, FRACTIONAL or ROYALTY (``*_FEE`` spellings accepted).
    A royalty fee may carry a fixed ``fallback_fee``.
    """

    type: str
    fee_collector_account_id: Optional[str] = None
    amount: AmountLike = None
    denominating_token_id: Optional[str] = None
    numerator: AmountLike = None
    denominator: AmountLike = None
    min_amount: AmountLike = None
    max_amount: AmountLike = None
    assessment_method_inclusive: Optional[bool] = None
    fallback_fee: Optional[Union["CustomFeeSpec", Dict[str, Any]]] = None


@dataclass
class TokenCreateParams:
    """
    Parameters for fungible token and NFT collection creation.

    Args:
        token_name: Display name (required)
        token_symbol: Ticker; derived from the name when omitted
        treasury_account_id: Receives the initial supply
        decimals: Fungible tokens only
        initial_supply: Fungible tokens only, smallest denomination
        supply_type: FINITE or INFINITE
        max_supply: Cap for FINITE supply
    """

    token_name: str
    token_symbol: Optional[str] = None
    treasury_account_id: Optional[str] = None
    decimals: int = 0
    initial_supply: AmountLike = 0
    supply_type: Optional[str] = None
    max_supply: AmountLike = None
    admin_key: KeyInput = None
    kyc_key: KeyInput = None
    freeze_key: KeyInput = None
    wipe_key: KeyInput = None
    supply_key: KeyInput = None
    fee_schedule_key: KeyInput = None
    pause_key: KeyInput = None
    memo: Optional[str] = None
    freeze_default: Optional[bool] = None
    custom_fees: List[Union[CustomFeeSpec, Dict[str, Any]]] = field(default_factory=list)
    auto_renew_account_id: Optional[str] = None
    auto_renew_period: Optional[int] = None


def _coerce_params(params: Union[TokenCreateParams, Dict[str, Any]]) -> TokenCreateParams:
    if isinstance(params, dict):
        return TokenCreateParams(**params)
    return params


def _coerce_fee(fee: Union[CustomFeeSpec, Dict[str, Any]]) -> CustomFeeSpec:
    if isinstance(fee, dict):
        return CustomFeeSpec(**fee)
    return fee


# ============================================================================
# Builder
# ============================================================================


class HtsBuilder(BaseServiceBuilder):
    """
    Builder for token service transactions.

    Example:
        ```python
        built = await kit.hts().create_fungible_token({"token_name": "GameGold"})
        built.transaction.get("token_symbol")   # "GAMEG"
        built.notes.as_list()
        ```
    """

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_fungible_token(
        self,
        params: Union[TokenCreateParams, Dict[str, Any]],
    ) -> BuiltTransaction:
        """
        Build a fungible token creation.

        Raises:
            MissingRequiredFieldError: If no treasury or fee collector can be determined
            InvalidKeyFormatError: If a key field cannot be parsed
        """
        params = _coerce_params(params)
        notes = Notes()
        if not params.token_name:
            raise MissingRequiredFieldError("token_name")

        treasury = self.default_to_user_account(
            params.treasury_account_id,
            "treasury_account_id",
            notes,
            "Since no treasury was specified, your account ({account_id}) "
            "has been set as the token's treasury.",
        )

        symbol = params.token_symbol
        if not symbol:
            symbol = generate_default_symbol(params.token_name)
            notes.add(
                f"We've generated a token symbol '{symbol}' for you, "
                f"based on the token name '{params.token_name}'."
            )

        supply_type = self._supply_type(params.supply_type, SUPPLY_INFINITE, notes, "")
        body: Dict[str, Any] = {
            "token_name": params.token_name,
            "token_symbol": symbol,
            "treasury_account_id": treasury,
            "token_type": "FUNGIBLE_COMMON",
            "supply_type": supply_type,
            "initial_supply": self.parse_amount(params.initial_supply, "initial_supply"),
            "decimals": params.decimals,
            "token_memo": params.memo or None,
            "freeze_default": params.freeze_default,
        }
        if supply_type == SUPPLY_FINITE and params.max_supply is not None:
            body["max_supply"] = self.parse_amount(params.max_supply, "max_supply")
            if body["initial_supply"] > body["max_supply"]:
                raise ValidationError(
                    "initial_supply cannot exceed max_supply",
                    field="initial_supply",
                )

        await self._resolve_token_keys(params, body, TOKEN_KEY_FIELDS)
        body["custom_fees"] = self._map_custom_fees(params.custom_fees, notes) or None
        self._apply_auto_renew(params, body, notes, "token")

        return self._build(TransactionKind.TOKEN_CREATE, body, notes)

    async def create_non_fungible_token(
        self,
        params: Union[TokenCreateParams, Dict[str, Any]],
    ) -> BuiltTransaction:
        """
        Build an NFT collection creation.

        When no supply key is given, the treasury account's current key
        is looked up and used.

        Raises:
            MissingRequiredFieldError: If no treasury or fee collector can be determined
            InvalidKeyFormatError: If a key field cannot be parsed
        """
        params = _coerce_params(params)
        notes = Notes()
        if not params.token_name:
            raise MissingRequiredFieldError("token_name")

        treasury = self.default_to_user_account(
            params.treasury_account_id,
            "treasury_account_id",
            notes,
            "Since no treasury was specified, your account ({account_id}) "
            "has been set as the NFT collection's treasury.",
        )

        symbol = params.token_symbol
        if not symbol:
            symbol = generate_default_symbol(params.token_name)
            notes.add(
                f"We've generated an NFT collection symbol '{symbol}' for you, "
                f"based on the collection name '{params.token_name}'."
            )

        supply_type = self._supply_type(params.supply_type, SUPPLY_FINITE, notes, " for NFT")
        body: Dict[str, Any] = {
            "token_name": params.token_name,
            "token_symbol": symbol,
            "treasury_account_id": treasury,
            "token_type": "NON_FUNGIBLE_UNIQUE",
            "supply_type": supply_type,
            "initial_supply": 0,
            "decimals": 0,
            "token_memo": params.memo or None,
            "freeze_default": params.freeze_default,
        }
        if supply_type == SUPPLY_FINITE:
            if params.max_supply is not None:
                body["max_supply"] = self.parse_amount(params.max_supply, "max_supply")
            else:
                notes.add(
                    "For this FINITE NFT collection, a specific maximum supply was not "
                    "provided. The Hedera network might apply its own default or limit minting."
                )

        await self._resolve_token_keys(
            params, body, [f for f in TOKEN_KEY_FIELDS if f != "supply_key"]
        )
        if params.supply_key:
            body["supply_key"] = await self.resolve_key(params.supply_key)
        else:
            body["supply_key"] = await self._treasury_key(treasury, notes)

        body["custom_fees"] = self._map_custom_fees(params.custom_fees, notes) or None
        self._apply_auto_renew(params, body, notes, "NFT collection")

        return self._build(TransactionKind.TOKEN_CREATE, body, notes)

    # ------------------------------------------------------------------
    # Supply
    # ------------------------------------------------------------------

    def mint_fungible_token(self, token_id: str, amount: AmountLike) -> BuiltTransaction:
        return self._build(
            TransactionKind.TOKEN_MINT,
            {"token_id": validate_entity_id(token_id, "token_id"), "amount": self.parse_amount(amount)},
        )

    def burn_fungible_token(self, token_id: str, amount: AmountLike) -> BuiltTransaction:
        return self._build(
            TransactionKind.TOKEN_BURN,
            {"token_id": validate_entity_id(token_id, "token_id"), "amount": self.parse_amount(amount)},
        )

    def mint_non_fungible_token(
        self,
        token_id: str,
        metadata: Sequence[Union[str, bytes]],
    ) -> BuiltTransaction:
        """Mint one NFT per metadata entry."""
        if not metadata:
            raise MissingRequiredFieldError("metadata")
        encoded = [m if isinstance(m, bytes) else m.encode("utf-8") for m in metadata]
        return self._build(
            TransactionKind.TOKEN_MINT,
            {"token_id": validate_entity_id(token_id, "token_id"), "metadata": encoded},
        )

    def burn_non_fungible_token(self, token_id: str, serials: Sequence[int]) -> BuiltTransaction:
        if not serials:
            raise MissingRequiredFieldError(
                "serials", message="Serial numbers are required to burn NFTs."
            )
        return self._build(
            TransactionKind.TOKEN_BURN,
            {
                "token_id": validate_entity_id(token_id, "token_id"),
                "serials": [int(s) for s in serials],
            },
        )

    # ------------------------------------------------------------------
    # Transfers and association
    # ------------------------------------------------------------------

    def transfer_tokens(
        self,
        token_transfers: Sequence[Dict[str, Any]],
        nft_transfers: Sequence[Dict[str, Any]] = (),
    ) -> BuiltTransaction:
        """
        Build a token transfer.

        ``token_transfers`` items: ``{"token_id", "account_id", "amount"}``
        where amounts per token sum to zero. ``nft_transfers`` items:
        ``{"token_id", "serial", "sender_account_id", "receiver_account_id"}``.
        """
        if not token_transfers and not nft_transfers:
            raise MissingRequiredFieldError("token_transfers")

        fungible = []
        totals: Dict[str, int] = {}
        for item in token_transfers:
            token_id = validate_entity_id(item.get("token_id"), "token_id")
            amount = self.parse_amount(item.get("amount"))
            fungible.append(
                {
                    "token_id": token_id,
                    "account_id": validate_account_id(item.get("account_id")),
                    "amount": amount,
                }
            )
            totals[token_id] = totals.get(token_id, 0) + amount
        unbalanced = [t for t, total in totals.items() if total != 0]
        if unbalanced:
            raise ValidationError(
                f"Token transfers must sum to zero per token: {', '.join(unbalanced)}",
                field="token_transfers",
            )

        nfts = [
            {
                "token_id": validate_entity_id(item.get("token_id"), "token_id"),
                "serial": int(item["serial"]),
                "sender_account_id": validate_account_id(item.get("sender_account_id")),
                "receiver_account_id": validate_account_id(item.get("receiver_account_id")),
            }
            for item in nft_transfers
        ]
        return self._build(
            TransactionKind.CRYPTO_TRANSFER,
            {"token_transfers": fungible or None, "nft_transfers": nfts or None},
        )

    def associate_tokens(self, account_id: str, token_ids: Sequence[str]) -> BuiltTransaction:
        return self._account_tokens(TransactionKind.TOKEN_ASSOCIATE, account_id, token_ids)

    def dissociate_tokens(self, account_id: str, token_ids: Sequence[str]) -> BuiltTransaction:
        return self._account_tokens(TransactionKind.TOKEN_DISSOCIATE, account_id, token_ids)

    # ------------------------------------------------------------------
    # Compliance
    # ------------------------------------------------------------------

    def wipe_token_account(
        self,
        token_id: str,
        account_id: str,
        amount: AmountLike = None,
        serials: Sequence[int] = (),
    ) -> BuiltTransaction:
        if amount is None and not serials:
            raise MissingRequiredFieldError(
                "amount", message="Either amount or serials is required to wipe tokens."
            )
        return self._build(
            TransactionKind.TOKEN_WIPE,
            {
                "token_id": validate_entity_id(token_id, "token_id"),
                "account_id": validate_account_id(account_id),
                "amount": self.parse_amount(amount) if amount is not None else None,
                "serials": [int(s) for s in serials] or None,
            },
        )

    def freeze_token_account(self, token_id: str, account_id: str) -> BuiltTransaction:
        return self._token_account(TransactionKind.TOKEN_FREEZE, token_id, account_id)

    def unfreeze_token_account(self, token_id: str, account_id: str) -> BuiltTransaction:
        return self._token_account(TransactionKind.TOKEN_UNFREEZE, token_id, account_id)

    def grant_kyc(self, token_id: str, account_id: str) -> BuiltTransaction:
        return self._token_account(TransactionKind.TOKEN_GRANT_KYC, token_id, account_id)

    def revoke_kyc(self, token_id: str, account_id: str) -> BuiltTransaction:
        return self._token_account(TransactionKind.TOKEN_REVOKE_KYC, token_id, account_id)

    def pause_token(self, token_id: str) -> BuiltTransaction:
        return self._build(
            TransactionKind.TOKEN_PAUSE, {"token_id": validate_entity_id(token_id, "token_id")}
        )

    def unpause_token(self, token_id: str) -> BuiltTransaction:
        return self._build(
            TransactionKind.TOKEN_UNPAUSE, {"token_id": validate_entity_id(token_id, "token_id")}
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update_token(
        self,
        token_id: str,
        *,
        token_name: Optional[str] = None,
        token_symbol: Optional[str] = None,
        treasury_account_id: Optional[str] = None,
        memo: Optional[str] = None,
        auto_renew_account_id: Optional[str] = None,
        auto_renew_period: Optional[int] = None,
        **keys: KeyInput,
    ) -> BuiltTransaction:
        """
        Build a token update. Key fields are passed as keyword arguments
        (``admin_key=...``, ``supply_key="current_signer"``, ...).
        """
        if not token_id:
            raise MissingRequiredFieldError(
                "token_id", message="Token ID is required to update a token."
            )
        unknown = set(keys) - set(TOKEN_KEY_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown token key fields: {sorted(unknown)}")

        body: Dict[str, Any] = {
            "token_id": validate_entity_id(token_id, "token_id"),
            "token_name": token_name,
            "token_symbol": token_symbol,
            "treasury_account_id": (
                validate_account_id(treasury_account_id, "treasury_account_id")
                if treasury_account_id
                else None
            ),
            "token_memo": memo,
            "auto_renew_account_id": auto_renew_account_id,
            "auto_renew_period": auto_renew_period,
        }
        for name, value in keys.items():
            body[name] = await self.resolve_key(value)
        return self._build(TransactionKind.TOKEN_UPDATE, body)

    def delete_token(self, token_id: str) -> BuiltTransaction:
        if not token_id:
            raise MissingRequiredFieldError(
                "token_id", message="Token ID is required to delete a token."
            )
        return self._build(
            TransactionKind.TOKEN_DELETE, {"token_id": validate_entity_id(token_id, "token_id")}
        )

    def update_token_fee_schedule(
        self,
        token_id: str,
        custom_fees: Sequence[Union[CustomFeeSpec, Dict[str, Any]]],
    ) -> BuiltTransaction:
        if not token_id:
            raise MissingRequiredFieldError(
                "token_id", message="Token ID is required to update fee schedule."
            )
        notes = Notes()
        fees = self._map_custom_fees(custom_fees, notes)
        return self._build(
            TransactionKind.TOKEN_FEE_SCHEDULE_UPDATE,
            {"token_id": validate_entity_id(token_id, "token_id"), "custom_fees": fees},
            notes,
        )

    # ------------------------------------------------------------------
    # Airdrops
    # ------------------------------------------------------------------

    def airdrop_token(
        self,
        token_id: str,
        recipients: Sequence[Dict[str, Any]],
        sender_account_id: Optional[str] = None,
    ) -> BuiltTransaction:
        """
        Airdrop a fungible token to ``recipients`` (``{"account_id", "amount"}``).

        The sender defaults to the effective sender (the end-user account
        in returnBytes mode, the agent otherwise).
        """
        if not recipients:
            raise MissingRequiredFieldError(
                "recipients", message="Recipients are required for an airdrop."
            )
        token_id = validate_entity_id(token_id, "token_id")
        sender = (
            validate_account_id(sender_account_id, "sender_account_id")
            if sender_account_id
            else self.effective_sender_account_id()
        )

        transfers = []
        total = 0
        for recipient in recipients:
            amount = self.parse_amount(recipient.get("amount"))
            if amount <= 0:
                raise ValidationError("Airdrop amounts must be positive", field="amount")
            transfers.append(
                {
                    "token_id": token_id,
                    "account_id": validate_account_id(recipient.get("account_id")),
                    "amount": amount,
                }
            )
            total += amount
        transfers.append({"token_id": token_id, "account_id": sender, "amount": -total})
        return self._build(TransactionKind.TOKEN_AIRDROP, {"token_transfers": transfers})

    def claim_airdrop(self, pending_airdrops: Sequence[Dict[str, Any]]) -> BuiltTransaction:
        return self._pending_airdrops(TransactionKind.TOKEN_CLAIM_AIRDROP, pending_airdrops)

    def cancel_airdrop(self, pending_airdrops: Sequence[Dict[str, Any]]) -> BuiltTransaction:
        return self._pending_airdrops(TransactionKind.TOKEN_CANCEL_AIRDROP, pending_airdrops)

    def reject_tokens(
        self,
        token_ids: Sequence[str] = (),
        nfts: Sequence[Dict[str, Any]] = (),
        owner_account_id: Optional[str] = None,
    ) -> BuiltTransaction:
        """Return fungible tokens or NFTs to their treasuries."""
        if not token_ids and not nfts:
            raise MissingRequiredFieldError("token_ids")
        return self._build(
            TransactionKind.TOKEN_REJECT,
            {
                "owner_account_id": owner_account_id or self.effective_sender_account_id(),
                "token_ids": [validate_entity_id(t, "token_id") for t in token_ids] or None,
                "nfts": [
                    {"token_id": validate_entity_id(n.get("token_id"), "token_id"), "serial": int(n["serial"])}
                    for n in nfts
                ]
                or None,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _supply_type(value: Optional[str], fallback: str, notes: Notes, label: str) -> str:
        if value is None:
            return fallback
        normalized = str(value).upper()
        if normalized in (SUPPLY_FINITE, SUPPLY_INFINITE):
            return normalized
        _logger.warning(f"Invalid supply type {value!r}, defaulting to {fallback}")
        notes.add(f"Invalid supplyType string '{value}' received{label}, defaulted to {fallback}.")
        return fallback

    async def _resolve_token_keys(
        self,
        params: TokenCreateParams,
        body: Dict[str, Any],
        fields: Sequence[str],
    ) -> None:
        for name in fields:
            value = getattr(params, name)
            if value:
                body[name] = await self.resolve_key(value)

    async def _treasury_key(self, treasury_account_id: str, notes: Notes) -> Optional[PublicKey]:
        try:
            return await self.mirror_node.get_public_key(treasury_account_id)
        except HederaKitError as e:
            _logger.warning(f"Could not fetch treasury key for {treasury_account_id}: {e}")
            notes.add(
                f"Could not retrieve the treasury account ({treasury_account_id}) key, so no "
                "supply key was set. Without a supply key no NFTs can be minted in this "
                "collection; provide supply_key explicitly to enable minting."
            )
            return None

    @staticmethod
    def _apply_auto_renew(
        params: TokenCreateParams,
        body: Dict[str, Any],
        notes: Notes,
        label: str,
    ) -> None:
        if params.auto_renew_account_id:
            body["auto_renew_account_id"] = validate_account_id(
                params.auto_renew_account_id, "auto_renew_account_id"
            )
        if params.auto_renew_period:
            body["auto_renew_period"] = int(params.auto_renew_period)
        elif params.auto_renew_account_id:
            body["auto_renew_period"] = DEFAULT_AUTORENEW_PERIOD_SECONDS
            notes.add(
                f"A standard auto-renew period of "
                f"{DEFAULT_AUTORENEW_PERIOD_SECONDS // SECONDS_PER_DAY} days "
                f"has been set for this {label}."
            )

    def _fee_collector(
        self,
        supplied: Optional[str],
        notes: Notes,
        note: str,
        field_name: str,
    ) -> str:
        if supplied:
            return validate_account_id(supplied, field_name)
        user_account_id = self.context.user_account_id
        if user_account_id and self.context.is_return_bytes:
            notes.add(note.format(account_id=user_account_id))
            return user_account_id
        raise MissingRequiredFieldError(
            field_name,
            message=f"{field_name} is required for custom fees but was not provided or defaulted.",
        )

    def _map_custom_fees(
        self,
        fees: Sequence[Union[CustomFeeSpec, Dict[str, Any]]],
        notes: Notes,
    ) -> List[Dict[str, Any]]:
        mapped = []
        for raw_fee in fees or []:
            fee = _coerce_fee(raw_fee)
            fee_type = FEE_TYPE_ALIASES.get(str(fee.type).upper())
            if fee_type is None:
                raise ValidationError(f"Unsupported custom fee type: {fee.type}", field="type")

            collector = self._fee_collector(
                fee.fee_collector_account_id,
                notes,
                f"Fee collector for a {fee_type.lower()} fee was defaulted to your account ({{account_id}}).",
                "fee_collector_account_id",
            )
            entry: Dict[str, Any] = {"type": fee_type, "fee_collector_account_id": collector}

            if fee_type == "FIXED":
                entry["amount"] = self.parse_amount(fee.amount)
                if fee.denominating_token_id:
                    entry["denominating_token_id"] = validate_entity_id(
                        fee.denominating_token_id, "denominating_token_id"
                    )
            else:
                entry["numerator"] = self.parse_amount(fee.numerator, "numerator")
                entry["denominator"] = self.parse_amount(fee.denominator, "denominator")
                if entry["denominator"] == 0:
                    raise ValidationError("Fee denominator cannot be zero", field="denominator")

            if fee_type == "FRACTIONAL":
                if fee.min_amount is not None:
                    entry["min_amount"] = self.parse_amount(fee.min_amount, "min_amount")
                if fee.max_amount is not None:
                    entry["max_amount"] = self.parse_amount(fee.max_amount, "max_amount")
                if fee.assessment_method_inclusive is not None:
                    entry["assessment_method"] = (
                        "INCLUSIVE" if fee.assessment_method_inclusive else "EXCLUSIVE"
                    )

            if fee_type == "ROYALTY" and fee.fallback_fee is not None:
                fallback = _coerce_fee(fee.fallback_fee)
                entry["fallback_fee"] = {
                    "fee_collector_account_id": self._fee_collector(
                        fallback.fee_collector_account_id,
                        notes,
                        "Fallback fee collector for a royalty fee was also defaulted "
                        "to your account ({account_id}).",
                        "fallback_fee.fee_collector_account_id",
                    ),
                    "amount": self.parse_amount(fallback.amount),
                }
                if fallback.denominating_token_id:
                    entry["fallback_fee"]["denominating_token_id"] = validate_entity_id(
                        fallback.denominating_token_id, "denominating_token_id"
                    )

            mapped.append(entry)
        return mapped

    def _account_tokens(
        self,
        kind: TransactionKind,
        account_id: str,
        token_ids: Sequence[str],
    ) -> BuiltTransaction:
        if not token_ids:
            raise MissingRequiredFieldError("token_ids")
        return self._build(
            kind,
            {
                "account_id": validate_account_id(account_id),
                "token_ids": [validate_entity_id(t, "token_id") for t in token_ids],
            },
        )

    def _token_account(
        self,
        kind: TransactionKind,
        token_id: str,
        account_id: str,
    ) -> BuiltTransaction:
        return self._build(
            kind,
            {
                "token_id": validate_entity_id(token_id, "token_id"),
                "account_id": validate_account_id(account_id),
            },
        )

    def _pending_airdrops(
        self,
        kind: TransactionKind,
        pending_airdrops: Sequence[Dict[str, Any]],
    ) -> BuiltTransaction:
        if not pending_airdrops:
            raise MissingRequiredFieldError("pending_airdrops")
        airdrops = []
        for item in pending_airdrops:
            entry = {
                "sender_account_id": validate_account_id(item.get("sender_account_id")),
                "receiver_account_id": validate_account_id(item.get("receiver_account_id")),
                "token_id": validate_entity_id(item.get("token_id"), "token_id"),
            }
            if item.get("serial") is not None:
                entry["serial"] = int(item["serial"])
            airdrops.append(entry)
        return self._build(kind, {"pending_airdrops": airdrops})
