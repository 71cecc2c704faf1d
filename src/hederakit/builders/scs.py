"""
Smart Contract Service Builder

Constructs contract transactions: creation, execution, update and deletion.

Contract call data is carried as given. When ``function_name`` is a full
signature such as ``transfer(address,uint256)`` its 4-byte selector is
computed with keccak256 and recorded alongside the parameters.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from eth_utils import keccak

from hederakit.builders.base import BaseServiceBuilder
from hederakit.errors import MissingRequiredFieldError, ValidationError
from hederakit.keys.resolver import KeyInput
from hederakit.transactions.pending import TransactionKind
from hederakit.transactions.results import BuiltTransaction, Notes
from hederakit.utils.validation import (
    AmountLike,
    parse_amount,
    parse_hbar,
    validate_account_id,
    validate_entity_id,
)

DEFAULT_CONTRACT_AUTORENEW_PERIOD_SECONDS = 7776000

HexOrBytes = Union[str, bytes]


def _to_bytes(value: HexOrBytes, field_name: str) -> bytes:
    if isinstance(value, bytes):
        return value
    text = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValidationError(
            f"{field_name} must be hex encoded",
            field=field_name,
            value=value,
        ) from None


def function_selector(signature: str) -> str:
    """
    4-byte selector of a Solidity function signature, 0x-prefixed.

    Example:
        >>> function_selector("transfer(address,uint256)")
        '0xa9059cbb'
    """
    return "0x" + keccak(text=signature.replace(" ", ""))[:4].hex()


def _tinybars(value: AmountLike, field_name: str) -> int:
    # Numbers are HBAR, strings are tinybars.
    if isinstance(value, str):
        return parse_amount(value, field_name)
    return parse_hbar(value, field_name)


class ScsBuilder(BaseServiceBuilder):
    """Builder for smart contract service transactions."""

    async def create_contract(
        self,
        *,
        gas: int,
        bytecode: Optional[HexOrBytes] = None,
        bytecode_file_id: Optional[str] = None,
        admin_key: KeyInput = None,
        initial_balance: AmountLike = None,
        constructor_parameters: Optional[HexOrBytes] = None,
        memo: Optional[str] = None,
        auto_renew_period: Optional[int] = None,
        staked_account_id: Optional[str] = None,
        staked_node_id: Optional[int] = None,
        decline_staking_reward: Optional[bool] = None,
        max_automatic_token_associations: Optional[int] = None,
    ) -> BuiltTransaction:
        """
        Build a contract creation from inline bytecode or a bytecode file.

        Raises:
            MissingRequiredFieldError: If neither bytecode nor a file id is given
        """
        notes = Notes()
        body: Dict[str, Any] = {"gas": int(gas)}
        if bytecode_file_id:
            body["bytecode_file_id"] = validate_entity_id(bytecode_file_id, "bytecode_file_id")
        elif bytecode:
            body["bytecode"] = _to_bytes(bytecode, "bytecode")
        else:
            raise MissingRequiredFieldError(
                "bytecode",
                message="Either bytecode_file_id or bytecode must be provided to create a contract.",
            )

        if not auto_renew_period:
            auto_renew_period = DEFAULT_CONTRACT_AUTORENEW_PERIOD_SECONDS
            notes.add(
                f"Default auto-renew period of {DEFAULT_CONTRACT_AUTORENEW_PERIOD_SECONDS} "
                "seconds applied for contract."
            )

        body.update(
            {
                "admin_key": await self.resolve_key(admin_key),
                "initial_balance": (
                    _tinybars(initial_balance, "initial_balance") if initial_balance else None
                ),
                "constructor_parameters": (
                    _to_bytes(constructor_parameters, "constructor_parameters")
                    if constructor_parameters
                    else None
                ),
                "contract_memo": memo or None,
                "auto_renew_period": int(auto_renew_period),
                "staked_account_id": staked_account_id or None,
                "staked_node_id": staked_node_id,
                "decline_staking_reward": decline_staking_reward or None,
                "max_automatic_token_associations": max_automatic_token_associations or None,
            }
        )
        return self._build(TransactionKind.CONTRACT_CREATE, body, notes)

    def execute_contract(
        self,
        contract_id: str,
        gas: int,
        function_name: str,
        function_parameters: Optional[HexOrBytes] = None,
        payable_amount: AmountLike = None,
        memo: Optional[str] = None,
    ) -> BuiltTransaction:
        if not function_name:
            raise MissingRequiredFieldError("function_name")
        body: Dict[str, Any] = {
            "contract_id": validate_entity_id(contract_id, "contract_id"),
            "gas": int(gas),
            "function_name": function_name,
            "function_selector": (
                function_selector(function_name) if "(" in function_name else None
            ),
            "function_parameters": (
                _to_bytes(function_parameters, "function_parameters")
                if function_parameters
                else None
            ),
            "payable_amount": (
                _tinybars(payable_amount, "payable_amount") if payable_amount else None
            ),
        }
        return self._build(TransactionKind.CONTRACT_EXECUTE, body, memo=memo)

    async def update_contract(
        self,
        contract_id: str,
        *,
        admin_key: KeyInput = None,
        auto_renew_period: Optional[int] = None,
        memo: Optional[str] = None,
        staked_account_id: Optional[str] = None,
        staked_node_id: Optional[int] = None,
        decline_staking_reward: Optional[bool] = None,
        max_automatic_token_associations: Optional[int] = None,
        proxy_account_id: Optional[str] = None,
    ) -> BuiltTransaction:
        if not contract_id:
            raise MissingRequiredFieldError(
                "contract_id", message="Contract ID is required to update a contract."
            )
        body: Dict[str, Any] = {
            "contract_id": validate_entity_id(contract_id, "contract_id"),
            "admin_key": await self.resolve_key(admin_key),
            "auto_renew_period": auto_renew_period or None,
            "contract_memo": memo or None,
            "staked_account_id": staked_account_id or None,
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward or None,
            "max_automatic_token_associations": max_automatic_token_associations or None,
            "proxy_account_id": proxy_account_id or None,
        }
        return self._build(TransactionKind.CONTRACT_UPDATE, body)

    def delete_contract(
        self,
        contract_id: str,
        transfer_account_id: Optional[str] = None,
        transfer_contract_id: Optional[str] = None,
    ) -> BuiltTransaction:
        """Delete a contract, sweeping its balance to an account or another contract."""
        if not contract_id:
            raise MissingRequiredFieldError(
                "contract_id", message="Contract ID is required to delete a contract."
            )
        body: Dict[str, Any] = {"contract_id": validate_entity_id(contract_id, "contract_id")}
        if transfer_account_id:
            body["transfer_account_id"] = validate_account_id(
                transfer_account_id, "transfer_account_id"
            )
        elif transfer_contract_id:
            body["transfer_contract_id"] = validate_entity_id(
                transfer_contract_id, "transfer_contract_id"
            )
        return self._build(TransactionKind.CONTRACT_DELETE, body)
