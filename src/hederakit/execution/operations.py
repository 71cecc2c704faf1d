"""
Built-in operation catalogue.

Each entry pairs a construction coroutine with its dispatch flags and the
optional parameters it fills in by default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from hederakit.builders.defaults import ParameterDefault
from hederakit.execution.dispatcher import TransactionOperation
from hederakit.transactions.results import BuiltTransaction

if TYPE_CHECKING:
    from hederakit.agent import HederaAgentKit

DEFAULT_FT_MAX_SUPPLY = 1_000_000_000_000_000

FUNGIBLE_TOKEN_DEFAULTS = (
    ParameterDefault(
        "decimals",
        0,
        "The number of decimal places for your token was automatically set to '{value}'.",
    ),
    ParameterDefault(
        "supply_type",
        "FINITE",
        "Your token's supply type was set to '{value}' by default.",
    ),
    ParameterDefault(
        "max_supply",
        DEFAULT_FT_MAX_SUPPLY,
        lambda value: f"A maximum supply of '{value:,}' for the token was set by default.",
    ),
)

NFT_DEFAULTS = (
    ParameterDefault(
        "supply_type",
        "FINITE",
        "Your NFT collection's supply type was set to '{value}' by default.",
    ),
)


async def _create_fungible_token(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return await kit.hts().create_fungible_token(params)


async def _create_nft(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return await kit.hts().create_non_fungible_token(params)


async def _mint_fungible_token(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return kit.hts().mint_fungible_token(params.get("token_id"), params.get("amount"))


async def _transfer_hbar(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return kit.accounts().transfer_hbar(params.get("transfers") or [], memo=params.get("memo"))


async def _create_topic(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return await kit.hcs().create_topic(**params)


async def _submit_topic_message(kit: "HederaAgentKit", params: Dict[str, Any]) -> BuiltTransaction:
    return kit.hcs().submit_message(
        params.get("topic_id"),
        params.get("message"),
        max_chunks=params.get("max_chunks"),
        chunk_size=params.get("chunk_size"),
    )


async def _sign_scheduled_transaction(
    kit: "HederaAgentKit",
    params: Dict[str, Any],
) -> BuiltTransaction:
    return kit.accounts().prepare_schedule_sign(params.get("schedule_id"), memo=params.get("memo"))


CREATE_FUNGIBLE_TOKEN = TransactionOperation(
    name="hedera-hts-create-fungible-token",
    build=_create_fungible_token,
    parameter_defaults=FUNGIBLE_TOKEN_DEFAULTS,
)
CREATE_NFT = TransactionOperation(
    name="hedera-hts-create-nft",
    build=_create_nft,
    parameter_defaults=NFT_DEFAULTS,
)
MINT_FUNGIBLE_TOKEN = TransactionOperation(
    name="hedera-hts-mint-fungible-token",
    build=_mint_fungible_token,
)
TRANSFER_HBAR = TransactionOperation(
    name="hedera-account-transfer-hbar",
    build=_transfer_hbar,
)
CREATE_TOPIC = TransactionOperation(
    name="hedera-hcs-create-topic",
    build=_create_topic,
    never_schedule=True,
)
SUBMIT_TOPIC_MESSAGE = TransactionOperation(
    name="hedera-hcs-submit-message",
    build=_submit_topic_message,
)
SIGN_AND_EXECUTE_SCHEDULED_TRANSACTION = TransactionOperation(
    name="hedera-sign-and-execute-scheduled-transaction",
    build=_sign_scheduled_transaction,
    never_schedule=True,
)

OPERATIONS: Dict[str, TransactionOperation] = {
    op.name: op
    for op in (
        CREATE_FUNGIBLE_TOKEN,
        CREATE_NFT,
        MINT_FUNGIBLE_TOKEN,
        TRANSFER_HBAR,
        CREATE_TOPIC,
        SUBMIT_TOPIC_MESSAGE,
        SIGN_AND_EXECUTE_SCHEDULED_TRANSACTION,
    )
}
