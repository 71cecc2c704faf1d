#!/usr/bin/env python3
"""
Example: returnBytes mode - token creation prepared for a user

The agent builds a fungible token creation on behalf of an end user and
hands back base64 transaction bytes for the user's wallet to sign.
Nothing is submitted by the agent, so the submitter below refuses.

Run this example:
    python examples/return_bytes_token.py

Environment Variables:
    HEDERA_ACCOUNT_ID: Agent account id (0.0.x)
    HEDERA_PRIVATE_KEY: Agent private key (DER hex or 0x-prefixed ECDSA)
    USER_ACCOUNT_ID: End-user account that will pay for and own the token
    HEDERA_NETWORK: testnet or mainnet (default: testnet)
"""

import asyncio

from hederakit import (
    OPERATIONS,
    HederaAgentKit,
    KitSettings,
    PendingTransaction,
    TransactionResponse,
    configure_logging,
)


class RefusingSubmitter:
    """returnBytes mode never submits on the agent's behalf."""

    async def submit(self, transaction: PendingTransaction) -> TransactionResponse:
        raise RuntimeError("This example does not submit transactions")


async def main() -> None:
    configure_logging("INFO")

    settings = KitSettings.from_env()
    kit = HederaAgentKit.from_settings(settings, submitter=RefusingSubmitter())

    print("=" * 60)
    print(f"Agent:   {kit.signer.get_account_id()}")
    print(f"User:    {kit.user_account_id}")
    print(f"Mode:    {kit.operational_mode.value}")
    print("=" * 60)

    result = await kit.dispatcher.run(
        OPERATIONS["hedera-hts-create-fungible-token"],
        {"token_name": "Example Gold", "initial_supply": 1000, "decimals": 2},
        {"schedule": False},
    )

    if not result.success:
        print(f"Failed: {result.error}")
    else:
        print("Transaction bytes for the user's wallet:")
        print(result.transaction_bytes)

    for note in result.notes:
        print(f"  note: {note}")


if __name__ == "__main__":
    asyncio.run(main())
