"""
Tests for ServerSigner.
"""

import pytest

from hederakit.errors import InvalidKeyFormatError, SubmissionFailureError, UnsupportedNetworkError
from hederakit.keys.types import KeyType
from hederakit.signer.server import ServerSigner
from hederakit.transactions.pending import PendingTransaction, TransactionKind
from hederakit.transactions.results import TransactionReceipt

from ..conftest import (
    AGENT_ACCOUNT_ID,
    AGENT_PRIVATE_KEY,
    AGENT_PUBLIC_KEY,
    ECDSA_PRIVATE_KEY,
    TOKEN_ID,
)


def _pause() -> PendingTransaction:
    return PendingTransaction(TransactionKind.TOKEN_PAUSE, {"token_id": TOKEN_ID})


class TestServerSigner:
    """Tests for identity, signing and submission."""

    def test_parses_key_string(self, submitter, mirror) -> None:
        signer = ServerSigner(
            AGENT_ACCOUNT_ID,
            AGENT_PRIVATE_KEY.to_string_der(),
            "testnet",
            submitter=submitter,
            mirror_node=mirror,
        )

        assert signer.key_type is KeyType.ED25519
        assert signer.local_public_key == AGENT_PUBLIC_KEY

    def test_invalid_key(self, submitter, mirror) -> None:
        with pytest.raises(InvalidKeyFormatError):
            ServerSigner(AGENT_ACCOUNT_ID, "nope", "testnet", submitter=submitter, mirror_node=mirror)

    def test_unsupported_network(self, submitter, mirror) -> None:
        with pytest.raises(UnsupportedNetworkError):
            ServerSigner(
                AGENT_ACCOUNT_ID, AGENT_PRIVATE_KEY, "previewnet", submitter=submitter, mirror_node=mirror
            )

    @pytest.mark.asyncio
    async def test_get_public_key_queries_mirror(self, signer, mirror_stub) -> None:
        assert await signer.get_public_key() == AGENT_PUBLIC_KEY
        assert mirror_stub.paths() == [f"/api/v1/accounts/{AGENT_ACCOUNT_ID}"]

    @pytest.mark.asyncio
    async def test_sign_freezes_with_agent_payer(self, signer) -> None:
        tx = await signer.sign(_pause())

        assert tx.is_frozen
        assert tx.transaction_id.account_id == AGENT_ACCOUNT_ID
        assert tx.node_account_ids == ["0.0.3", "0.0.4", "0.0.5"]
        assert list(tx.signatures) == [AGENT_PUBLIC_KEY.to_string_der()]

    @pytest.mark.asyncio
    async def test_sign_and_execute(self, signer, submitter) -> None:
        receipt = await signer.sign_and_execute_transaction(_pause())

        assert receipt.succeeded
        assert len(submitter.submitted) == 1

    @pytest.mark.asyncio
    async def test_failed_status_raises(self, signer, submitter) -> None:
        submitter.receipt = TransactionReceipt(status="TOKEN_IS_PAUSED")

        with pytest.raises(SubmissionFailureError) as exc_info:
            await signer.sign_and_execute_transaction(_pause())

        assert exc_info.value.status == "TOKEN_IS_PAUSED"
        assert exc_info.value.transaction_id.startswith(f"{AGENT_ACCOUNT_ID}@")


class TestVerifyKeyType:
    """Tests for aligning the key scheme with the mirror node."""

    @pytest.mark.asyncio
    async def test_switches_to_reported_scheme(self, signer, mirror_stub) -> None:
        mirror_stub.add_account(AGENT_ACCOUNT_ID, ECDSA_PRIVATE_KEY.public_key)

        assert await signer.verify_key_type() is KeyType.ECDSA
        assert signer.key_type is KeyType.ECDSA

    @pytest.mark.asyncio
    async def test_matching_scheme_unchanged(self, signer) -> None:
        assert await signer.verify_key_type() is KeyType.ED25519
        assert signer.local_public_key == AGENT_PUBLIC_KEY

    @pytest.mark.asyncio
    async def test_lookup_failure_keeps_key(self, signer, mirror_stub) -> None:
        del mirror_stub.routes[f"/api/v1/accounts/{AGENT_ACCOUNT_ID}"]

        assert await signer.verify_key_type() is KeyType.ED25519
