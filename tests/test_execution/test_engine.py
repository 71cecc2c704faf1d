"""
Tests for ExecutionEngine.

Tests cover:
- Plain submission and failure normalization
- Schedule wrapping (payer, admin key, inner transaction id, notes)
- Bytes serialization without submission
- Submission with an alternative signer
"""

import pytest

from hederakit.agent import HederaAgentKit
from hederakit.errors import IllegalStateError
from hederakit.execution.engine import NO_TRANSACTION_ERROR
from hederakit.keys.types import KeyList
from hederakit.signer.server import ServerSigner
from hederakit.transactions.pending import PendingTransaction, TransactionKind
from hederakit.transactions.results import ExecutionOptions, Notes, TransactionReceipt

from ..conftest import (
    AGENT_ACCOUNT_ID,
    AGENT_PUBLIC_KEY,
    OTHER_PRIVATE_KEY,
    RECIPIENT_ACCOUNT_ID,
    SCHEDULE_ID,
    TOKEN_ID,
    USER_ACCOUNT_ID,
    USER_PUBLIC_KEY,
)


def _mint() -> PendingTransaction:
    return PendingTransaction(TransactionKind.TOKEN_MINT, {"token_id": TOKEN_ID, "amount": 10})


# =============================================================================
# Plain execution
# =============================================================================


class TestExecute:
    """Tests for ExecutionEngine.execute without scheduling."""

    @pytest.mark.asyncio
    async def test_no_transaction(self, autonomous_kit) -> None:
        result = await autonomous_kit.engine.execute(None, notes=Notes(["kept"]))

        assert result.success is False
        assert result.error == NO_TRANSACTION_ERROR
        assert result.notes.as_list() == ["kept"]

    @pytest.mark.asyncio
    async def test_signs_and_submits_as_agent(self, autonomous_kit, submitter) -> None:
        tx = _mint()

        result = await autonomous_kit.engine.execute(tx)

        assert result.success is True
        assert result.receipt.status == "SUCCESS"
        assert result.schedule_id is None
        assert submitter.submitted == [tx]
        assert tx.transaction_id.account_id == AGENT_ACCOUNT_ID
        assert result.transaction_id == str(tx.transaction_id)
        assert AGENT_PUBLIC_KEY.to_string_der() in tx.signatures

    @pytest.mark.asyncio
    async def test_notes_are_copied(self, autonomous_kit) -> None:
        notes = Notes(["built"])

        result = await autonomous_kit.engine.execute(_mint(), notes=notes)

        assert result.notes.as_list() == ["built"]
        assert result.notes is not notes

    @pytest.mark.asyncio
    async def test_failed_receipt_keeps_transaction_id(self, autonomous_kit, submitter) -> None:
        submitter.receipt = TransactionReceipt(status="INVALID_SIGNATURE")
        tx = _mint()

        result = await autonomous_kit.engine.execute(tx, notes=Notes(["n"]))

        assert result.success is False
        assert "INVALID_SIGNATURE" in result.error
        assert result.transaction_id == str(tx.transaction_id)
        assert result.notes.as_list() == ["n"]

    @pytest.mark.asyncio
    async def test_submitter_exception_becomes_result(self, autonomous_kit, submitter) -> None:
        submitter.error = RuntimeError("node unreachable")

        result = await autonomous_kit.engine.execute(_mint())

        assert result.success is False
        assert result.error == "node unreachable"
        assert result.transaction_id is not None


# =============================================================================
# Scheduled execution
# =============================================================================


class TestScheduledExecute:
    """Tests for schedule wrapping."""

    @pytest.mark.asyncio
    async def test_schedule_for_user(self, kit, submitter) -> None:
        submitter.receipt = TransactionReceipt(status="SUCCESS", schedule_id=SCHEDULE_ID)
        inner = _mint()

        result = await kit.engine.execute(
            inner, ExecutionOptions(schedule=True, schedule_memo="later")
        )

        wrapper = submitter.submitted[0]
        assert result.success is True
        assert result.schedule_id == SCHEDULE_ID
        assert wrapper.kind is TransactionKind.SCHEDULE_CREATE
        assert wrapper.get("scheduled_transaction") is inner
        assert wrapper.get("payer_account_id") == USER_ACCOUNT_ID
        assert wrapper.get("schedule_memo") == "later"
        assert wrapper.get("admin_key") == KeyList((AGENT_PUBLIC_KEY, USER_PUBLIC_KEY), threshold=1)
        assert inner.transaction_id.account_id == USER_ACCOUNT_ID
        assert not inner.is_frozen
        assert result.notes.as_list() == [
            f"The schedule admin key allows both your agent and user ({USER_ACCOUNT_ID}) "
            "to manage the schedule."
        ]

    @pytest.mark.asyncio
    async def test_agent_pays_without_user(self, autonomous_kit, submitter) -> None:
        result = await autonomous_kit.engine.execute(_mint(), ExecutionOptions(schedule=True))

        wrapper = submitter.submitted[0]
        assert wrapper.get("payer_account_id") == AGENT_ACCOUNT_ID
        assert wrapper.get("admin_key") == KeyList((AGENT_PUBLIC_KEY,), threshold=1)
        assert (
            f"Your agent account ({AGENT_ACCOUNT_ID}) will pay the fee to create this schedule."
            in result.notes
        )

    @pytest.mark.asyncio
    async def test_explicit_payer_without_user(self, autonomous_kit, submitter) -> None:
        await autonomous_kit.engine.execute(
            _mint(),
            ExecutionOptions(schedule=True, schedule_payer_account_id=RECIPIENT_ACCOUNT_ID),
        )

        assert submitter.submitted[0].get("payer_account_id") == RECIPIENT_ACCOUNT_ID

    @pytest.mark.asyncio
    async def test_unknown_user_key(self, signer, submitter) -> None:
        kit = HederaAgentKit(signer, "returnBytes", user_account_id="0.0.404")

        result = await kit.engine.execute(_mint(), ExecutionOptions(schedule=True))

        assert submitter.submitted[0].get("admin_key") == KeyList((AGENT_PUBLIC_KEY,), threshold=1)
        assert result.notes.as_list() == [
            "The schedule admin key is set to your agent. Could not retrieve user (0.0.404) key."
        ]

    @pytest.mark.asyncio
    async def test_explicit_admin_key_used_as_given(self, kit, submitter) -> None:
        admin = KeyList((USER_PUBLIC_KEY,))

        result = await kit.engine.execute(
            _mint(), ExecutionOptions(schedule=True, schedule_admin_key=admin)
        )

        assert submitter.submitted[0].get("admin_key") == admin
        assert len(result.notes) == 0

    @pytest.mark.asyncio
    async def test_schedule_id_only_reported_when_scheduled(self, autonomous_kit, submitter) -> None:
        submitter.receipt = TransactionReceipt(status="SUCCESS", schedule_id=SCHEDULE_ID)

        result = await autonomous_kit.engine.execute(_mint())

        assert result.schedule_id is None


# =============================================================================
# Bytes
# =============================================================================


class TestTransactionBytes:
    """Tests for get_transaction_bytes."""

    @pytest.mark.asyncio
    async def test_no_transaction(self, kit) -> None:
        with pytest.raises(IllegalStateError):
            await kit.engine.get_transaction_bytes(None)

    @pytest.mark.asyncio
    async def test_frozen_with_user_payer(self, kit, submitter) -> None:
        tx = _mint()

        encoded = await kit.engine.get_transaction_bytes(tx)

        restored = PendingTransaction.from_base64(encoded)
        assert restored.transaction_id.account_id == USER_ACCOUNT_ID
        assert restored.is_frozen
        assert restored.signatures == {}
        assert tx.is_frozen
        assert submitter.submitted == []

    @pytest.mark.asyncio
    async def test_agent_payer_without_user(self, autonomous_kit) -> None:
        encoded = await autonomous_kit.engine.get_transaction_bytes(_mint())

        restored = PendingTransaction.from_base64(encoded)
        assert restored.transaction_id.account_id == AGENT_ACCOUNT_ID

    @pytest.mark.asyncio
    async def test_scheduled_bytes(self, kit) -> None:
        notes = Notes()

        encoded = await kit.engine.get_transaction_bytes(
            _mint(), ExecutionOptions(schedule=True), notes
        )

        restored = PendingTransaction.from_base64(encoded)
        assert restored.kind is TransactionKind.SCHEDULE_CREATE
        assert restored.get("payer_account_id") == USER_ACCOUNT_ID
        assert restored.get("scheduled_transaction")["kind"] == "TokenMint"
        assert len(notes) == 1


# =============================================================================
# Alternative signer
# =============================================================================


class TestExecuteWithSigner:
    """Tests for execute_with_signer."""

    @pytest.fixture
    def other_signer(self, submitter, mirror) -> ServerSigner:
        return ServerSigner(
            RECIPIENT_ACCOUNT_ID,
            OTHER_PRIVATE_KEY,
            "testnet",
            submitter=submitter,
            mirror_node=mirror,
        )

    @pytest.mark.asyncio
    async def test_other_signer_pays(self, kit, other_signer, submitter) -> None:
        tx = _mint()

        result = await kit.engine.execute_with_signer(tx, other_signer)

        assert result.success is True
        assert tx.transaction_id.account_id == RECIPIENT_ACCOUNT_ID
        assert OTHER_PRIVATE_KEY.public_key.to_string_der() in tx.signatures
        assert submitter.submitted == [tx]

    @pytest.mark.asyncio
    async def test_frozen_transaction_rejected(self, kit, other_signer) -> None:
        tx = _mint().freeze_with(USER_ACCOUNT_ID, ["0.0.3"])

        with pytest.raises(IllegalStateError):
            await kit.engine.execute_with_signer(tx, other_signer)

    @pytest.mark.asyncio
    async def test_no_transaction(self, kit, other_signer) -> None:
        result = await kit.engine.execute_with_signer(None, other_signer)

        assert result.success is False
        assert result.error == NO_TRANSACTION_ERROR

    @pytest.mark.asyncio
    async def test_failure_result(self, kit, other_signer, submitter) -> None:
        submitter.error = RuntimeError("busy")

        result = await kit.engine.execute_with_signer(_mint(), other_signer)

        assert result.success is False
        assert result.error == "busy"
        assert result.transaction_id.startswith(f"{RECIPIENT_ACCOUNT_ID}@")
