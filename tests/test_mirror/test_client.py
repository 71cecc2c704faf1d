"""
Tests for MirrorNodeClient.

Tests cover:
- Retry classification (4xx vs 429/5xx/transport) and backoff delays
- Pagination over links.next with limits and the page cap
- Topic message decoding
- Account and key lookups
- Custom URL / API key handling
- Key-list authorization
"""

import base64
import json
from typing import List
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from hederakit.config import MirrorNodeConfig
from hederakit.errors import InvalidKeyFormatError, QueryFailureError, UnsupportedNetworkError
from hederakit.keys.types import KeyList, encode_key
from hederakit.mirror.client import (
    MirrorNodeClient,
    decode_topic_message,
    evaluate_key_access,
)
from hederakit.utils.retry import RetryPolicy

from ..conftest import (
    AGENT_PUBLIC_KEY,
    ECDSA_PRIVATE_KEY,
    OTHER_PRIVATE_KEY,
    TESTNET_MIRROR,
    TOPIC_ID,
    USER_ACCOUNT_ID,
    USER_PUBLIC_KEY,
    MirrorStub,
)


MESSAGES_PATH = f"/api/v1/topics/{TOPIC_ID}/messages"


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _message(sequence_number: int) -> dict:
    return {
        "consensus_timestamp": f"17000000{sequence_number:02d}.000000001",
        "sequence_number": sequence_number,
        "payer_account_id": USER_ACCOUNT_ID,
        "topic_id": TOPIC_ID,
        "message": _b64(json.dumps({"seq": sequence_number})),
        "running_hash": "aa",
        "running_hash_version": 3,
    }


def paged_messages(total: int, page_size: int = 2):
    """Route serving ``total`` messages ``page_size`` at a time via links.next."""

    def handler(request: httpx.Request) -> httpx.Response:
        cursor = request.url.params.get("sequencenumber", "gt:0")
        start = int(cursor.split(":")[1])
        end = min(start + page_size, total)
        body = {
            "messages": [_message(n) for n in range(start + 1, end + 1)],
            "links": {
                "next": f"{MESSAGES_PATH}?sequencenumber=gt:{end}" if end < total else None
            },
        }
        return httpx.Response(200, json=body)

    return handler


def status_sequence(statuses: List[int], body: dict):
    """Route answering with ``statuses`` in order, then 200 with ``body``."""
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        if remaining:
            return httpx.Response(remaining.pop(0), json={})
        return httpx.Response(200, json=body)

    return handler


# =============================================================================
# Retry
# =============================================================================


class TestRetry:
    """Tests for retry classification and backoff."""

    @pytest.mark.asyncio
    async def test_5xx_retried_with_backoff(self, mirror_stub: MirrorStub) -> None:
        """Test 500, 500, 200 succeeds on the third attempt after 2s and 4s."""
        path = f"/api/v1/accounts/{USER_ACCOUNT_ID}"
        mirror_stub.routes[path] = status_sequence(
            [500, 500], {"account": USER_ACCOUNT_ID}
        )
        client = mirror_stub.client()

        with patch("hederakit.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            account = await client.request_account(USER_ACCOUNT_ID)

        assert account.account == USER_ACCOUNT_ID
        assert mirror_stub.paths().count(path) == 3
        assert [c.args[0] for c in sleep.await_args_list] == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_429_is_retried(self, mirror_stub: MirrorStub, fast_retry: RetryPolicy) -> None:
        path = f"/api/v1/accounts/{USER_ACCOUNT_ID}"
        mirror_stub.routes[path] = status_sequence([429], {"account": USER_ACCOUNT_ID})

        await mirror_stub.client(retry_policy=fast_retry).request_account(USER_ACCOUNT_ID)

        assert mirror_stub.paths().count(path) == 2

    @pytest.mark.asyncio
    async def test_404_fails_without_retry(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        with pytest.raises(QueryFailureError) as exc_info:
            await mirror.request_account("0.0.404")

        assert exc_info.value.status_code == 404
        assert exc_info.value.retryable is False
        assert mirror_stub.paths() == ["/api/v1/accounts/0.0.404"]

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_error(
        self, mirror_stub: MirrorStub, fast_retry: RetryPolicy
    ) -> None:
        path = f"/api/v1/accounts/{USER_ACCOUNT_ID}"
        mirror_stub.routes[path] = lambda request: httpx.Response(503, json={})

        with pytest.raises(QueryFailureError) as exc_info:
            await mirror_stub.client(retry_policy=fast_retry).request_account(USER_ACCOUNT_ID)

        assert exc_info.value.status_code == 503
        assert mirror_stub.paths().count(path) == fast_retry.max_retries

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, fast_retry: RetryPolicy) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"account": USER_ACCOUNT_ID})

        client = MirrorNodeClient(
            "testnet", retry_policy=fast_retry, transport=httpx.MockTransport(handler)
        )

        account = await client.request_account(USER_ACCOUNT_ID)

        assert account.account == USER_ACCOUNT_ID
        assert calls == 2

    def test_configure_retry_overrides_policy(self, mirror: MirrorNodeClient) -> None:
        mirror.configure_retry(max_retries=7, initial_delay_ms=10)

        assert mirror.retry_policy.max_retries == 7
        assert mirror.retry_policy.initial_delay_ms == 10
        assert mirror.retry_policy.retryable_errors == (QueryFailureError,)


# =============================================================================
# Pagination
# =============================================================================


class TestPagination:
    """Tests for links.next traversal."""

    @pytest.mark.asyncio
    async def test_follows_every_page(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        """Test three pages of two messages give six messages in order."""
        mirror_stub.routes[MESSAGES_PATH] = paged_messages(6)

        messages = await mirror.get_topic_messages(TOPIC_ID)

        assert [m.sequence_number for m in messages] == [1, 2, 3, 4, 5, 6]
        assert mirror_stub.paths().count(MESSAGES_PATH) == 3

    @pytest.mark.asyncio
    async def test_limit_stops_early(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        mirror_stub.routes[MESSAGES_PATH] = paged_messages(6)

        messages = await mirror.get_topic_messages_by_filter(TOPIC_ID, limit=3)

        assert [m.sequence_number for m in messages] == [1, 2, 3]
        assert mirror_stub.paths().count(MESSAGES_PATH) == 2

    @pytest.mark.asyncio
    async def test_page_cap(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        """Test filtered reads stop after ten pages."""
        mirror_stub.routes[MESSAGES_PATH] = paged_messages(40)

        messages = await mirror.get_topic_messages_by_filter(TOPIC_ID)

        assert len(messages) == 20
        assert mirror_stub.paths().count(MESSAGES_PATH) == 10

    @pytest.mark.asyncio
    async def test_sequence_number_defaults_to_gt(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes[MESSAGES_PATH] = paged_messages(6)

        messages = await mirror.get_topic_messages(TOPIC_ID, sequence_number=4)

        assert [m.sequence_number for m in messages] == [5, 6]
        assert mirror_stub.requests[0].url.params["sequencenumber"] == "gt:4"

    @pytest.mark.asyncio
    async def test_filter_failure_returns_none(self, mirror: MirrorNodeClient) -> None:
        assert await mirror.get_topic_messages_by_filter(TOPIC_ID) is None

    @pytest.mark.asyncio
    async def test_unfiltered_failure_raises(self, mirror: MirrorNodeClient) -> None:
        with pytest.raises(QueryFailureError):
            await mirror.get_topic_messages(TOPIC_ID)

    @pytest.mark.asyncio
    async def test_filter_params(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        mirror_stub.routes[MESSAGES_PATH] = {"messages": [], "links": {"next": None}}

        await mirror.get_topic_messages_by_filter(
            TOPIC_ID,
            start_time="1700000000.0",
            end_time="1700000100.0",
            order="desc",
        )

        params = mirror_stub.requests[0].url.params
        assert params.get_list("timestamp") == ["gte:1700000000.0", "lt:1700000100.0"]
        assert params["order"] == "desc"

    @pytest.mark.asyncio
    async def test_account_tokens_limited(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        path = f"/api/v1/accounts/{USER_ACCOUNT_ID}/tokens"
        mirror_stub.routes[path] = {
            "tokens": [{"token_id": f"0.0.{n}", "balance": n} for n in range(1, 6)],
            "links": {"next": None},
        }

        tokens = await mirror.get_account_tokens(USER_ACCOUNT_ID, limit=2)

        assert [t.token_id for t in tokens] == ["0.0.1", "0.0.2"]


# =============================================================================
# Message decoding
# =============================================================================


class TestDecodeTopicMessage:
    """Tests for decode_topic_message."""

    def test_json_payload(self) -> None:
        message = decode_topic_message(_message(1))

        assert message.is_json is True
        assert message.content == {"seq": 1}
        assert message.raw_content == '{"seq": 1}'
        assert message.created.year == 2023

    def test_plain_text_falls_back_to_raw(self) -> None:
        raw = {**_message(2), "message": _b64("hello, topic")}

        message = decode_topic_message(raw)

        assert message.is_json is False
        assert message.content == "hello, topic"

    def test_invalid_base64_is_skipped(self) -> None:
        assert decode_topic_message({**_message(3), "message": "%%%not-base64"}) is None

    def test_missing_payload_is_skipped(self) -> None:
        assert decode_topic_message({**_message(4), "message": None}) is None

    @pytest.mark.asyncio
    async def test_bad_items_do_not_break_page(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes[MESSAGES_PATH] = {
            "messages": [_message(1), {**_message(2), "message": "%%%"}, _message(3)],
            "links": {"next": None},
        }

        messages = await mirror.get_topic_messages(TOPIC_ID)

        assert [m.sequence_number for m in messages] == [1, 3]


# =============================================================================
# Accounts and keys
# =============================================================================


class TestAccounts:
    """Tests for account and key lookups."""

    @pytest.mark.asyncio
    async def test_get_public_key(self, mirror: MirrorNodeClient) -> None:
        assert await mirror.get_public_key(USER_ACCOUNT_ID) == USER_PUBLIC_KEY

    @pytest.mark.asyncio
    async def test_ecdsa_key(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        mirror_stub.add_account("0.0.777", ECDSA_PRIVATE_KEY.public_key)

        assert await mirror.get_public_key("0.0.777") == ECDSA_PRIVATE_KEY.public_key

    @pytest.mark.asyncio
    async def test_key_list_account_has_no_single_key(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes["/api/v1/accounts/0.0.555"] = {
            "account": "0.0.555",
            "key": {"_type": "ProtobufEncoded", "key": "2a0a0a"},
        }

        with pytest.raises(QueryFailureError):
            await mirror.get_public_key("0.0.555")

    @pytest.mark.asyncio
    async def test_balance_in_hbar(self, mirror: MirrorNodeClient) -> None:
        assert await mirror.get_account_balance(USER_ACCOUNT_ID) == 2.5

    @pytest.mark.asyncio
    async def test_best_effort_reads_return_none(self, mirror: MirrorNodeClient) -> None:
        assert await mirror.get_account_memo("0.0.404") is None
        assert await mirror.get_token_info("0.0.404") is None
        assert await mirror.get_schedule_info("0.0.404") is None

    @pytest.mark.asyncio
    async def test_schedule_status(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        mirror_stub.routes["/api/v1/schedules/0.0.9001"] = {
            "schedule_id": "0.0.9001",
            "executed_timestamp": "1700000000.000000000",
        }

        status = await mirror.get_scheduled_transaction_status("0.0.9001")

        assert status.executed is True
        assert status.executed_date.year == 2023

    @pytest.mark.asyncio
    async def test_missing_schedule_status_raises(self, mirror: MirrorNodeClient) -> None:
        with pytest.raises(QueryFailureError) as exc_info:
            await mirror.get_scheduled_transaction_status("0.0.9002")

        assert exc_info.value.schedule_id == "0.0.9002"

    @pytest.mark.asyncio
    async def test_nft_metadata_decoded(self, mirror: MirrorNodeClient, mirror_stub: MirrorStub) -> None:
        mirror_stub.routes[f"/api/v1/accounts/{USER_ACCOUNT_ID}/nfts"] = {
            "nfts": [
                {"token_id": "0.0.5005", "serial_number": 1, "metadata": _b64("ipfs://one")},
                {"token_id": "0.0.5005", "serial_number": 2, "metadata": _b64("ipfs://two")},
            ],
            "links": {"next": None},
        }

        nft = await mirror.validate_nft_ownership(USER_ACCOUNT_ID, "0.0.5005", 2)

        assert nft.token_uri == "ipfs://two"
        assert await mirror.validate_nft_ownership(USER_ACCOUNT_ID, "0.0.5005", 3) is None


# =============================================================================
# Contracts
# =============================================================================


class TestContracts:
    """Tests for contract reads and the read-only call endpoint."""

    @pytest.mark.asyncio
    async def test_get_contracts_filters(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes["/api/v1/contracts"] = {"contracts": [{"contract_id": "0.0.6006"}]}

        contracts = await mirror.get_contracts(contract_id="0.0.6006", limit=5)

        assert contracts == [{"contract_id": "0.0.6006"}]
        params = mirror_stub.requests[-1].url.params
        assert params["contract.id"] == "0.0.6006"
        assert params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_contract_result_and_actions(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        tx = "0.0.100-1700000000-000000000"
        mirror_stub.routes[f"/api/v1/contracts/results/{tx}"] = {"result": "SUCCESS"}
        mirror_stub.routes[f"/api/v1/contracts/results/{tx}/actions"] = {
            "actions": [{"call_type": "CALL", "index": 0}]
        }

        assert (await mirror.get_contract_result(tx))["result"] == "SUCCESS"
        assert await mirror.get_contract_actions(tx, limit=1) == [{"call_type": "CALL", "index": 0}]
        assert await mirror.get_contract_actions("0.0.100-1-1") is None

    @pytest.mark.asyncio
    async def test_read_contract_posts_evm_addresses(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes["/api/v1/contracts/call"] = {"result": "0x01"}

        result = await mirror.read_contract("0.0.1234", "0x70a08231", USER_ACCOUNT_ID, gas=30000)

        request = mirror_stub.requests[-1]
        assert result == {"result": "0x01"}
        assert request.method == "POST"
        assert json.loads(request.content) == {
            "block": "latest",
            "data": "0x70a08231",
            "estimate": False,
            "from": "0x0000000000000000000000000000000000000064",
            "to": "0x00000000000000000000000000000000000004d2",
            "gas": 30000,
            "value": 0,
        }

    @pytest.mark.asyncio
    async def test_read_contract_failure_returns_none(
        self, mirror: MirrorNodeClient, mirror_stub: MirrorStub
    ) -> None:
        mirror_stub.routes["/api/v1/contracts/call"] = lambda request: httpx.Response(
            400, json={"_status": {"messages": [{"message": "CONTRACT_REVERT_EXECUTED"}]}}
        )

        assert await mirror.read_contract("0x" + "ab" * 20, "0x70a08231", USER_ACCOUNT_ID) is None
        assert await mirror.read_contract("not-an-id", "0x70a08231", USER_ACCOUNT_ID) is None


# =============================================================================
# Configuration
# =============================================================================


class TestConfiguration:
    """Tests for network selection and custom endpoints."""

    def test_default_testnet_url(self) -> None:
        assert MirrorNodeClient("testnet").base_url == TESTNET_MIRROR

    def test_unsupported_network(self) -> None:
        with pytest.raises(UnsupportedNetworkError):
            MirrorNodeClient("previewnet")

    @pytest.mark.asyncio
    async def test_api_key_substitution_and_headers(self) -> None:
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"account": USER_ACCOUNT_ID})

        client = MirrorNodeClient(
            "mainnet",
            MirrorNodeConfig(
                custom_url="https://mirror.example.com/<API-KEY>/",
                api_key="secret",
                headers={"X-Team": "agents"},
            ),
            transport=httpx.MockTransport(handler),
        )

        await client.request_account(USER_ACCOUNT_ID)

        request = seen[0]
        assert str(request.url) == f"https://mirror.example.com/secret/api/v1/accounts/{USER_ACCOUNT_ID}"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["X-API-Key"] == "secret"
        assert request.headers["X-Team"] == "agents"

    def test_configure_mirror_node_keeps_unset_fields(self) -> None:
        client = MirrorNodeClient("testnet", MirrorNodeConfig(api_key="first"))

        client.configure_mirror_node(MirrorNodeConfig(custom_url="https://other.example.com/"))

        assert client.base_url == "https://other.example.com"
        assert client.get_stats()["base_url"] == "https://other.example.com"


# =============================================================================
# Key-list authorization
# =============================================================================


class TestKeyAccess:
    """Tests for evaluate_key_access and check_key_list_access."""

    def test_single_key(self) -> None:
        assert evaluate_key_access(USER_PUBLIC_KEY, USER_PUBLIC_KEY) is True
        assert evaluate_key_access(USER_PUBLIC_KEY, AGENT_PUBLIC_KEY) is False

    def test_nested_member_matches_regardless_of_threshold(self) -> None:
        tree = KeyList(
            (
                OTHER_PRIVATE_KEY.public_key,
                KeyList((ECDSA_PRIVATE_KEY.public_key, USER_PUBLIC_KEY), threshold=2),
            ),
            threshold=2,
        )

        assert evaluate_key_access(tree, USER_PUBLIC_KEY) is True

    def test_unrelated_key(self) -> None:
        tree = KeyList((OTHER_PRIVATE_KEY.public_key, KeyList((USER_PUBLIC_KEY,))))

        assert evaluate_key_access(tree, AGENT_PUBLIC_KEY) is False

    def test_empty_list(self) -> None:
        assert evaluate_key_access(KeyList(), USER_PUBLIC_KEY) is False

    def test_encoded_key(self, mirror: MirrorNodeClient) -> None:
        encoded = encode_key(KeyList((AGENT_PUBLIC_KEY, KeyList((USER_PUBLIC_KEY,))), 1))

        assert mirror.check_key_list_access(encoded, USER_PUBLIC_KEY) is True
        assert mirror.check_key_list_access(encoded, OTHER_PRIVATE_KEY.public_key) is False

    @pytest.mark.parametrize("encoded", ['{"ed25519": 123}', '{"thresholdKey": [1]}'])
    def test_malformed_encoded_key(self, mirror: MirrorNodeClient, encoded: str) -> None:
        with pytest.raises(InvalidKeyFormatError):
            mirror.check_key_list_access(encoded, USER_PUBLIC_KEY)
