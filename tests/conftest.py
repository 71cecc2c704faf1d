"""
Shared fixtures for hederakit tests.

The mirror node is served by an ``httpx.MockTransport`` route table and
transactions are "submitted" to an in-memory submitter, so no test
touches the network.
"""

from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from hederakit.agent import HederaAgentKit
from hederakit.keys.types import KeyType, PrivateKey, PublicKey
from hederakit.mirror.client import MirrorNodeClient
from hederakit.signer.server import ServerSigner
from hederakit.transactions.pending import PendingTransaction
from hederakit.transactions.results import TransactionReceipt
from hederakit.utils.retry import RetryPolicy


# =============================================================================
# Test Constants
# =============================================================================

AGENT_ACCOUNT_ID = "0.0.1001"
USER_ACCOUNT_ID = "0.0.100"
RECIPIENT_ACCOUNT_ID = "0.0.800"
TOKEN_ID = "0.0.5005"
TOPIC_ID = "0.0.6006"
SCHEDULE_ID = "0.0.9001"

# Deterministic key material
AGENT_PRIVATE_KEY = PrivateKey(KeyType.ED25519, bytes.fromhex("11" * 32))
USER_PRIVATE_KEY = PrivateKey(KeyType.ED25519, bytes.fromhex("22" * 32))
OTHER_PRIVATE_KEY = PrivateKey(KeyType.ED25519, bytes.fromhex("33" * 32))
ECDSA_PRIVATE_KEY = PrivateKey(KeyType.ECDSA, bytes.fromhex("44" * 32))

AGENT_PUBLIC_KEY = AGENT_PRIVATE_KEY.public_key
USER_PUBLIC_KEY = USER_PRIVATE_KEY.public_key

TESTNET_MIRROR = "https://testnet.mirrornode.hedera.com"


# =============================================================================
# Helpers
# =============================================================================


def account_payload(account_id: str, public_key: Optional[PublicKey]) -> Dict[str, Any]:
    """Mirror-node ``/accounts/{id}`` body for an account with one key."""
    payload: Dict[str, Any] = {
        "account": account_id,
        "balance": {"balance": 250_000_000, "timestamp": "1700000000.000000000", "tokens": []},
        "memo": "test account",
    }
    if public_key is not None:
        payload["key"] = {
            "_type": "ED25519" if public_key.key_type is KeyType.ED25519 else "ECDSA_SECP256K1",
            "key": public_key.to_string_der(),
        }
    return payload


Route = Union[Dict[str, Any], Callable[[httpx.Request], httpx.Response]]


class MirrorStub:
    """
    Route table behind an ``httpx.MockTransport``.

    Routes are keyed by URL path. A dict is returned as a 200 JSON body;
    a callable receives the request and returns the response. Unknown
    paths answer 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Route] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"_status": {"messages": [{"message": "Not found"}]}})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def add_account(self, account_id: str, public_key: Optional[PublicKey]) -> None:
        self.routes[f"/api/v1/accounts/{account_id}"] = account_payload(account_id, public_key)

    def client(self, **kwargs: Any) -> MirrorNodeClient:
        return MirrorNodeClient(
            kwargs.pop("network", "testnet"),
            transport=httpx.MockTransport(self.handler),
            **kwargs,
        )

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


class FakeResponse:
    """TransactionResponse returned by FakeSubmitter."""

    def __init__(self, transaction_id: Optional[str], receipt: TransactionReceipt) -> None:
        self.transaction_id = transaction_id
        self._receipt = receipt

    async def get_receipt(self) -> TransactionReceipt:
        return self._receipt


class FakeSubmitter:
    """Records submitted transactions and answers with a fixed receipt."""

    def __init__(self, receipt: Optional[TransactionReceipt] = None) -> None:
        self.receipt = receipt or TransactionReceipt(status="SUCCESS")
        self.submitted: List[PendingTransaction] = []
        self.error: Optional[Exception] = None

    async def submit(self, transaction: PendingTransaction) -> FakeResponse:
        if self.error is not None:
            raise self.error
        self.submitted.append(transaction)
        return FakeResponse(str(transaction.transaction_id), self.receipt)


# =============================================================================
# Fixtures - Mirror node
# =============================================================================


@pytest.fixture
def mirror_stub() -> MirrorStub:
    """Route table with the agent and user accounts registered."""
    stub = MirrorStub()
    stub.add_account(AGENT_ACCOUNT_ID, AGENT_PUBLIC_KEY)
    stub.add_account(USER_ACCOUNT_ID, USER_PUBLIC_KEY)
    return stub


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Retry policy with millisecond delays."""
    return RetryPolicy(max_retries=3, initial_delay_ms=1, max_delay_ms=5)


@pytest.fixture
def mirror(mirror_stub: MirrorStub, fast_retry: RetryPolicy) -> MirrorNodeClient:
    return mirror_stub.client(retry_policy=fast_retry)


# =============================================================================
# Fixtures - Signer and kit
# =============================================================================


@pytest.fixture
def submitter() -> FakeSubmitter:
    return FakeSubmitter()


@pytest.fixture
def signer(submitter: FakeSubmitter, mirror: MirrorNodeClient) -> ServerSigner:
    return ServerSigner(
        AGENT_ACCOUNT_ID,
        AGENT_PRIVATE_KEY,
        "testnet",
        submitter=submitter,
        mirror_node=mirror,
    )


@pytest.fixture
def kit(signer: ServerSigner) -> HederaAgentKit:
    """returnBytes kit acting for USER_ACCOUNT_ID, scheduling by default."""
    return HederaAgentKit(signer, "returnBytes", user_account_id=USER_ACCOUNT_ID)


@pytest.fixture
def bytes_kit(signer: ServerSigner) -> HederaAgentKit:
    """returnBytes kit that does not schedule unless asked."""
    return HederaAgentKit(
        signer,
        "returnBytes",
        user_account_id=USER_ACCOUNT_ID,
        schedule_user_transactions_in_bytes_mode=False,
    )


@pytest.fixture
def autonomous_kit(signer: ServerSigner) -> HederaAgentKit:
    return HederaAgentKit(signer, "autonomous")
