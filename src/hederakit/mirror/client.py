"""
Mirror Node Client

Read-only access to ledger state through the public mirror-node REST API.

Every read builds a path plus query parameters and goes through a single
retrying fetcher:
- HTTP 4xx other than 429 fails immediately
- 429, 5xx and transport errors are retried with exponential backoff
- list endpoints follow ``links.next`` until exhausted, a caller limit is
  met, or (for some endpoints) a page cap is reached

Lookups that other logic depends on raise QueryFailureError. Best-effort
reads log the failure and return None (or an empty list).
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import replace
from datetime import datetime
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

import httpx
from pydantic import ValidationError as PydanticValidationError

from hederakit.config import (
    API_KEY_PLACEHOLDER,
    MirrorNodeConfig,
    Network,
    get_network_config,
)
from hederakit.errors import HederaKitError, QueryFailureError
from hederakit.keys.types import (
    Key,
    KeyList,
    PrivateKey,
    PublicKey,
    decode_key,
)
from hederakit.mirror.types import (
    AccountResponse,
    NftDetail,
    ScheduleInfo,
    ScheduleStatus,
    TokenBalance,
    TopicMessage,
    TopicResponse,
    timestamp_to_datetime,
)
from hederakit.utils.logging import get_logger
from hederakit.utils.retry import DEFAULT_RETRY_POLICY, RetryPolicy, retry_async
from hederakit.utils.validation import entity_id_to_evm_address

_logger = get_logger(__name__)

T = TypeVar("T")

QueryParams = Union[Dict[str, Any], Sequence[Tuple[str, Any]], None]

DEFAULT_PAGE_CAP = 10
SEQUENCE_OPERATORS = ("gt:", "gte:", "lt:", "lte:", "eq:", "ne:")


def _is_retryable(error: Exception) -> bool:
    return isinstance(error, QueryFailureError) and error.retryable


def _query_policy(policy: RetryPolicy) -> RetryPolicy:
    return replace(
        policy,
        jitter=False,
        retryable_errors=(QueryFailureError,),
        should_retry=_is_retryable,
    )


# ============================================================================
# Decoding helpers
# ============================================================================


def _b64_to_text(value: str) -> str:
    return base64.b64decode(value, validate=True).decode("utf-8")


def decode_topic_message(raw: Dict[str, Any]) -> Optional[TopicMessage]:
    """
    Decode one mirror-node message item.

    The base64 payload is decoded to UTF-8 and parsed as JSON; text that
    is not JSON is kept as is. Items that cannot be decoded at all are
    logged and yield None.
    """
    payload = raw.get("message")
    if not payload:
        _logger.debug(
            "Skipping topic message without payload",
            extra={"sequence_number": raw.get("sequence_number")},
        )
        return None

    try:
        text = _b64_to_text(payload)
    except (binascii.Error, ValueError) as e:
        _logger.warning(
            f"Error decoding message: {e}",
            extra={"sequence_number": raw.get("sequence_number")},
        )
        return None

    try:
        content = json.loads(text)
        is_json = True
    except ValueError:
        _logger.debug("Message content is not valid JSON, using raw content")
        content = text
        is_json = False

    try:
        return TopicMessage(
            consensus_timestamp=raw["consensus_timestamp"],
            sequence_number=raw["sequence_number"],
            payer_account_id=raw.get("payer_account_id"),
            topic_id=raw.get("topic_id"),
            running_hash=raw.get("running_hash"),
            running_hash_version=raw.get("running_hash_version"),
            chunk_info=raw.get("chunk_info") or {},
            content=content,
            raw_content=text,
            is_json=is_json,
            created=timestamp_to_datetime(raw["consensus_timestamp"]),
        )
    except (KeyError, ValueError, PydanticValidationError) as e:
        _logger.warning(f"Error processing individual message: {e}")
        return None


def _decode_nft(raw: Dict[str, Any]) -> Optional[NftDetail]:
    token_uri = None
    metadata = raw.get("metadata")
    if metadata:
        try:
            token_uri = _b64_to_text(metadata)
        except (binascii.Error, ValueError) as e:
            _logger.warning(
                f"Failed to decode metadata for NFT {raw.get('token_id')} "
                f"SN {raw.get('serial_number')}: {e}"
            )
    try:
        return NftDetail(**{**raw, "token_uri": token_uri})
    except PydanticValidationError as e:
        _logger.warning(f"Skipping malformed NFT entry: {e}")
        return None


# ============================================================================
# Key-list authorization
# ============================================================================


def evaluate_key_access(key: Key, public_key: PublicKey) -> bool:
    """
    True when ``public_key`` appears anywhere in ``key``.

    A single key matches by equality. A key list or threshold key matches
    when any member matches, recursively; thresholds are not counted.
    """
    if isinstance(key, PrivateKey):
        key = key.public_key
    if isinstance(key, PublicKey):
        return key == public_key
    if isinstance(key, KeyList):
        return any(evaluate_key_access(member, public_key) for member in key.keys)
    return False


# ============================================================================
# Client
# ============================================================================


class MirrorNodeClient:
    """
    Async mirror-node client with retry and pagination.

    Example:
        ```python
        from hederakit.mirror import MirrorNodeClient

        mirror = MirrorNodeClient("testnet")
        account = await mirror.request_account("0.0.1234")
        messages = await mirror.get_topic_messages_by_filter("0.0.5678", limit=20)
        ```
    """

    def __init__(
        self,
        network: Union[Network, str] = Network.TESTNET,
        config: Optional[MirrorNodeConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            network: mainnet or testnet
            config: Optional custom URL, API key and headers
            retry_policy: Overrides the process-wide default policy
            transport: Optional httpx transport (used by tests)

        Raises:
            UnsupportedNetworkError: For unknown networks
        """
        self._network = get_network_config(network)
        self._config = config or MirrorNodeConfig()
        self._base_url = (self._config.custom_url or self._network.mirror_node_url).rstrip("/")
        self._api_key = self._config.api_key
        self._headers: Dict[str, str] = dict(self._config.headers)
        self._retry_policy = _query_policy(retry_policy or DEFAULT_RETRY_POLICY)
        self._transport = transport
        self._stats = {"requests": 0, "failures": 0}

        if self._config.custom_url:
            _logger.info(f"Using custom mirror node URL: {self._config.custom_url}")
        if self._api_key:
            _logger.info("Using API key for mirror node requests")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def network(self) -> Network:
        return self._network.name

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def configure_retry(
        self,
        *,
        max_retries: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
        backoff_factor: Optional[float] = None,
    ) -> None:
        """Override retry settings for this client only."""
        self._retry_policy = _query_policy(
            self._retry_policy.with_overrides(
                max_retries=max_retries,
                initial_delay_ms=initial_delay_ms,
                max_delay_ms=max_delay_ms,
                backoff_factor=backoff_factor,
            )
        )
        _logger.info(
            "Retry configuration updated",
            extra={
                "max_retries": self._retry_policy.max_retries,
                "initial_delay_ms": self._retry_policy.initial_delay_ms,
                "max_delay_ms": self._retry_policy.max_delay_ms,
                "backoff_factor": self._retry_policy.backoff_factor,
            },
        )

    def configure_mirror_node(self, config: MirrorNodeConfig) -> None:
        """Update URL, API key or headers; unset fields keep their value."""
        if config.custom_url:
            self._base_url = config.custom_url.rstrip("/")
            _logger.info(f"Updated mirror node URL: {config.custom_url}")
        if config.api_key:
            self._api_key = config.api_key
            _logger.info("Updated API key for mirror node requests")
        if config.headers:
            self._headers.update(config.headers)
            _logger.info("Updated custom headers for mirror node requests")

    def get_stats(self) -> Dict[str, Any]:
        """Request counters and current endpoint."""
        return {
            "network": self._network.name.value,
            "base_url": self._base_url,
            "requests": self._stats["requests"],
            "failures": self._stats["failures"],
        }

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _construct_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        base = self._base_url
        if API_KEY_PLACEHOLDER in base and self._api_key:
            base = base.replace(API_KEY_PLACEHOLDER, self._api_key)
        if endpoint.startswith("/"):
            return f"{base}{endpoint}"
        return f"{base}/{endpoint}"

    def _request_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", **self._headers}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
            headers["X-API-Key"] = self._api_key
        return headers

    async def _get_json(self, endpoint: str, params: QueryParams = None) -> Any:
        """
        GET ``endpoint`` with retry.

        Raises:
            QueryFailureError: On a non-retryable status or once retries
                are exhausted
        """
        return await self._request_json("GET", endpoint, params=params)

    async def _post_json(self, endpoint: str, body: Dict[str, Any]) -> Any:
        """POST a JSON ``body`` to ``endpoint`` with retry."""
        return await self._request_json("POST", endpoint, body=body)

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: QueryParams = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self._construct_url(endpoint)

        async def do_fetch() -> Any:
            self._stats["requests"] += 1
            try:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self._config.timeout_ms / 1000),
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        params=params,
                        json=body,
                        headers=self._request_headers(),
                    )
            except httpx.TransportError as e:
                self._stats["failures"] += 1
                raise QueryFailureError(
                    f"Transport error for {url}: {e}",
                    url=url,
                    retryable=True,
                ) from e

            if response.status_code >= 400:
                self._stats["failures"] += 1
                raise QueryFailureError(
                    f"HTTP {response.status_code} for {url}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                return response.json()
            except ValueError as e:
                raise QueryFailureError(
                    f"Invalid JSON from {url}: {e}",
                    status_code=response.status_code,
                    url=url,
                    retryable=False,
                ) from e

        return await retry_async(do_fetch, self._retry_policy, description=url)

    async def _paginate(
        self,
        endpoint: str,
        item_key: str,
        params: QueryParams = None,
        *,
        limit: Optional[int] = None,
        max_pages: Optional[int] = None,
        transform: Optional[Callable[[Dict[str, Any]], Optional[T]]] = None,
    ) -> List[Any]:
        """
        Follow ``links.next`` and concatenate ``item_key`` across pages.

        Pages are fetched one after another. ``transform`` may drop items
        by returning None; dropped items do not count toward ``limit``.
        """
        items: List[Any] = []
        next_endpoint: Optional[str] = endpoint
        next_params = params
        pages = 0

        while next_endpoint:
            if max_pages is not None and pages >= max_pages:
                _logger.debug(f"Page cap ({max_pages}) reached for {endpoint}")
                break

            data = await self._get_json(next_endpoint, next_params) or {}
            pages += 1

            for raw in data.get(item_key) or []:
                item = transform(raw) if transform else raw
                if item is None:
                    continue
                items.append(item)
                if limit is not None and len(items) >= limit:
                    return items

            next_endpoint = (data.get("links") or {}).get("next")
            next_params = None

        return items

    async def _soft_get(
        self,
        endpoint: str,
        params: QueryParams = None,
        *,
        description: str,
    ) -> Optional[Any]:
        try:
            return await self._get_json(endpoint, params)
        except HederaKitError as e:
            _logger.error(f"Error fetching {description}: {e}")
            return None

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def request_account(self, account_id: str) -> AccountResponse:
        """
        Fetch account information.

        Raises:
            QueryFailureError: If the account cannot be retrieved
        """
        _logger.debug(f"Requesting account info for {account_id}")
        data = await self._get_json(f"/api/v1/accounts/{account_id}")
        if not data:
            raise QueryFailureError(
                f"No data received for account {account_id}", account_id=account_id
            )
        try:
            return AccountResponse.model_validate(data)
        except PydanticValidationError as e:
            raise QueryFailureError(
                f"Unexpected account payload for {account_id}: {e}",
                retryable=False,
                account_id=account_id,
            ) from e

    async def get_public_key(self, account_id: str) -> PublicKey:
        """
        Current single public key of an account.

        Raises:
            QueryFailureError: If the account is missing or its key is a key list
        """
        _logger.info(f"Getting public key for account {account_id}")
        account = await self.request_account(account_id)
        if account.key is None:
            raise QueryFailureError(
                f"No public key found for account {account_id}", account_id=account_id
            )
        try:
            return PublicKey.from_mirror(account.key.key_type, account.key.key)
        except HederaKitError as e:
            raise QueryFailureError(
                f"Account {account_id} key cannot be used as a public key: {e.message}",
                retryable=False,
                account_id=account_id,
            ) from e

    async def get_account_memo(self, account_id: str) -> Optional[str]:
        try:
            account = await self.request_account(account_id)
        except HederaKitError as e:
            _logger.error(f"Error getting account memo for {account_id}: {e}")
            return None
        return account.memo

    async def get_account_balance(self, account_id: str) -> Optional[float]:
        """HBAR balance (not tinybars), or None."""
        try:
            account = await self.request_account(account_id)
        except HederaKitError as e:
            _logger.error(f"Error getting balance for {account_id}: {e}")
            return None
        if account.balance is None:
            return None
        return account.balance.balance / 100_000_000

    async def get_account_tokens(
        self,
        account_id: str,
        limit: int = 100,
    ) -> Optional[List[TokenBalance]]:
        """Token balances, at most ``limit`` entries over at most 10 pages."""
        _logger.info(f"Getting tokens for account {account_id}")
        try:
            return await self._paginate(
                f"/api/v1/accounts/{account_id}/tokens",
                "tokens",
                {"limit": limit},
                limit=limit,
                max_pages=DEFAULT_PAGE_CAP,
                transform=lambda raw: TokenBalance.model_validate(raw),
            )
        except (HederaKitError, PydanticValidationError) as e:
            _logger.error(f"Error fetching tokens for account {account_id}: {e}")
            return None

    async def get_account_nfts(
        self,
        account_id: str,
        token_id: Optional[str] = None,
        limit: int = 100,
    ) -> Optional[List[NftDetail]]:
        """NFTs owned by an account with metadata decoded into ``token_uri``."""
        _logger.info(
            f"Getting NFTs for account {account_id}"
            + (f" for token {token_id}" if token_id else "")
        )
        params: Dict[str, Any] = {"limit": limit}
        if token_id:
            params["token.id"] = token_id
        try:
            return await self._paginate(
                f"/api/v1/accounts/{account_id}/nfts",
                "nfts",
                params,
                max_pages=DEFAULT_PAGE_CAP,
                transform=_decode_nft,
            )
        except HederaKitError as e:
            _logger.error(f"Error fetching NFTs for account {account_id}: {e}")
            return None

    async def validate_nft_ownership(
        self,
        account_id: str,
        token_id: str,
        serial_number: int,
    ) -> Optional[NftDetail]:
        """The NFT if ``account_id`` owns serial ``serial_number`` of ``token_id``."""
        nfts = await self.get_account_nfts(account_id, token_id)
        for nft in nfts or []:
            if nft.token_id == token_id and nft.serial_number == serial_number:
                return nft
        return None

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def get_topic_info(self, topic_id: str) -> TopicResponse:
        """
        Raises:
            QueryFailureError: If the topic cannot be retrieved
        """
        data = await self._get_json(f"/api/v1/topics/{topic_id}")
        try:
            return TopicResponse.model_validate(data)
        except PydanticValidationError as e:
            raise QueryFailureError(
                f"Unexpected topic payload for {topic_id}: {e}",
                retryable=False,
            ) from e

    async def get_topic_fees(self, topic_id: str) -> Optional[Dict[str, Any]]:
        try:
            topic = await self.get_topic_info(topic_id)
        except HederaKitError as e:
            _logger.error(f"Error getting topic fees for {topic_id}: {e}")
            return None
        return topic.custom_fees

    async def get_topic_messages(
        self,
        topic_id: str,
        *,
        sequence_number: Union[int, str, None] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[TopicMessage]:
        """
        Every message of a topic, following all pages.

        ``sequence_number`` without an operator means ``gt:``. ``limit``
        is the page size sent to the mirror node.

        Raises:
            QueryFailureError: If any page cannot be fetched
        """
        params: Dict[str, Any] = {}
        if sequence_number is not None:
            seq = str(sequence_number)
            params["sequencenumber"] = seq if seq.startswith(SEQUENCE_OPERATORS) else f"gt:{seq}"
        if limit:
            params["limit"] = limit
        if order:
            params["order"] = order

        try:
            return await self._paginate(
                f"/api/v1/topics/{topic_id}/messages",
                "messages",
                params or None,
                transform=decode_topic_message,
            )
        except QueryFailureError as e:
            _logger.error(f"Error querying topic messages for topic {topic_id} after retries: {e}")
            raise

    async def get_topic_messages_by_filter(
        self,
        topic_id: str,
        *,
        sequence_number: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> Optional[List[TopicMessage]]:
        """
        Filtered messages, at most ``limit`` over at most 10 pages.

        Returns None when a page cannot be fetched.
        """
        params: List[Tuple[str, Any]] = []
        if limit:
            params.append(("limit", limit))
        if sequence_number:
            params.append(("sequencenumber", sequence_number))
        if start_time:
            params.append(("timestamp", f"gte:{start_time}"))
        if end_time:
            params.append(("timestamp", f"lt:{end_time}"))
        if order:
            params.append(("order", order))

        try:
            return await self._paginate(
                f"/api/v1/topics/{topic_id}/messages",
                "messages",
                params or None,
                limit=limit,
                max_pages=DEFAULT_PAGE_CAP,
                transform=decode_topic_message,
            )
        except HederaKitError as e:
            _logger.error(f"Error querying filtered topic messages for {topic_id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Tokens and pricing
    # ------------------------------------------------------------------

    async def get_token_info(self, token_id: str) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            f"/api/v1/tokens/{token_id}", description=f"token info for {token_id}"
        )

    async def get_hbar_price(self, date: datetime) -> Optional[float]:
        """USD price of one HBAR at ``date``."""
        timestamp = f"{int(date.timestamp())}.000000000"
        data = await self._soft_get(
            "/api/v1/network/exchangerate",
            {"timestamp": timestamp},
            description="HBAR price",
        )
        rate = (data or {}).get("current_rate") or {}
        try:
            return rate["cent_equivalent"] / rate["hbar_equivalent"] / 100
        except (KeyError, TypeError, ZeroDivisionError):
            _logger.error("Exchange rate response missing current_rate")
            return None

    async def get_nft_info(self, token_id: str, serial_number: int) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            f"/api/v1/tokens/{token_id}/nfts/{serial_number}",
            description=f"NFT {token_id} SN {serial_number}",
        )

    async def get_nfts_by_token(
        self,
        token_id: str,
        *,
        account_id: Optional[str] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        serial_number: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        params: Dict[str, Any] = {}
        if account_id:
            params["account.id"] = account_id
        if limit:
            params["limit"] = limit
        if order:
            params["order"] = order
        if serial_number:
            params["serialnumber"] = serial_number
        data = await self._soft_get(
            f"/api/v1/tokens/{token_id}/nfts",
            params or None,
            description=f"NFTs for token {token_id}",
        )
        return None if data is None else data.get("nfts", [])

    # ------------------------------------------------------------------
    # Schedules and transactions
    # ------------------------------------------------------------------

    async def get_schedule_info(self, schedule_id: str) -> Optional[ScheduleInfo]:
        _logger.info(f"Getting information for scheduled transaction {schedule_id}")
        data = await self._soft_get(
            f"/api/v1/schedules/{schedule_id}",
            description=f"schedule info for {schedule_id}",
        )
        if not data:
            return None
        try:
            return ScheduleInfo.model_validate(data)
        except PydanticValidationError as e:
            _logger.error(f"Unexpected schedule payload for {schedule_id}: {e}")
            return None

    async def get_scheduled_transaction_status(self, schedule_id: str) -> ScheduleStatus:
        """
        Raises:
            QueryFailureError: If the schedule cannot be found
        """
        info = await self.get_schedule_info(schedule_id)
        if info is None:
            raise QueryFailureError(
                f"Schedule {schedule_id} not found", retryable=False, schedule_id=schedule_id
            )
        return ScheduleStatus(
            executed=bool(info.executed_timestamp),
            executed_date=timestamp_to_datetime(info.executed_timestamp),
            deleted=info.deleted,
        )

    async def get_transaction(self, transaction_id_or_hash: str) -> Optional[Dict[str, Any]]:
        """First transaction record for an id or hash."""
        data = await self._soft_get(
            f"/api/v1/transactions/{transaction_id_or_hash}",
            description=f"transaction {transaction_id_or_hash}",
        )
        transactions = (data or {}).get("transactions") or []
        if not transactions:
            _logger.warning(f"No transaction details found for {transaction_id_or_hash}")
            return None
        return transactions[0]

    async def get_transaction_by_timestamp(self, timestamp: str) -> List[Dict[str, Any]]:
        data = await self._soft_get(
            "/api/v1/transactions",
            {"timestamp": timestamp, "limit": 1},
            description=f"transaction at {timestamp}",
        )
        return (data or {}).get("transactions") or []

    # ------------------------------------------------------------------
    # Airdrops
    # ------------------------------------------------------------------

    async def get_outstanding_token_airdrops(
        self,
        account_id: str,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        receiver_id: Optional[str] = None,
        serial_number: Optional[str] = None,
        token_id: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Airdrops sent by ``account_id`` that are not yet claimed."""
        params = _compact(
            {
                "limit": limit,
                "order": order,
                "receiver.id": receiver_id,
                "serialnumber": serial_number,
                "token.id": token_id,
            }
        )
        data = await self._soft_get(
            f"/api/v1/accounts/{account_id}/airdrops/outstanding",
            params or None,
            description=f"outstanding airdrops for {account_id}",
        )
        return None if data is None else data.get("airdrops", [])

    async def get_pending_token_airdrops(
        self,
        account_id: str,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        sender_id: Optional[str] = None,
        serial_number: Optional[str] = None,
        token_id: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Airdrops waiting for ``account_id`` to claim."""
        params = _compact(
            {
                "limit": limit,
                "order": order,
                "sender.id": sender_id,
                "serialnumber": serial_number,
                "token.id": token_id,
            }
        )
        data = await self._soft_get(
            f"/api/v1/accounts/{account_id}/airdrops/pending",
            params or None,
            description=f"pending airdrops for {account_id}",
        )
        return None if data is None else data.get("airdrops", [])

    # ------------------------------------------------------------------
    # Blocks and contracts
    # ------------------------------------------------------------------

    async def get_blocks(
        self,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        timestamp: Optional[str] = None,
        block_number: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        params = _compact(
            {"limit": limit, "order": order, "timestamp": timestamp, "block.number": block_number}
        )
        data = await self._soft_get("/api/v1/blocks", params or None, description="blocks")
        return None if data is None else data.get("blocks", [])

    async def get_block(self, block_number_or_hash: str) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            f"/api/v1/blocks/{block_number_or_hash}",
            description=f"block {block_number_or_hash}",
        )

    async def get_contract(
        self,
        contract_id_or_address: str,
        timestamp: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            f"/api/v1/contracts/{contract_id_or_address}",
            _compact({"timestamp": timestamp}) or None,
            description=f"contract {contract_id_or_address}",
        )

    async def get_contract_results(
        self,
        contract_id_or_address: Optional[str] = None,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        timestamp: Optional[str] = None,
        from_address: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Contract call results, for one contract or network wide."""
        endpoint = (
            f"/api/v1/contracts/{contract_id_or_address}/results"
            if contract_id_or_address
            else "/api/v1/contracts/results"
        )
        params = _compact(
            {"limit": limit, "order": order, "timestamp": timestamp, "from": from_address}
        )
        data = await self._soft_get(endpoint, params or None, description="contract results")
        return None if data is None else data.get("results", [])

    async def get_contract_state(
        self,
        contract_id_or_address: str,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        slot: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        params = _compact({"limit": limit, "order": order, "slot": slot, "timestamp": timestamp})
        data = await self._soft_get(
            f"/api/v1/contracts/{contract_id_or_address}/state",
            params or None,
            description=f"contract state for {contract_id_or_address}",
        )
        return None if data is None else data.get("state", [])

    async def get_contract_logs(
        self,
        contract_id_or_address: Optional[str] = None,
        *,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        timestamp: Optional[str] = None,
        topic0: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        endpoint = (
            f"/api/v1/contracts/{contract_id_or_address}/results/logs"
            if contract_id_or_address
            else "/api/v1/contracts/results/logs"
        )
        params = _compact(
            {"limit": limit, "order": order, "timestamp": timestamp, "topic0": topic0}
        )
        data = await self._soft_get(endpoint, params or None, description="contract logs")
        return None if data is None else data.get("logs", [])

    async def get_contracts(
        self,
        *,
        contract_id: Optional[str] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        params = _compact({"contract.id": contract_id, "limit": limit, "order": order})
        data = await self._soft_get("/api/v1/contracts", params or None, description="contracts")
        return None if data is None else data.get("contracts", [])

    async def get_contract_result(
        self,
        transaction_id_or_hash: str,
        nonce: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """Result of the contract call made by one transaction."""
        return await self._soft_get(
            f"/api/v1/contracts/results/{transaction_id_or_hash}",
            _compact({"nonce": nonce}) or None,
            description=f"contract result for {transaction_id_or_hash}",
        )

    async def get_contract_actions(
        self,
        transaction_id_or_hash: str,
        *,
        index: Optional[str] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Internal calls and creates performed by one contract transaction."""
        params = _compact({"index": index, "limit": limit, "order": order})
        data = await self._soft_get(
            f"/api/v1/contracts/results/{transaction_id_or_hash}/actions",
            params or None,
            description=f"contract actions for {transaction_id_or_hash}",
        )
        return None if data is None else data.get("actions", [])

    async def read_contract(
        self,
        contract_id_or_address: str,
        function_selector: str,
        payer_account_id: str,
        *,
        estimate: bool = False,
        block: str = "latest",
        value: int = 0,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Read-only contract call through ``POST /api/v1/contracts/call``.

        Entity ids are sent as long-zero EVM addresses. Returns None when
        the call fails.

        Example:
            ```python
            result = await mirror.read_contract(
                "0.0.5005", function_selector("balanceOf(address)") + padded, "0.0.100"
            )
            ```
        """
        _logger.info(
            f"Reading smart contract {contract_id_or_address} with selector {function_selector}"
        )
        try:
            body = _compact(
                {
                    "block": block,
                    "data": function_selector,
                    "estimate": estimate,
                    "from": entity_id_to_evm_address(payer_account_id, "payer_account_id"),
                    "to": entity_id_to_evm_address(contract_id_or_address, "contract_id"),
                    "gas": gas,
                    "gasPrice": gas_price,
                    "value": value,
                }
            )
            return await self._post_json("/api/v1/contracts/call", body)
        except HederaKitError as e:
            _logger.error(f"Error reading smart contract {contract_id_or_address}: {e}")
            return None

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    async def get_network_info(self) -> Optional[Dict[str, Any]]:
        return await self._soft_get("/api/v1/network/nodes", description="network nodes")

    async def get_network_fees(self, timestamp: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            "/api/v1/network/fees",
            _compact({"timestamp": timestamp}) or None,
            description="network fees",
        )

    async def get_network_supply(self, timestamp: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            "/api/v1/network/supply",
            _compact({"timestamp": timestamp}) or None,
            description="network supply",
        )

    async def get_network_stake(self, timestamp: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return await self._soft_get(
            "/api/v1/network/stake",
            _compact({"timestamp": timestamp}) or None,
            description="network stake",
        )

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def check_key_list_access(
        self,
        key: Union[bytes, str, Key],
        public_key: PublicKey,
    ) -> bool:
        """
        Whether ``public_key`` is a member of an encoded key structure.

        Any matching member authorizes, whatever the threshold.

        Raises:
            InvalidKeyFormatError: If ``key`` cannot be decoded
        """
        if isinstance(key, (bytes, str)):
            key = decode_key(key)
        return evaluate_key_access(key, public_key)


def _compact(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}
