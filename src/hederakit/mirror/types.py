"""
Mirror Node Types

Pydantic models for the mirror-node REST responses the kit relies on.
Unknown fields are preserved (``extra="allow"``) so callers can reach
data the models do not name.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def timestamp_to_datetime(timestamp: Optional[str]) -> Optional[datetime]:
    """Convert a ``seconds.nanos`` consensus timestamp to an aware datetime."""
    if not timestamp:
        return None
    seconds, _, nanos = str(timestamp).partition(".")
    value = int(seconds) + int(nanos or 0) / 1_000_000_000
    return datetime.fromtimestamp(value, tz=timezone.utc)


# ============================================================================
# Common
# ============================================================================


class Links(BaseModel):
    """Pagination links."""

    next: Optional[str] = None


class KeyInfo(BaseModel):
    """Key as reported by the mirror node: ``{"_type": ..., "key": ...}``."""

    model_config = ConfigDict(populate_by_name=True)

    key_type: str = Field(alias="_type", description="ED25519, ECDSA_SECP256K1 or ProtobufEncoded")
    key: str = Field(description="Hex encoded key bytes")


# ============================================================================
# Accounts
# ============================================================================


class TokenBalance(BaseModel):
    """Token balance held by an account."""

    model_config = ConfigDict(extra="allow")

    token_id: str
    balance: int = 0
    decimals: Optional[int] = None
    automatic_association: Optional[bool] = None
    freeze_status: Optional[str] = None
    kyc_status: Optional[str] = None


class AccountBalance(BaseModel):
    """HBAR balance (tinybars) with token balances."""

    model_config = ConfigDict(extra="allow")

    balance: int = 0
    timestamp: Optional[str] = None
    tokens: List[TokenBalance] = Field(default_factory=list)


class AccountResponse(BaseModel):
    """``/api/v1/accounts/{id}``"""

    model_config = ConfigDict(extra="allow")

    account: str
    alias: Optional[str] = None
    balance: Optional[AccountBalance] = None
    deleted: bool = False
    evm_address: Optional[str] = None
    key: Optional[KeyInfo] = None
    memo: Optional[str] = None
    max_automatic_token_associations: Optional[int] = None


class NftDetail(BaseModel):
    """An NFT owned by an account; ``token_uri`` is the decoded metadata."""

    model_config = ConfigDict(extra="allow")

    account_id: Optional[str] = None
    token_id: str
    serial_number: int
    metadata: Optional[str] = None
    token_uri: Optional[str] = None
    deleted: bool = False
    created_timestamp: Optional[str] = None


# ============================================================================
# Topics
# ============================================================================


class TopicResponse(BaseModel):
    """``/api/v1/topics/{id}``"""

    model_config = ConfigDict(extra="allow")

    topic_id: str
    memo: Optional[str] = None
    admin_key: Optional[KeyInfo] = None
    submit_key: Optional[KeyInfo] = None
    auto_renew_account: Optional[str] = None
    auto_renew_period: Optional[int] = None
    custom_fees: Optional[Dict[str, Any]] = None
    fee_exempt_key_list: List[KeyInfo] = Field(default_factory=list)
    deleted: bool = False


class TopicMessage(BaseModel):
    """
    A decoded topic message.

    ``content`` holds the parsed JSON payload, or the raw text when the
    payload is not JSON (``is_json`` tells which). ``raw_content`` always
    holds the UTF-8 text.
    """

    consensus_timestamp: str
    sequence_number: int
    payer_account_id: Optional[str] = None
    topic_id: Optional[str] = None
    running_hash: Optional[str] = None
    running_hash_version: Optional[int] = None
    chunk_info: Dict[str, Any] = Field(default_factory=dict)
    content: Any = None
    raw_content: str = ""
    is_json: bool = False
    created: Optional[datetime] = None


# ============================================================================
# Schedules
# ============================================================================


class ScheduleInfo(BaseModel):
    """``/api/v1/schedules/{id}``"""

    model_config = ConfigDict(extra="allow")

    schedule_id: str
    admin_key: Optional[KeyInfo] = None
    consensus_timestamp: Optional[str] = None
    creator_account_id: Optional[str] = None
    payer_account_id: Optional[str] = None
    deleted: bool = False
    executed_timestamp: Optional[str] = None
    expiration_time: Optional[str] = None
    memo: Optional[str] = None
    transaction_body: Optional[str] = None
    signatures: List[Dict[str, Any]] = Field(default_factory=list)


class ScheduleStatus(BaseModel):
    """Execution state of a scheduled transaction."""

    executed: bool
    executed_date: Optional[datetime] = None
    deleted: bool = False
