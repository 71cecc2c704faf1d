"""
Pending Transaction Model

In-progress ledger operations. A PendingTransaction is mutable until it
is frozen; freezing fixes the payer (through the transaction id) and the
target nodes, after which only signatures may be added.
"""

from __future__ import annotations

import base64
import json
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from hederakit.errors import IllegalStateError, ValidationError
from hederakit.keys.types import KeyList, PrivateKey, PublicKey, key_to_dict
from hederakit.utils.validation import validate_account_id


TRANSACTION_ID_PATTERN = re.compile(r"^(\d+\.\d+\.\d+)@(\d+)\.(\d+)$")
TRANSACTION_VALID_DURATION_SECONDS = 120


class TransactionKind(str, Enum):
    """Ledger operation carried by a PendingTransaction."""

    # Accounts
    ACCOUNT_CREATE = "AccountCreate"
    CRYPTO_TRANSFER = "CryptoTransfer"
    ACCOUNT_UPDATE = "AccountUpdate"
    ACCOUNT_DELETE = "AccountDelete"
    ACCOUNT_ALLOWANCE_APPROVE = "AccountAllowanceApprove"
    # Schedules
    SCHEDULE_CREATE = "ScheduleCreate"
    SCHEDULE_SIGN = "ScheduleSign"
    # Tokens
    TOKEN_CREATE = "TokenCreate"
    TOKEN_MINT = "TokenMint"
    TOKEN_BURN = "TokenBurn"
    TOKEN_ASSOCIATE = "TokenAssociate"
    TOKEN_DISSOCIATE = "TokenDissociate"
    TOKEN_WIPE = "TokenWipe"
    TOKEN_FREEZE = "TokenFreeze"
    TOKEN_UNFREEZE = "TokenUnfreeze"
    TOKEN_GRANT_KYC = "TokenGrantKyc"
    TOKEN_REVOKE_KYC = "TokenRevokeKyc"
    TOKEN_PAUSE = "TokenPause"
    TOKEN_UNPAUSE = "TokenUnpause"
    TOKEN_UPDATE = "TokenUpdate"
    TOKEN_DELETE = "TokenDelete"
    TOKEN_FEE_SCHEDULE_UPDATE = "TokenFeeScheduleUpdate"
    TOKEN_AIRDROP = "TokenAirdrop"
    TOKEN_CLAIM_AIRDROP = "TokenClaimAirdrop"
    TOKEN_CANCEL_AIRDROP = "TokenCancelAirdrop"
    TOKEN_REJECT = "TokenReject"
    # Topics
    TOPIC_CREATE = "TopicCreate"
    TOPIC_UPDATE = "TopicUpdate"
    TOPIC_DELETE = "TopicDelete"
    TOPIC_MESSAGE_SUBMIT = "TopicMessageSubmit"
    # Contracts
    CONTRACT_CREATE = "ContractCreate"
    CONTRACT_EXECUTE = "ContractExecute"
    CONTRACT_UPDATE = "ContractUpdate"
    CONTRACT_DELETE = "ContractDelete"


# ============================================================================
# Transaction ids
# ============================================================================


@dataclass(frozen=True)
class TransactionId:
    """
    Payer account plus valid-start timestamp, ``0.0.x@seconds.nanos``.
    """

    account_id: str
    valid_start_seconds: int
    valid_start_nanos: int = 0

    @classmethod
    def generate(cls, account_id: str) -> "TransactionId":
        """New id for ``account_id`` starting now."""
        account_id = validate_account_id(account_id)
        now_ns = time.time_ns()
        return cls(account_id, now_ns // 1_000_000_000, now_ns % 1_000_000_000)

    @classmethod
    def from_string(cls, value: str) -> "TransactionId":
        """
        Parse ``0.0.x@seconds.nanos``.

        Raises:
            ValidationError: If the string is malformed
        """
        match = TRANSACTION_ID_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if not match:
            raise ValidationError(
                f"Invalid transaction id '{value}'",
                field="transaction_id",
                value=value,
            )
        return cls(match.group(1), int(match.group(2)), int(match.group(3)))

    def __str__(self) -> str:
        return f"{self.account_id}@{self.valid_start_seconds}.{self.valid_start_nanos:09d}"


# ============================================================================
# Pending transactions
# ============================================================================


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (PublicKey, PrivateKey, KeyList)):
        return key_to_dict(value)
    if isinstance(value, PendingTransaction):
        return value.to_dict(include_signatures=False)
    if isinstance(value, TransactionId):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


@dataclass
class PendingTransaction:
    """
    A ledger operation under construction.

    ``body`` holds the operation-specific fields in snake_case. Key fields
    always hold public material.

    Example:
        ```python
        tx = PendingTransaction(TransactionKind.TOKEN_MINT, {"token_id": "0.0.5", "amount": 10})
        tx.set_memo("restock")
        tx.freeze_with("0.0.1001", ["0.0.3"])
        tx.set_memo("late")  # raises IllegalStateError
        ```
    """

    kind: TransactionKind
    body: Dict[str, Any] = field(default_factory=dict)
    memo: Optional[str] = None
    transaction_id: Optional[TransactionId] = None
    node_account_ids: List[str] = field(default_factory=list)
    signatures: Dict[str, str] = field(default_factory=dict)
    _frozen: bool = field(default=False, repr=False)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _require_unfrozen(self, operation: str) -> None:
        if self._frozen:
            raise IllegalStateError(
                f"Cannot {operation}: transaction is frozen",
                operation=operation,
            )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_memo(self, memo: str) -> "PendingTransaction":
        self._require_unfrozen("set memo")
        self.memo = memo
        return self

    def set_transaction_id(self, transaction_id: TransactionId) -> "PendingTransaction":
        self._require_unfrozen("set transaction id")
        self.transaction_id = transaction_id
        return self

    def set_node_account_ids(self, node_account_ids: Sequence[str]) -> "PendingTransaction":
        self._require_unfrozen("set node account ids")
        self.node_account_ids = [validate_account_id(n, "node_account_id") for n in node_account_ids]
        return self

    def set_field(self, name: str, value: Any) -> "PendingTransaction":
        self._require_unfrozen(f"set {name}")
        self.body[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.body.get(name, default)

    # ------------------------------------------------------------------
    # Freezing and signing
    # ------------------------------------------------------------------

    def freeze_with(
        self,
        payer_account_id: Optional[str],
        node_account_ids: Sequence[str] = (),
    ) -> "PendingTransaction":
        """
        Freeze the transaction.

        A transaction id is generated for ``payer_account_id`` unless one
        is already set. Node ids are only filled when none were chosen.

        Raises:
            IllegalStateError: If there is neither a transaction id nor a payer
        """
        if self._frozen:
            return self
        if self.transaction_id is None:
            if not payer_account_id:
                raise IllegalStateError(
                    "Cannot freeze: no transaction id and no payer account",
                    operation="freeze",
                )
            self.transaction_id = TransactionId.generate(payer_account_id)
        if not self.node_account_ids:
            self.node_account_ids = list(node_account_ids)
        self._frozen = True
        return self

    def add_signature(self, public_key: PublicKey, signature: bytes) -> "PendingTransaction":
        """Attach a signature. Allowed only once frozen."""
        if not self._frozen:
            raise IllegalStateError(
                "Cannot sign: transaction must be frozen first",
                operation="sign",
            )
        self.signatures[public_key.to_string_der()] = signature.hex()
        return self

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self, include_signatures: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "body": _to_jsonable(self.body),
            "memo": self.memo,
            "transaction_id": str(self.transaction_id) if self.transaction_id else None,
            "node_account_ids": list(self.node_account_ids),
            "valid_duration": TRANSACTION_VALID_DURATION_SECONDS,
        }
        if include_signatures:
            data["signatures"] = dict(self.signatures)
        return data

    def body_bytes(self) -> bytes:
        """Canonical bytes that signatures cover."""
        return json.dumps(
            self.to_dict(include_signatures=False),
            sort_keys=True,
            separators=(",", ":"),
        ).encode()

    def to_bytes(self) -> bytes:
        """Transport form including signatures."""
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
        ).encode()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_bytes(cls, data: bytes) -> "PendingTransaction":
        """
        Rebuild a transaction from ``to_bytes`` output.

        Body values come back in their structured (JSON) form. A payload
        carrying a transaction id and node ids comes back frozen.

        Raises:
            ValidationError: If the payload is not a serialized transaction
        """
        try:
            payload = json.loads(data)
            kind = TransactionKind(payload["kind"])
        except (ValueError, KeyError, TypeError) as e:
            raise ValidationError(f"Not a serialized transaction: {e}") from None

        tx_id = payload.get("transaction_id")
        tx = cls(
            kind=kind,
            body=payload.get("body") or {},
            memo=payload.get("memo"),
            transaction_id=TransactionId.from_string(tx_id) if tx_id else None,
            node_account_ids=list(payload.get("node_account_ids") or []),
            signatures=dict(payload.get("signatures") or {}),
        )
        tx._frozen = bool(tx.transaction_id and tx.node_account_ids)
        return tx

    @classmethod
    def from_base64(cls, data: str) -> "PendingTransaction":
        return cls.from_bytes(base64.b64decode(data))
