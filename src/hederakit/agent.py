"""
HederaAgentKit - session entry point.

Owns the agent context, the mirror-node client, the execution engine and
the mode dispatcher, and hands out per-service builders.

Example:
    ```python
    from hederakit import HederaAgentKit, ServerSigner

    signer = ServerSigner("0.0.1001", private_key, "testnet", submitter=submitter)
    kit = HederaAgentKit(signer, operational_mode="returnBytes", user_account_id="0.0.100")

    built = await kit.hts().create_fungible_token({"token_name": "GameGold"})
    print(built.transaction.get("treasury_account_id"))  # 0.0.100
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from hederakit.builders.account import AccountBuilder
from hederakit.builders.hcs import HcsBuilder
from hederakit.builders.hts import HtsBuilder
from hederakit.builders.scs import ScsBuilder
from hederakit.config import KitSettings, MirrorNodeConfig, OperationalMode
from hederakit.context import AgentContext
from hederakit.errors import MissingRequiredFieldError
from hederakit.execution.dispatcher import ModeDispatcher
from hederakit.execution.engine import ExecutionEngine
from hederakit.keys.types import KeyType, PublicKey
from hederakit.mirror.client import MirrorNodeClient
from hederakit.signer.base import AbstractSigner, TransactionSubmitter
from hederakit.signer.server import ServerSigner
from hederakit.transactions.results import ExecutionResult
from hederakit.utils.logging import get_logger
from hederakit.utils.retry import RetryPolicy

_logger = get_logger(__name__)


@dataclass(frozen=True)
class Operator:
    """The agent's own identity."""

    account_id: str
    public_key: PublicKey


class HederaAgentKit:
    """
    Agent session.

    Args:
        signer: Identity that signs and pays in autonomous mode
        operational_mode: ``autonomous`` or ``returnBytes``
        user_account_id: End-user account the agent acts for
        schedule_user_transactions_in_bytes_mode: Schedule by default in
            returnBytes mode when a call does not say otherwise
        mirror_config: Custom mirror-node URL, API key or headers
        retry_policy: Retry settings for mirror-node queries

    When ``mirror_config`` or ``retry_policy`` is given, a dedicated mirror
    client is created and also installed on the signer, so signer key
    lookups use the same endpoint.
    """

    def __init__(
        self,
        signer: AbstractSigner,
        operational_mode: Union[OperationalMode, str] = OperationalMode.RETURN_BYTES,
        user_account_id: Optional[str] = None,
        schedule_user_transactions_in_bytes_mode: bool = True,
        mirror_config: Optional[MirrorNodeConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._signer = signer
        self._context = AgentContext(
            signer=signer,
            operational_mode=operational_mode,
            user_account_id=user_account_id,
            schedule_user_transactions_in_bytes_mode=schedule_user_transactions_in_bytes_mode,
        )

        if mirror_config is not None or retry_policy is not None:
            self._mirror = MirrorNodeClient(signer.get_network(), mirror_config, retry_policy)
            signer.mirror_node = self._mirror
        else:
            self._mirror = signer.mirror_node

        self._engine = ExecutionEngine(self._context, self._mirror)
        self._dispatcher = ModeDispatcher(self)

        _logger.info(
            "HederaAgentKit initialized",
            extra={
                "network": signer.get_network().value,
                "operator": signer.get_account_id(),
                "mode": self._context.operational_mode.value,
                "user_account_id": self._context.user_account_id,
            },
        )

    @classmethod
    def from_settings(
        cls,
        settings: KitSettings,
        submitter: TransactionSubmitter,
    ) -> "HederaAgentKit":
        """
        Build a kit from environment settings with a ServerSigner.

        Raises:
            MissingRequiredFieldError: If the account id or private key is missing
        """
        if not settings.account_id:
            raise MissingRequiredFieldError("account_id", message="HEDERA_ACCOUNT_ID is not set")
        if not settings.private_key:
            raise MissingRequiredFieldError("private_key", message="HEDERA_PRIVATE_KEY is not set")

        key_type = KeyType(settings.key_type.lower()) if settings.key_type else None
        signer = ServerSigner(
            settings.account_id,
            settings.private_key,
            settings.network,
            submitter=submitter,
            mirror_config=settings.mirror_node,
            key_type=key_type,
        )
        return cls(
            signer,
            operational_mode=settings.operational_mode,
            user_account_id=settings.user_account_id,
            schedule_user_transactions_in_bytes_mode=settings.schedule_user_transactions_in_bytes_mode,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def signer(self) -> AbstractSigner:
        return self._signer

    @property
    def context(self) -> AgentContext:
        return self._context

    @property
    def mirror_node(self) -> MirrorNodeClient:
        return self._mirror

    @property
    def engine(self) -> ExecutionEngine:
        return self._engine

    @property
    def dispatcher(self) -> ModeDispatcher:
        return self._dispatcher

    @property
    def operational_mode(self) -> OperationalMode:
        return self._context.operational_mode

    @property
    def user_account_id(self) -> Optional[str]:
        return self._context.user_account_id

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def accounts(self) -> AccountBuilder:
        return AccountBuilder(self._context, self._mirror)

    def hts(self) -> HtsBuilder:
        return HtsBuilder(self._context, self._mirror)

    def hcs(self) -> HcsBuilder:
        return HcsBuilder(self._context, self._mirror)

    def scs(self) -> ScsBuilder:
        return ScsBuilder(self._context, self._mirror)

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    async def get_operator(self) -> Operator:
        """
        Agent account id and its current public key.

        Raises:
            QueryFailureError: If the key cannot be retrieved
        """
        return Operator(
            account_id=self._signer.get_account_id(),
            public_key=await self._signer.get_public_key(),
        )

    async def sign_scheduled_transaction(
        self,
        schedule_id: str,
        memo: Optional[str] = None,
    ) -> ExecutionResult:
        """Add the agent's signature to an existing schedule and submit it."""
        built = self.accounts().prepare_schedule_sign(schedule_id, memo=memo)
        return await self._engine.execute(built.transaction, notes=built.notes)
