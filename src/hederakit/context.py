"""
Agent session context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from hederakit.config import Network, OperationalMode
from hederakit.utils.validation import validate_account_id

if TYPE_CHECKING:
    from hederakit.signer.base import AbstractSigner


@dataclass(frozen=True)
class AgentContext:
    """
    Immutable per-session settings shared by builders, engine and dispatcher.

    Args:
        signer: Identity that signs and pays in autonomous mode
        operational_mode: ``autonomous`` or ``returnBytes``
        user_account_id: End-user account the agent acts for, if any
        schedule_user_transactions_in_bytes_mode: Default to scheduling in
            returnBytes mode when a call does not say otherwise
    """

    signer: "AbstractSigner"
    operational_mode: OperationalMode = OperationalMode.RETURN_BYTES
    user_account_id: Optional[str] = None
    schedule_user_transactions_in_bytes_mode: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "operational_mode", OperationalMode(self.operational_mode))
        if self.user_account_id:
            object.__setattr__(
                self,
                "user_account_id",
                validate_account_id(self.user_account_id, "user_account_id"),
            )

    @property
    def network(self) -> Network:
        return self.signer.get_network()

    @property
    def signer_account_id(self) -> str:
        return self.signer.get_account_id()

    @property
    def is_return_bytes(self) -> bool:
        return self.operational_mode is OperationalMode.RETURN_BYTES
