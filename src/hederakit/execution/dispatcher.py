"""
Mode Dispatcher

Decides, per invocation, whether a constructed transaction is executed
now, wrapped in a schedule, or handed back as unsigned bytes:

    agent mode   never-schedule  per-call override  auto-schedule  outcome
    autonomous   any             any                any            EXECUTE_NOW
    returnBytes  True            any                any            RETURN_BYTES
    returnBytes  False           True               any            CREATE_SCHEDULE
    returnBytes  False           False              any            RETURN_BYTES
    returnBytes  False           unset              True           CREATE_SCHEDULE
    returnBytes  False           unset              False          RETURN_BYTES

Operations that need several transactions are refused in returnBytes
mode before anything is constructed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
)

from pydantic import BaseModel, ConfigDict, Field

from hederakit.builders.base import apply_transaction_options
from hederakit.builders.defaults import ParameterDefault, apply_parameter_defaults
from hederakit.config import OperationalMode
from hederakit.errors import HederaKitError
from hederakit.keys.resolver import KeyResolver
from hederakit.transactions.results import (
    BuiltTransaction,
    ExecutionOptions,
    ExecutionResult,
    Notes,
)
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import validate_account_id

if TYPE_CHECKING:
    from hederakit.agent import HederaAgentKit

_logger = get_logger(__name__)

SCHEDULE_CREATE_OP = "schedule_create"


# ============================================================================
# Outcome selection
# ============================================================================


class DispatchOutcome(str, Enum):
    EXECUTE_NOW = "execute_now"
    CREATE_SCHEDULE = "create_schedule"
    RETURN_BYTES = "return_bytes"


def select_outcome(
    mode: Union[OperationalMode, str],
    never_schedule: bool,
    schedule_override: Optional[bool],
    auto_schedule_in_bytes_mode: bool,
) -> DispatchOutcome:
    """
    Pick the outcome for one invocation.

    Args:
        mode: Agent operational mode
        never_schedule: Operation must never be wrapped in a schedule
        schedule_override: Per-call ``schedule`` flag (None when not given)
        auto_schedule_in_bytes_mode: Kit-wide default for returnBytes mode

    Example:
        >>> select_outcome("returnBytes", False, None, True)
        <DispatchOutcome.CREATE_SCHEDULE: 'create_schedule'>
    """
    if OperationalMode(mode) is OperationalMode.AUTONOMOUS:
        return DispatchOutcome.EXECUTE_NOW
    if never_schedule:
        return DispatchOutcome.RETURN_BYTES
    if schedule_override is None:
        should_schedule = auto_schedule_in_bytes_mode
    else:
        should_schedule = schedule_override
    return DispatchOutcome.CREATE_SCHEDULE if should_schedule else DispatchOutcome.RETURN_BYTES


# ============================================================================
# Operation and option types
# ============================================================================

BuildFn = Callable[["HederaAgentKit", Dict[str, Any]], Awaitable[BuiltTransaction]]


@dataclass(frozen=True)
class TransactionOperation:
    """
    A named, dispatchable transaction construction.

    Args:
        name: Operation name used in logs and descriptions
        build: Coroutine building the transaction from parameters
        never_schedule: Never wrap in a schedule (always bytes in returnBytes mode)
        requires_multiple_transactions: Refused in returnBytes mode
        parameter_defaults: Optional parameters filled in before building
    """

    name: str
    build: BuildFn
    never_schedule: bool = False
    requires_multiple_transactions: bool = False
    parameter_defaults: Tuple[ParameterDefault, ...] = ()


class MetaOptions(BaseModel):
    """Per-call options that accompany an operation's own parameters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    transaction_memo: Optional[str] = Field(
        default=None,
        description="Memo for the transaction",
    )
    transaction_id: Optional[str] = Field(
        default=None,
        description="Pre-generated transaction id (account@seconds.nanos)",
    )
    node_account_ids: Optional[List[str]] = Field(
        default=None,
        description="Node account ids to target",
    )
    schedule: Optional[bool] = Field(
        default=None,
        description="Schedule the transaction; None defers to the kit setting",
    )
    schedule_memo: Optional[str] = Field(
        default=None,
        description="Memo for the schedule entity",
    )
    schedule_payer_account_id: Optional[str] = Field(
        default=None,
        description="Payer for the schedule-create",
    )
    schedule_admin_key: Optional[str] = Field(
        default=None,
        description="Admin key for the schedule-create (key string or current_signer)",
    )


@dataclass
class DispatchResult:
    """
    Caller-facing result of one dispatched operation.

    Only the fields relevant to ``outcome`` are set; ``to_dict`` omits the
    rest. ``notes`` are always present.
    """

    success: bool
    outcome: Optional[DispatchOutcome] = None
    notes: Notes = field(default_factory=Notes)
    error: Optional[str] = None
    requires_autonomous: Optional[bool] = None
    receipt: Optional[Dict[str, Any]] = None
    transaction_id: Optional[str] = None
    schedule_id: Optional[str] = None
    transaction_bytes: Optional[str] = None
    op: Optional[str] = None
    description: Optional[str] = None
    payer_account_id_scheduled_tx: Optional[str] = None
    memo_scheduled_tx: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        for name in (
            "op",
            "error",
            "requires_autonomous",
            "receipt",
            "transaction_id",
            "schedule_id",
            "transaction_bytes",
            "description",
            "payer_account_id_scheduled_tx",
            "memo_scheduled_tx",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data["notes"] = self.notes.as_list()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_execution(cls, result: ExecutionResult, notes: Notes) -> "DispatchResult":
        return cls(
            success=result.success,
            outcome=DispatchOutcome.EXECUTE_NOW,
            notes=notes,
            error=result.error,
            receipt=result.receipt.to_dict() if result.receipt is not None else None,
            transaction_id=result.transaction_id,
            schedule_id=result.schedule_id,
        )


# ============================================================================
# Dispatcher
# ============================================================================


class ModeDispatcher:
    """
    Runs operations according to the agent's operational mode.

    Args:
        kit: Agent kit providing the context, builders and engine

    Example:
        ```python
        result = await kit.dispatcher.run(
            OPERATIONS["hedera-hts-create-fungible-token"],
            {"token_name": "GameGold"},
        )
        print(result.to_json())
        ```
    """

    def __init__(self, kit: "HederaAgentKit") -> None:
        self._kit = kit

    async def run(
        self,
        operation: TransactionOperation,
        params: Optional[Dict[str, Any]] = None,
        meta: Optional[Union[MetaOptions, Dict[str, Any]]] = None,
    ) -> DispatchResult:
        """
        Build ``operation`` from ``params`` and dispatch it.

        Construction failures are returned as ``success=False`` results,
        with whatever Notes had been produced.
        """
        context = self._kit.context
        if meta is None:
            meta = MetaOptions()
        elif isinstance(meta, dict):
            meta = MetaOptions.model_validate(meta)

        filled, notes = apply_parameter_defaults(params or {}, operation.parameter_defaults)

        if operation.requires_multiple_transactions and context.is_return_bytes:
            message = (
                f"The {operation.name} tool requires multiple transactions and cannot be used "
                "in returnBytes mode. Please use autonomous mode or break down the operation "
                "into individual steps."
            )
            _logger.warning(message)
            return DispatchResult(
                success=False,
                error=message,
                requires_autonomous=True,
                notes=notes,
            )

        _logger.info(
            f"Executing {operation.name}",
            extra={"operation": operation.name, "mode": context.operational_mode.value},
        )
        try:
            built = await operation.build(self._kit, filled)
            notes.extend(built.notes)
            apply_transaction_options(
                built,
                memo=meta.transaction_memo,
                transaction_id=meta.transaction_id,
                node_account_ids=meta.node_account_ids,
            )
        except (HederaKitError, TypeError, ValueError) as e:
            _logger.error(f"Failed to build {operation.name}: {e}")
            return DispatchResult(success=False, error=str(e), notes=notes)

        outcome = select_outcome(
            context.operational_mode,
            operation.never_schedule,
            meta.schedule,
            context.schedule_user_transactions_in_bytes_mode,
        )

        if outcome is DispatchOutcome.EXECUTE_NOW:
            options = await self._schedule_options(meta, force=False)
            result = await self._kit.engine.execute(built.transaction, options, notes)
            return DispatchResult.from_execution(result, result.notes)

        if outcome is DispatchOutcome.CREATE_SCHEDULE:
            return await self._create_schedule(operation, built, meta, notes)

        return await self._return_bytes(operation, built, notes)

    async def _create_schedule(
        self,
        operation: TransactionOperation,
        built: BuiltTransaction,
        meta: MetaOptions,
        notes: Notes,
    ) -> DispatchResult:
        context = self._kit.context
        _logger.info(f"Preparing scheduled transaction for {operation.name}")

        options = await self._schedule_options(meta, force=True)
        options.schedule_payer_account_id = context.signer_account_id
        result = await self._kit.engine.execute(built.transaction, options, notes)

        if not (result.success and result.schedule_id):
            return DispatchResult(
                success=False,
                outcome=DispatchOutcome.CREATE_SCHEDULE,
                error=result.error or "Failed to create schedule and retrieve ID.",
                notes=result.notes,
            )

        description = meta.transaction_memo or f"Scheduled {operation.name} operation."
        if context.user_account_id:
            description += (
                f" User ({context.user_account_id}) will be payer of scheduled transaction."
            )
        return DispatchResult(
            success=True,
            outcome=DispatchOutcome.CREATE_SCHEDULE,
            notes=result.notes,
            op=SCHEDULE_CREATE_OP,
            schedule_id=result.schedule_id,
            description=description,
            payer_account_id_scheduled_tx=context.user_account_id or "unknown",
            memo_scheduled_tx=meta.transaction_memo,
        )

    async def _return_bytes(
        self,
        operation: TransactionOperation,
        built: BuiltTransaction,
        notes: Notes,
    ) -> DispatchResult:
        _logger.info(f"Returning transaction bytes for {operation.name}")
        transaction_bytes = await self._kit.engine.get_transaction_bytes(
            built.transaction, ExecutionOptions(), notes
        )
        transaction_id = built.transaction.transaction_id
        return DispatchResult(
            success=True,
            outcome=DispatchOutcome.RETURN_BYTES,
            notes=notes,
            transaction_bytes=transaction_bytes,
            transaction_id=str(transaction_id) if transaction_id is not None else None,
        )

    async def _schedule_options(self, meta: MetaOptions, force: bool) -> ExecutionOptions:
        options = ExecutionOptions()
        if not (force or meta.schedule):
            return options

        options.schedule = True
        options.schedule_memo = meta.schedule_memo
        if meta.schedule_payer_account_id:
            try:
                options.schedule_payer_account_id = validate_account_id(
                    meta.schedule_payer_account_id, "schedule_payer_account_id"
                )
            except HederaKitError:
                _logger.warning(
                    f"Invalid schedule_payer_account_id: {meta.schedule_payer_account_id}"
                )
        if meta.schedule_admin_key:
            try:
                options.schedule_admin_key = await KeyResolver(self._kit.signer).resolve(
                    meta.schedule_admin_key
                )
            except HederaKitError:
                _logger.warning("Invalid schedule_admin_key, ignoring.")
        return options
