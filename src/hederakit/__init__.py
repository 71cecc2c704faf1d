"""
hederakit - transaction lifecycle engine for ledger agents.

Lets an automated agent construct transactions, optionally wrap them in
schedules, and either submit them itself or hand back unsigned bytes for
an end user to sign. Ledger state is read through a resilient mirror-node
client.

Quick Start:
    >>> from hederakit import HederaAgentKit, ServerSigner
    >>> import asyncio
    >>>
    >>> async def main():
    ...     signer = ServerSigner("0.0.1001", private_key, "testnet", submitter=submitter)
    ...     kit = HederaAgentKit(signer, "returnBytes", user_account_id="0.0.100")
    ...     result = await kit.dispatcher.run(
    ...         OPERATIONS["hedera-hts-create-fungible-token"],
    ...         {"token_name": "GameGold"},
    ...     )
    ...     print(result.to_json())
    ...
    >>> asyncio.run(main())

Modules:
- `agent`: HederaAgentKit session entry point
- `builders`: per-service transaction builders
- `execution`: ExecutionEngine, ModeDispatcher and the operation catalogue
- `mirror`: MirrorNodeClient and response models
- `keys`: key parsing, scheme detection and the current_signer sentinel
- `signer`: signer interface and the in-process ServerSigner
- `errors`: exception hierarchy
- `utils`: logging, retry and validation helpers
"""

from hederakit.version import __version__, __version_info__

# Agent
from hederakit.agent import HederaAgentKit, Operator
from hederakit.context import AgentContext

# Configuration
from hederakit.config import (
    KitSettings,
    MirrorNodeConfig,
    Network,
    OperationalMode,
    get_network_config,
)

# Builders
from hederakit.builders import (
    AccountBuilder,
    BaseServiceBuilder,
    CustomFeeSpec,
    HcsBuilder,
    HtsBuilder,
    ParameterDefault,
    ScsBuilder,
    TokenCreateParams,
    apply_parameter_defaults,
    apply_transaction_options,
)

# Execution
from hederakit.execution import (
    OPERATIONS,
    DispatchOutcome,
    DispatchResult,
    ExecutionEngine,
    MetaOptions,
    ModeDispatcher,
    TransactionOperation,
    select_outcome,
)

# Transactions
from hederakit.transactions import (
    BuiltTransaction,
    ExecutionOptions,
    ExecutionResult,
    Notes,
    PendingTransaction,
    ScheduleEntity,
    TransactionId,
    TransactionKind,
    TransactionReceipt,
)

# Keys
from hederakit.keys import (
    CURRENT_SIGNER,
    KeyList,
    KeyResolver,
    KeyType,
    PrivateKey,
    PublicKey,
    detect_key_type,
    parse_private_key,
)

# Signers
from hederakit.signer import (
    AbstractSigner,
    ServerSigner,
    TransactionResponse,
    TransactionSubmitter,
)

# Mirror node
from hederakit.mirror import MirrorNodeClient

# Errors
from hederakit.errors import (
    HederaKitError,
    IllegalStateError,
    InvalidKeyFormatError,
    MissingRequiredFieldError,
    QueryFailureError,
    SubmissionFailureError,
    UnsupportedNetworkError,
    ValidationError,
)

# Utilities
from hederakit.utils import (
    RetryPolicy,
    configure_logging,
    get_logger,
    parse_amount,
    parse_hbar,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Agent
    "HederaAgentKit",
    "Operator",
    "AgentContext",
    # Configuration
    "KitSettings",
    "MirrorNodeConfig",
    "Network",
    "OperationalMode",
    "get_network_config",
    # Builders
    "AccountBuilder",
    "BaseServiceBuilder",
    "CustomFeeSpec",
    "HcsBuilder",
    "HtsBuilder",
    "ParameterDefault",
    "ScsBuilder",
    "TokenCreateParams",
    "apply_parameter_defaults",
    "apply_transaction_options",
    # Execution
    "OPERATIONS",
    "DispatchOutcome",
    "DispatchResult",
    "ExecutionEngine",
    "MetaOptions",
    "ModeDispatcher",
    "TransactionOperation",
    "select_outcome",
    # Transactions
    "BuiltTransaction",
    "ExecutionOptions",
    "ExecutionResult",
    "Notes",
    "PendingTransaction",
    "ScheduleEntity",
    "TransactionId",
    "TransactionKind",
    "TransactionReceipt",
    # Keys
    "CURRENT_SIGNER",
    "KeyList",
    "KeyResolver",
    "KeyType",
    "PrivateKey",
    "PublicKey",
    "detect_key_type",
    "parse_private_key",
    # Signers
    "AbstractSigner",
    "ServerSigner",
    "TransactionResponse",
    "TransactionSubmitter",
    # Mirror node
    "MirrorNodeClient",
    # Errors
    "HederaKitError",
    "IllegalStateError",
    "InvalidKeyFormatError",
    "MissingRequiredFieldError",
    "QueryFailureError",
    "SubmissionFailureError",
    "UnsupportedNetworkError",
    "ValidationError",
    # Utilities
    "RetryPolicy",
    "configure_logging",
    "get_logger",
    "parse_amount",
    "parse_hbar",
]
