"""
hederakit Utilities.

This module provides utility functions and classes for the kit.
"""

from hederakit.utils.logging import (
    get_logger,
    configure_logging,
    set_level,
    disable_logging,
    enable_debug,
    LogContext,
)
from hederakit.utils.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    calculate_delay,
    retry_async,
)
from hederakit.utils.validation import (
    entity_id_to_evm_address,
    generate_default_symbol,
    parse_amount,
    parse_hbar,
    validate_account_id,
    validate_entity_id,
)

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    "LogContext",
    # Retry
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "calculate_delay",
    "retry_async",
    # Validation
    "entity_id_to_evm_address",
    "generate_default_symbol",
    "parse_amount",
    "parse_hbar",
    "validate_account_id",
    "validate_entity_id",
]
