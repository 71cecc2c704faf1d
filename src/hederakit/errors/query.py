"""
Mirror-node query exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from hederakit.errors.base import HederaKitError


class QueryFailureError(HederaKitError):
    """
    Raised when a mirror-node read fails.

    A failure is retryable for HTTP 429, 5xx and transport errors.
    Any other 4xx is final and propagates without retry.

    Example:
        >>> raise QueryFailureError(
        ...     "HTTP 404 for /api/v1/accounts/0.0.9",
        ...     status_code=404,
        ...     url="https://testnet.mirrornode.hedera.com/api/v1/accounts/0.0.9",
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        retryable: Optional[bool] = None,
        account_id: Optional[str] = None,
        token_id: Optional[str] = None,
        schedule_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url

        super().__init__(
            message,
            code="QUERY_FAILURE",
            account_id=account_id,
            token_id=token_id,
            schedule_id=schedule_id,
            details=details,
        )
        self.status_code = status_code
        self.url = url
        if retryable is None:
            retryable = is_retryable_status(status_code)
        self.retryable = retryable


def is_retryable_status(status_code: Optional[int]) -> bool:
    """
    Classify an HTTP status for retry.

    None stands for a transport-level failure and is retryable.
    """
    if status_code is None:
        return True
    if status_code == 429:
        return True
    return status_code >= 500
