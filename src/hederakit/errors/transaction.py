"""
Transaction lifecycle exceptions.

Raised while building, mutating, signing or submitting ledger
transactions. Construction errors propagate to the caller; submission
errors are converted into failed ExecutionResults by the engine.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from hederakit.errors.base import HederaKitError


class ValidationError(HederaKitError):
    """
    Raised when an input value is malformed.

    Example:
        >>> raise ValidationError("Amount must be an integer", field="amount")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field
        self.value = value


class IllegalStateError(HederaKitError):
    """
    Raised on out-of-sequence mutation, e.g. editing a frozen transaction.

    Example:
        >>> raise IllegalStateError("Transaction is frozen", operation="set_memo")
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation

        super().__init__(message, code="ILLEGAL_STATE", details=details)
        self.operation = operation


class InvalidKeyFormatError(ValidationError):
    """
    Raised when a key string cannot be parsed under any supported scheme.

    The offending key material is never echoed back in the message.
    """

    def __init__(
        self,
        message: str = "Invalid key format",
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if reason:
            details["reason"] = reason
            message = f"{message}: {reason}"

        super().__init__(message, details=details)
        self.code = "INVALID_KEY_FORMAT"
        self.reason = reason


class MissingRequiredFieldError(ValidationError):
    """
    Raised when a required field was neither supplied nor defaulted.

    Example:
        >>> raise MissingRequiredFieldError("treasury_account_id")
    """

    def __init__(
        self,
        field: str,
        *,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message or f"{field} is required",
            field=field,
            details=details,
        )
        self.code = "MISSING_REQUIRED_FIELD"


class UnsupportedNetworkError(HederaKitError):
    """
    Raised when a network name is not mainnet or testnet.

    Example:
        >>> raise UnsupportedNetworkError("previewnet")
    """

    def __init__(
        self,
        network: str,
        *,
        supported: Optional[list] = None,
    ) -> None:
        supported = supported or ["mainnet", "testnet"]
        super().__init__(
            f"Unsupported network: {network}",
            code="UNSUPPORTED_NETWORK",
            details={"network": network, "supported": supported},
        )
        self.network = network
        self.supported = supported


class SubmissionFailureError(HederaKitError):
    """
    Raised when the ledger rejects a signed transaction.

    Example:
        >>> raise SubmissionFailureError(
        ...     "Receipt status INVALID_SIGNATURE",
        ...     status="INVALID_SIGNATURE",
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[str] = None,
        transaction_id: Optional[str] = None,
        account_id: Optional[str] = None,
        schedule_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if status:
            details["status"] = status

        super().__init__(
            message,
            code="SUBMISSION_FAILURE",
            transaction_id=transaction_id,
            account_id=account_id,
            schedule_id=schedule_id,
            details=details,
        )
        self.status = status
