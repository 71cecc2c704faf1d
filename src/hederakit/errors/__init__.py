"""
hederakit exception hierarchy.

    HederaKitError
    ├── ValidationError
    │   ├── InvalidKeyFormatError
    │   └── MissingRequiredFieldError
    ├── IllegalStateError
    ├── UnsupportedNetworkError
    ├── SubmissionFailureError
    └── QueryFailureError
"""

from hederakit.errors.base import HederaKitError
from hederakit.errors.query import QueryFailureError, is_retryable_status
from hederakit.errors.transaction import (
    IllegalStateError,
    InvalidKeyFormatError,
    MissingRequiredFieldError,
    SubmissionFailureError,
    UnsupportedNetworkError,
    ValidationError,
)

__all__ = [
    # Base
    "HederaKitError",
    # Construction
    "ValidationError",
    "InvalidKeyFormatError",
    "MissingRequiredFieldError",
    "IllegalStateError",
    "UnsupportedNetworkError",
    # Submission
    "SubmissionFailureError",
    # Query
    "QueryFailureError",
    "is_retryable_status",
]
