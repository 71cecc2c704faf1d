"""
Base exception class for hederakit.

Every kit error carries a machine-readable code and the ledger entities it
concerns (transaction, account, token and schedule ids). Callers can
report a failure against the entity that caused it without parsing the
message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# Rendering order for ``__str__`` and ``to_dict``.
ENTITY_FIELDS = ("transaction_id", "schedule_id", "token_id", "account_id")


class HederaKitError(Exception):
    """
    Base exception for all hederakit errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "ILLEGAL_STATE").
        transaction_id: Ledger transaction id (``0.0.x@seconds.nanos``).
        account_id: Account the failure concerns.
        token_id: Token the failure concerns.
        schedule_id: Schedule entity the failure concerns.
        details: Extra context that is not a ledger entity (status, field, url).

    Example:
        >>> err = HederaKitError(
        ...     "Schedule sign rejected",
        ...     code="SUBMISSION_FAILURE",
        ...     transaction_id="0.0.1234@1700000000.000000000",
        ...     schedule_id="0.0.5005",
        ...     details={"status": "INVALID_SCHEDULE_ID"},
        ... )
        >>> str(err)
        '[SUBMISSION_FAILURE] Schedule sign rejected (transaction 0.0.1234@1700000000.000000000, schedule 0.0.5005)'
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "HEDERAKIT_ERROR",
        transaction_id: Optional[str] = None,
        account_id: Optional[str] = None,
        token_id: Optional[str] = None,
        schedule_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.transaction_id = transaction_id
        self.account_id = account_id
        self.token_id = token_id
        self.schedule_id = schedule_id
        self.details = details or {}

    @property
    def entity_ids(self) -> Dict[str, str]:
        """Ledger ids attached to this error, in rendering order."""
        return {
            name: getattr(self, name)
            for name in ENTITY_FIELDS
            if getattr(self, name) is not None
        }

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        entities = self.entity_ids
        if not entities:
            return text
        rendered = ", ".join(
            f"{name[: -len('_id')]} {value}" for name, value in entities.items()
        )
        return f"{text} ({rendered})"

    def __repr__(self) -> str:
        fields = "".join(f", {name}={value!r}" for name, value in self.entity_ids.items())
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, code={self.code!r}{fields}, details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Only the entity ids that are set are included.
        """
        data: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }
        data.update(self.entity_ids)
        if self.details:
            data["details"] = self.details
        return data
