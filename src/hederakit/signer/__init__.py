"""
Signing identities and the submission capability they delegate to.
"""

from hederakit.signer.base import (
    AbstractSigner,
    TransactionResponse,
    TransactionSubmitter,
)
from hederakit.signer.server import ServerSigner

__all__ = [
    "AbstractSigner",
    "ServerSigner",
    "TransactionResponse",
    "TransactionSubmitter",
]
