"""
Server Signer

Signs with a locally held private key and delegates submission to an
injected TransactionSubmitter.
"""

from __future__ import annotations

from typing import Optional, Union

from hederakit.config import MirrorNodeConfig, Network, get_network_config
from hederakit.errors import HederaKitError
from hederakit.keys.detect import parse_private_key
from hederakit.keys.types import KeyType, PrivateKey, PublicKey
from hederakit.mirror.client import MirrorNodeClient
from hederakit.signer.base import (
    AbstractSigner,
    TransactionResponse,
    TransactionSubmitter,
)
from hederakit.transactions.pending import PendingTransaction
from hederakit.utils.logging import get_logger
from hederakit.utils.validation import validate_account_id

_logger = get_logger(__name__)


class ServerSigner(AbstractSigner):
    """
    Signer backed by a private key held in process.

    Example:
        ```python
        signer = ServerSigner(
            "0.0.1001",
            os.environ["HEDERA_PRIVATE_KEY"],
            "testnet",
            submitter=my_submitter,
        )
        await signer.verify_key_type()
        ```
    """

    def __init__(
        self,
        account_id: str,
        private_key: Union[str, PrivateKey],
        network: Union[Network, str],
        submitter: TransactionSubmitter,
        mirror_node: Optional[MirrorNodeClient] = None,
        mirror_config: Optional[MirrorNodeConfig] = None,
        key_type: Optional[KeyType] = None,
    ) -> None:
        """
        Initialize the signer.

        Args:
            account_id: Operator account id
            private_key: Key string (scheme detected) or parsed key
            network: mainnet or testnet
            submitter: Delivers signed transactions to the network
            mirror_node: Shared mirror client (created when omitted)
            mirror_config: Used when a mirror client has to be created
            key_type: Scheme hint for key strings

        Raises:
            UnsupportedNetworkError: For unknown networks
            InvalidKeyFormatError: If the key cannot be parsed
        """
        self._account_id = validate_account_id(account_id)
        self._network = get_network_config(network).name
        self._submitter = submitter

        if isinstance(private_key, PrivateKey):
            self._private_key = private_key
        else:
            self._private_key = parse_private_key(private_key, key_type).private_key

        self.mirror_node = mirror_node or MirrorNodeClient(self._network, mirror_config)

        _logger.info(
            "ServerSigner initialized",
            extra={
                "account_id": self._account_id,
                "network": self._network.value,
                "key_type": self._private_key.key_type.value,
            },
        )

    @property
    def key_type(self) -> KeyType:
        return self._private_key.key_type

    @property
    def local_public_key(self) -> PublicKey:
        """Public key derived from the held private key, without a query."""
        return self._private_key.public_key

    def get_account_id(self) -> str:
        return self._account_id

    def get_network(self) -> Network:
        return self._network

    async def sign(self, transaction: PendingTransaction) -> PendingTransaction:
        if not transaction.is_frozen:
            self.freeze(transaction)
        signature = self._private_key.sign(transaction.body_bytes())
        return transaction.add_signature(self._private_key.public_key, signature)

    async def execute(self, transaction: PendingTransaction) -> TransactionResponse:
        return await self._submitter.submit(transaction)

    async def verify_key_type(self) -> KeyType:
        """
        Align the key scheme with the one the mirror node reports.

        When the account's key is of the other scheme, the same secret is
        reinterpreted under that scheme. Lookup failures leave the key
        untouched.
        """
        try:
            account = await self.mirror_node.request_account(self._account_id)
        except HederaKitError as e:
            _logger.warning(f"Could not verify key type for {self._account_id}: {e}")
            return self._private_key.key_type

        reported = account.key.key_type if account.key else None
        expected = KeyType.ECDSA if reported == "ECDSA_SECP256K1" else KeyType.ED25519
        if reported and expected is not self._private_key.key_type:
            _logger.info(
                "Switching key scheme to match account",
                extra={"from": self._private_key.key_type.value, "to": expected.value},
            )
            self._private_key = PrivateKey(expected, self._private_key.raw)
        return self._private_key.key_type
