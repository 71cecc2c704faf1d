"""
Key substitution.

Turns the key inputs accepted by builders (strings, key objects or the
``current_signer`` sentinel) into public key material.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from hederakit.errors import InvalidKeyFormatError
from hederakit.keys.detect import parse_private_key
from hederakit.keys.types import Key, KeyList, PrivateKey, PublicKey, as_public

if TYPE_CHECKING:
    from hederakit.signer.base import AbstractSigner

CURRENT_SIGNER = "current_signer"

KeyInput = Union[str, Key, None]


class KeyResolver:
    """
    Resolves key inputs against the active signer.

    Example:
        ```python
        resolver = KeyResolver(signer)
        admin_key = await resolver.resolve("current_signer")
        ```
    """

    def __init__(self, signer: "AbstractSigner") -> None:
        self._signer = signer

    async def resolve(self, value: KeyInput) -> Optional[Union[PublicKey, KeyList]]:
        """
        Resolve a key input.

        ``current_signer`` costs one mirror-node query. Private keys are
        reduced to their public half.

        Raises:
            InvalidKeyFormatError: If a string is not a public or private key
        """
        if value is None:
            return None

        if isinstance(value, (PublicKey, PrivateKey, KeyList)):
            return as_public(value)

        if not isinstance(value, str):
            raise InvalidKeyFormatError(reason=f"unsupported key input {type(value).__name__}")

        text = value.strip()
        if not text:
            return None

        if text.lower() == CURRENT_SIGNER:
            return await self._signer.get_public_key()

        # 0x + 64 hex is a raw secp256k1 secret, never a public key.
        if not (text[:2].lower() == "0x" and len(text) == 66):
            try:
                return PublicKey.from_string(text)
            except InvalidKeyFormatError:
                pass

        return parse_private_key(text).private_key.public_key
