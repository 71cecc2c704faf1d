"""
Key Types

Tagged union of key material used by the kit:
- PrivateKey: ED25519 or ECDSA(secp256k1) secret
- PublicKey: ED25519 or ECDSA(secp256k1) public key
- KeyList: threshold list of nested keys

ED25519 operations use ``cryptography``; secp256k1 operations use
``eth_keys``. ECDSA signatures are taken over keccak256 of the message
and returned as 64 bytes (r || s).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from eth_keys import keys as eth_keys
from eth_keys.exceptions import ValidationError as EthKeysValidationError
from eth_utils import keccak

from hederakit.errors import InvalidKeyFormatError


# ============================================================================
# DER prefixes (hex)
# ============================================================================

ED25519_PRIVATE_DER_PREFIX = "302e020100300506032b657004220420"
ECDSA_PRIVATE_DER_PREFIX = "3030020100300706052b8104000a04220420"
ED25519_PUBLIC_DER_PREFIX = "302a300506032b6570032100"
ECDSA_PUBLIC_DER_PREFIX = "302d300706052b8104000a032200"


class KeyType(str, Enum):
    """Signature scheme of a single key."""

    ED25519 = "ed25519"
    ECDSA = "ecdsa"

    @property
    def alternate(self) -> "KeyType":
        """The other supported scheme."""
        return KeyType.ECDSA if self is KeyType.ED25519 else KeyType.ED25519


def _strip_hex(value: str) -> str:
    value = value.strip()
    if value[:2].lower() == "0x":
        value = value[2:]
    return value.lower()


def _hex_to_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise ValueError("not a hex string") from None


# ============================================================================
# Public keys
# ============================================================================


@dataclass(frozen=True)
class PublicKey:
    """
    Public key of either scheme.

    ``raw`` is 32 bytes for ED25519 and the 33-byte compressed point for
    secp256k1.
    """

    key_type: KeyType
    raw: bytes

    def __post_init__(self) -> None:
        expected = 32 if self.key_type is KeyType.ED25519 else 33
        if len(self.raw) != expected:
            raise InvalidKeyFormatError(
                reason=f"{self.key_type.value} public key must be {expected} bytes"
            )

    @classmethod
    def from_bytes(cls, data: bytes) -> "PublicKey":
        """Build from raw or DER-encoded bytes."""
        return cls.from_string(data.hex())

    @classmethod
    def from_string(cls, value: str) -> "PublicKey":
        """
        Parse a public key from hex.

        Accepts raw ED25519 (32 bytes), compressed or uncompressed secp256k1
        (33 or 65 bytes) and both DER encodings.

        Raises:
            InvalidKeyFormatError: If no encoding matches
        """
        if not isinstance(value, str) or not value.strip():
            raise InvalidKeyFormatError(reason="public key string is empty")

        text = _strip_hex(value)
        try:
            if text.startswith(ED25519_PUBLIC_DER_PREFIX):
                return cls(KeyType.ED25519, _hex_to_bytes(text[len(ED25519_PUBLIC_DER_PREFIX):]))
            if text.startswith(ECDSA_PUBLIC_DER_PREFIX):
                return cls(KeyType.ECDSA, _hex_to_bytes(text[len(ECDSA_PUBLIC_DER_PREFIX):]))

            data = _hex_to_bytes(text)
            if len(data) == 32:
                return cls(KeyType.ED25519, data)
            if len(data) == 33 and data[0] in (2, 3):
                return cls(KeyType.ECDSA, data)
            if len(data) == 65 and data[0] == 4:
                point = eth_keys.PublicKey(data[1:])
                return cls(KeyType.ECDSA, point.to_compressed_bytes())
            return cls._from_der(data)
        except (ValueError, EthKeysValidationError) as e:
            raise InvalidKeyFormatError(reason=f"unrecognised public key: {e}") from None

    @classmethod
    def _from_der(cls, data: bytes) -> "PublicKey":
        try:
            loaded = serialization.load_der_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise ValueError(str(e)) from None

        if isinstance(loaded, ed25519.Ed25519PublicKey):
            raw = loaded.public_bytes(
                serialization.Encoding.Raw, serialization.PublicFormat.Raw
            )
            return cls(KeyType.ED25519, raw)
        if isinstance(loaded, ec.EllipticCurvePublicKey) and isinstance(
            loaded.curve, ec.SECP256K1
        ):
            raw = loaded.public_bytes(
                serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
            )
            return cls(KeyType.ECDSA, raw)
        raise ValueError("DER key is neither ed25519 nor secp256k1")

    @classmethod
    def from_mirror(cls, key_type: Optional[str], key_hex: str) -> "PublicKey":
        """
        Build from a mirror-node ``{"_type": ..., "key": ...}`` pair.

        ``ProtobufEncoded`` keys are key lists and cannot be reduced to a
        single public key.
        """
        if key_type == "ProtobufEncoded":
            raise InvalidKeyFormatError(reason="account key is a key list")
        key = cls.from_string(key_hex)
        if key_type == "ECDSA_SECP256K1" and key.key_type is not KeyType.ECDSA:
            raise InvalidKeyFormatError(reason="mirror reported ECDSA but key is not secp256k1")
        return key

    def to_string_raw(self) -> str:
        return self.raw.hex()

    def to_string_der(self) -> str:
        prefix = (
            ED25519_PUBLIC_DER_PREFIX
            if self.key_type is KeyType.ED25519
            else ECDSA_PUBLIC_DER_PREFIX
        )
        return prefix + self.raw.hex()

    def to_evm_address(self) -> str:
        """Checksummed EVM address of a secp256k1 key."""
        if self.key_type is not KeyType.ECDSA:
            raise InvalidKeyFormatError(reason="only ECDSA keys have an EVM address")
        return eth_keys.PublicKey.from_compressed_bytes(self.raw).to_checksum_address()

    def to_dict(self) -> Dict[str, Any]:
        name = "ed25519" if self.key_type is KeyType.ED25519 else "ecdsa_secp256k1"
        return {name: self.raw.hex()}

    def __str__(self) -> str:
        return self.to_string_der()


# ============================================================================
# Private keys
# ============================================================================


@dataclass(frozen=True)
class PrivateKey:
    """
    32-byte private scalar with its scheme.

    The secret never appears in ``repr`` output.
    """

    key_type: KeyType
    raw: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.raw) != 32:
            raise InvalidKeyFormatError(reason="private key must be 32 bytes")
        if self.key_type is KeyType.ECDSA:
            try:
                eth_keys.PrivateKey(self.raw)
            except EthKeysValidationError as e:
                raise InvalidKeyFormatError(reason=f"invalid secp256k1 scalar: {e}") from None

    @classmethod
    def generate(cls, key_type: KeyType = KeyType.ED25519) -> "PrivateKey":
        """Create a fresh random key."""
        if key_type is KeyType.ED25519:
            secret = ed25519.Ed25519PrivateKey.generate()
            raw = secret.private_bytes(
                serialization.Encoding.Raw,
                serialization.PrivateFormat.Raw,
                serialization.NoEncryption(),
            )
            return cls(KeyType.ED25519, raw)
        return cls(KeyType.ECDSA, eth_keys.PrivateKey(os.urandom(32)).to_bytes())

    @classmethod
    def from_string_ed25519(cls, value: str) -> "PrivateKey":
        """
        Parse an ED25519 key: raw 32-byte hex, 64-byte seed+public hex or DER.

        Raises:
            ValueError: If the string is not an ED25519 key
        """
        text = _strip_hex(value)
        if text.startswith(ED25519_PRIVATE_DER_PREFIX):
            return cls(KeyType.ED25519, _hex_to_bytes(text[len(ED25519_PRIVATE_DER_PREFIX):]))

        data = _hex_to_bytes(text)
        if len(data) == 32:
            return cls(KeyType.ED25519, data)
        if len(data) == 64:
            return cls(KeyType.ED25519, data[:32])

        loaded = _load_der_private(data)
        if not isinstance(loaded, ed25519.Ed25519PrivateKey):
            raise ValueError("DER key is not ed25519")
        raw = loaded.private_bytes(
            serialization.Encoding.Raw,
            serialization.PrivateFormat.Raw,
            serialization.NoEncryption(),
        )
        return cls(KeyType.ED25519, raw)

    @classmethod
    def from_string_ecdsa(cls, value: str) -> "PrivateKey":
        """
        Parse a secp256k1 key: raw 32-byte hex (optionally 0x-prefixed) or DER.

        Raises:
            ValueError: If the string is not a secp256k1 key
        """
        text = _strip_hex(value)
        if text.startswith(ECDSA_PRIVATE_DER_PREFIX):
            return cls(KeyType.ECDSA, _hex_to_bytes(text[len(ECDSA_PRIVATE_DER_PREFIX):]))

        data = _hex_to_bytes(text)
        if len(data) == 32:
            return cls(KeyType.ECDSA, data)

        loaded = _load_der_private(data)
        if not (
            isinstance(loaded, ec.EllipticCurvePrivateKey)
            and isinstance(loaded.curve, ec.SECP256K1)
        ):
            raise ValueError("DER key is not secp256k1")
        return cls(KeyType.ECDSA, loaded.private_numbers().private_value.to_bytes(32, "big"))

    @property
    def public_key(self) -> PublicKey:
        if self.key_type is KeyType.ED25519:
            secret = ed25519.Ed25519PrivateKey.from_private_bytes(self.raw)
            raw = secret.public_key().public_bytes(
                serialization.Encoding.Raw, serialization.PublicFormat.Raw
            )
            return PublicKey(KeyType.ED25519, raw)
        return PublicKey(
            KeyType.ECDSA, eth_keys.PrivateKey(self.raw).public_key.to_compressed_bytes()
        )

    def sign(self, message: bytes) -> bytes:
        """Sign ``message``; ECDSA signs its keccak256 digest."""
        if self.key_type is KeyType.ED25519:
            return ed25519.Ed25519PrivateKey.from_private_bytes(self.raw).sign(message)
        signature = eth_keys.PrivateKey(self.raw).sign_msg_hash(keccak(message))
        return signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")

    def to_string_raw(self) -> str:
        return self.raw.hex()

    def to_string_der(self) -> str:
        prefix = (
            ED25519_PRIVATE_DER_PREFIX
            if self.key_type is KeyType.ED25519
            else ECDSA_PRIVATE_DER_PREFIX
        )
        return prefix + self.raw.hex()

    def __str__(self) -> str:
        return f"PrivateKey({self.key_type.value}, public={self.public_key})"


def _load_der_private(data: bytes) -> Any:
    try:
        return serialization.load_der_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ValueError(str(e)) from None


# ============================================================================
# Key lists
# ============================================================================


@dataclass(frozen=True)
class KeyList:
    """
    Ordered list of keys, optionally with a signature threshold.

    A threshold of None means every key must sign.
    """

    keys: Tuple["Key", ...] = ()
    threshold: Optional[int] = None

    def __iter__(self) -> Iterator["Key"]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def with_key(self, key: "Key") -> "KeyList":
        """Return a new list with ``key`` appended."""
        return KeyList(self.keys + (key,), self.threshold)

    def to_dict(self) -> Dict[str, Any]:
        members = [key_to_dict(k) for k in self.keys]
        if self.threshold is None:
            return {"keyList": members}
        return {"thresholdKey": {"threshold": self.threshold, "keys": members}}


Key = Union[PublicKey, PrivateKey, KeyList]


# ============================================================================
# Encoding
# ============================================================================


def as_public(key: Key) -> Union[PublicKey, KeyList]:
    """Replace private keys with their public halves, recursively."""
    if isinstance(key, PrivateKey):
        return key.public_key
    if isinstance(key, KeyList):
        return KeyList(tuple(as_public(k) for k in key.keys), key.threshold)
    return key


def key_to_dict(key: Key) -> Dict[str, Any]:
    """Structured form of a key tree. Secrets are reduced to public keys."""
    return as_public(key).to_dict()


def key_from_dict(data: Dict[str, Any]) -> Union[PublicKey, KeyList]:
    """
    Rebuild a key tree from ``key_to_dict`` output.

    Raises:
        InvalidKeyFormatError: If the structure is not recognised
    """
    try:
        return _key_tree_from_dict(data)
    except (ValueError, TypeError, AttributeError, KeyError) as e:
        raise InvalidKeyFormatError(reason=f"malformed key structure: {e}") from None


def _key_tree_from_dict(data: Any) -> Union[PublicKey, KeyList]:
    if not isinstance(data, dict):
        raise InvalidKeyFormatError(reason="encoded key must be an object")
    if "ed25519" in data:
        return PublicKey(KeyType.ED25519, _hex_to_bytes(data["ed25519"]))
    if "ecdsa_secp256k1" in data:
        return PublicKey(KeyType.ECDSA, _hex_to_bytes(data["ecdsa_secp256k1"]))
    if "keyList" in data:
        return KeyList(tuple(_key_tree_from_dict(k) for k in data["keyList"] or []))
    if "thresholdKey" in data:
        threshold = data["thresholdKey"] or {}
        return KeyList(
            tuple(_key_tree_from_dict(k) for k in threshold.get("keys") or []),
            threshold=int(threshold.get("threshold", 1)),
        )
    raise InvalidKeyFormatError(reason=f"unknown key structure: {sorted(data)}")


def encode_key(key: Key) -> bytes:
    """Canonical byte encoding of a key tree."""
    return json.dumps(key_to_dict(key), sort_keys=True, separators=(",", ":")).encode()


def decode_key(data: Union[bytes, str]) -> Union[PublicKey, KeyList]:
    """
    Inverse of ``encode_key``.

    Raises:
        InvalidKeyFormatError: If the payload is not an encoded key
    """
    try:
        parsed = json.loads(data)
    except (ValueError, TypeError) as e:
        raise InvalidKeyFormatError(reason=f"encoded key is not valid JSON: {e}") from None
    return key_from_dict(parsed)
