"""
Key scheme detection and private-key parsing.

Detection looks at structural signatures only, in this order:

1. ``0x`` prefix                              -> ECDSA
2. ED25519 PKCS#8 DER prefix                  -> ED25519
3. secp256k1 PKCS#8 DER prefix                -> ECDSA
4. 96 hex characters                          -> ED25519
5. 88 hex characters                          -> ECDSA
6. anything else                              -> ED25519

Parsing is attempted under the detected scheme first and the alternate
scheme second; only when both fail is InvalidKeyFormatError raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eth_keys.exceptions import ValidationError as EthKeysValidationError

from hederakit.errors import InvalidKeyFormatError, ValidationError
from hederakit.keys.types import KeyType, PrivateKey
from hederakit.utils.logging import get_logger

_logger = get_logger(__name__)

ED25519_DER_OID_PREFIX = "302e020100300506032b6570"
ECDSA_DER_OID_PREFIX = "3030020100300706052b8104000a"


@dataclass(frozen=True)
class KeyDetectionResult:
    """Outcome of parsing a private-key string."""

    detected_type: KeyType
    private_key: PrivateKey
    attempted_type: Optional[KeyType] = None

    @property
    def used_fallback(self) -> bool:
        """True when the key only parsed under the alternate scheme."""
        return self.attempted_type is not None and self.attempted_type is not self.detected_type


def detect_key_type(key_string: str) -> KeyType:
    """
    Guess the scheme of a private-key string from its shape.

    Example:
        >>> detect_key_type("0x" + "11" * 32)
        <KeyType.ECDSA: 'ecdsa'>
    """
    text = key_string.strip()
    if text[:2].lower() == "0x":
        return KeyType.ECDSA

    lowered = text.lower()
    if lowered.startswith(ED25519_DER_OID_PREFIX):
        return KeyType.ED25519
    if lowered.startswith(ECDSA_DER_OID_PREFIX):
        return KeyType.ECDSA
    if len(text) == 96:
        return KeyType.ED25519
    if len(text) == 88:
        return KeyType.ECDSA
    return KeyType.ED25519


def _parse_as(key_string: str, key_type: KeyType) -> PrivateKey:
    if key_type is KeyType.ED25519:
        return PrivateKey.from_string_ed25519(key_string)
    return PrivateKey.from_string_ecdsa(key_string)


def parse_private_key(
    key_string: str,
    key_type: Optional[KeyType] = None,
) -> KeyDetectionResult:
    """
    Parse a private key, falling back to the alternate scheme.

    Args:
        key_string: Hex or DER-hex key material
        key_type: Scheme to try first; detected from the string when None

    Returns:
        KeyDetectionResult with the scheme the key parsed under and the key

    Raises:
        InvalidKeyFormatError: If the string parses under neither scheme
    """
    if not isinstance(key_string, str) or not key_string.strip():
        raise InvalidKeyFormatError(reason="key string is empty")

    detected = key_type or detect_key_type(key_string)
    errors = []
    for candidate in (detected, detected.alternate):
        try:
            key = _parse_as(key_string, candidate)
        except (ValueError, ValidationError, EthKeysValidationError) as e:
            errors.append(f"{candidate.value}: {e}")
            continue
        if candidate is not detected:
            _logger.debug(
                "Key parsed under alternate scheme",
                extra={"detected": detected.value, "parsed": candidate.value},
            )
        return KeyDetectionResult(
            detected_type=candidate, private_key=key, attempted_type=detected
        )

    raise InvalidKeyFormatError(
        reason="not a valid ed25519 or ecdsa private key",
        details={"attempts": errors},
    )
