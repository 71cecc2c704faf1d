"""
Key material: types, scheme detection and signer substitution.
"""

from hederakit.keys.detect import (
    KeyDetectionResult,
    detect_key_type,
    parse_private_key,
)
from hederakit.keys.resolver import CURRENT_SIGNER, KeyInput, KeyResolver
from hederakit.keys.types import (
    Key,
    KeyList,
    KeyType,
    PrivateKey,
    PublicKey,
    as_public,
    decode_key,
    encode_key,
    key_from_dict,
    key_to_dict,
)

__all__ = [
    # Types
    "Key",
    "KeyList",
    "KeyType",
    "PrivateKey",
    "PublicKey",
    # Encoding
    "as_public",
    "decode_key",
    "encode_key",
    "key_from_dict",
    "key_to_dict",
    # Detection
    "KeyDetectionResult",
    "detect_key_type",
    "parse_private_key",
    # Substitution
    "CURRENT_SIGNER",
    "KeyInput",
    "KeyResolver",
]
