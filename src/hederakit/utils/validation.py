"""
Validation utilities for hederakit.

Provides input validation functions for:
- Entity ids (``shard.realm.num``)
- Ledger amounts (exact integer parsing)
- Token symbols derived from names

All validation functions raise ValidationError (or subclasses) on failure.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from hederakit.errors import MissingRequiredFieldError, ValidationError


ENTITY_ID_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
DEFAULT_TOKEN_SYMBOL = "TOKEN"
MAX_SYMBOL_LENGTH = 5
TINYBARS_PER_HBAR = 100_000_000

AmountLike = Union[str, int, float, Decimal, None]


def validate_entity_id(entity_id: Optional[str], field_name: str = "entity_id") -> str:
    """
    Validate a ``shard.realm.num`` entity id.

    Args:
        entity_id: Id to validate
        field_name: Field name for error messages

    Returns:
        The id with surrounding whitespace removed

    Raises:
        MissingRequiredFieldError: If the id is empty
        ValidationError: If the id is malformed
    """
    if entity_id is None or (isinstance(entity_id, str) and not entity_id.strip()):
        raise MissingRequiredFieldError(field_name)

    if not isinstance(entity_id, str):
        raise ValidationError(
            f"{field_name} must be a string",
            field=field_name,
            value=entity_id,
        )

    entity_id = entity_id.strip()
    if not ENTITY_ID_PATTERN.match(entity_id):
        raise ValidationError(
            f"{field_name} must look like shard.realm.num, got '{entity_id}'",
            field=field_name,
            value=entity_id,
        )
    return entity_id


def validate_account_id(account_id: Optional[str], field_name: str = "account_id") -> str:
    """Validate an account id. Alias of validate_entity_id with a better label."""
    return validate_entity_id(account_id, field_name)


def entity_id_to_evm_address(entity_id: str, field_name: str = "entity_id") -> str:
    """
    Long-zero EVM address of an entity id; ``0x`` addresses pass through.

    Example:
        >>> entity_id_to_evm_address("0.0.1234")
        '0x00000000000000000000000000000000000004d2'
    """
    if isinstance(entity_id, str) and entity_id.strip().lower().startswith("0x"):
        return entity_id.strip()
    shard, realm, num = (int(part) for part in validate_entity_id(entity_id, field_name).split("."))
    return f"0x{shard:08x}{realm:016x}{num:016x}"


def parse_amount(value: AmountLike, field_name: str = "amount") -> int:
    """
    Convert an amount-like value to an integer in the smallest unit.

    Strings go through exact integer parsing, so arbitrarily large values
    survive unchanged. Floats and Decimals are truncated toward zero via
    ``int()``; floats beyond 2**53 have already lost precision before
    they reach this function.

    Args:
        value: String, int, float, Decimal or None
        field_name: Field name for error messages

    Returns:
        Integer amount (0 for None)

    Raises:
        ValidationError: If a string is not an integer literal

    Example:
        >>> parse_amount("340282366920938463463374607431768211457")
        340282366920938463463374607431768211457
        >>> parse_amount(None)
        0
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number, not a boolean",
            field=field_name,
            value=value,
        )

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 10)
        except ValueError:
            raise ValidationError(
                f"{field_name} must be an integer string, got '{value}'",
                field=field_name,
                value=value,
            ) from None

    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            raise ValidationError(
                f"{field_name} is not a finite number",
                field=field_name,
                value=value,
            ) from None

    raise ValidationError(
        f"{field_name} has unsupported type {type(value).__name__}",
        field=field_name,
        value=value,
    )


def parse_hbar(value: AmountLike, field_name: str = "amount") -> int:
    """
    Convert an HBAR amount to tinybars.

    Strings and Decimals are parsed exactly; an amount with more than
    eight decimal places is rejected rather than rounded.

    Example:
        >>> parse_hbar("1.5")
        150000000
        >>> parse_hbar(-2)
        -200000000
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number, not a boolean",
            field=field_name,
            value=value,
        )
    try:
        hbar = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(
            f"{field_name} must be a decimal HBAR amount, got '{value}'",
            field=field_name,
            value=value,
        ) from None

    tinybars = hbar * TINYBARS_PER_HBAR
    if not tinybars.is_finite() or tinybars != tinybars.to_integral_value():
        raise ValidationError(
            f"{field_name} has more precision than one tinybar",
            field=field_name,
            value=value,
        )
    return int(tinybars)


def generate_default_symbol(token_name: Optional[str]) -> str:
    """
    Derive a token symbol from a token name.

    Non-alphanumerics are stripped, the first five characters kept and the
    result uppercased. Falls back to ``TOKEN`` when nothing is left.

    Example:
        >>> generate_default_symbol("GameGold")
        'GAMEG'
        >>> generate_default_symbol("!!!")
        'TOKEN'
    """
    if not token_name:
        return DEFAULT_TOKEN_SYMBOL
    symbol = re.sub(r"[^a-zA-Z0-9]", "", token_name)[:MAX_SYMBOL_LENGTH].upper()
    return symbol or DEFAULT_TOKEN_SYMBOL
