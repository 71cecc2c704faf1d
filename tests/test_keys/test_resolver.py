"""
Tests for KeyResolver and the current_signer sentinel.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hederakit.errors import InvalidKeyFormatError
from hederakit.keys.resolver import CURRENT_SIGNER, KeyResolver
from hederakit.keys.types import KeyList

from ..conftest import (
    AGENT_PUBLIC_KEY,
    ECDSA_PRIVATE_KEY,
    USER_PRIVATE_KEY,
    USER_PUBLIC_KEY,
)


@pytest.fixture
def mock_signer() -> MagicMock:
    signer = MagicMock()
    signer.get_public_key = AsyncMock(return_value=AGENT_PUBLIC_KEY)
    return signer


class TestKeyResolver:
    """Tests for key input resolution."""

    @pytest.mark.asyncio
    async def test_current_signer_queries_signer(self, mock_signer: MagicMock) -> None:
        key = await KeyResolver(mock_signer).resolve(CURRENT_SIGNER)

        assert key == AGENT_PUBLIC_KEY
        mock_signer.get_public_key.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_current_signer_is_case_insensitive(self, mock_signer: MagicMock) -> None:
        assert await KeyResolver(mock_signer).resolve(" Current_Signer ") == AGENT_PUBLIC_KEY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, "", "   "])
    async def test_empty_inputs_resolve_to_none(self, mock_signer: MagicMock, value) -> None:
        assert await KeyResolver(mock_signer).resolve(value) is None
        mock_signer.get_public_key.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_public_key_string(self, mock_signer: MagicMock) -> None:
        key = await KeyResolver(mock_signer).resolve(USER_PUBLIC_KEY.to_string_der())

        assert key == USER_PUBLIC_KEY

    @pytest.mark.asyncio
    async def test_private_key_string_reduced_to_public(self, mock_signer: MagicMock) -> None:
        key = await KeyResolver(mock_signer).resolve(USER_PRIVATE_KEY.to_string_der())

        assert key == USER_PUBLIC_KEY

    @pytest.mark.asyncio
    async def test_0x_secret_is_ecdsa_private(self, mock_signer: MagicMock) -> None:
        """Test 0x + 64 hex is read as a secp256k1 secret, not a public key."""
        key = await KeyResolver(mock_signer).resolve("0x" + ECDSA_PRIVATE_KEY.to_string_raw())

        assert key == ECDSA_PRIVATE_KEY.public_key

    @pytest.mark.asyncio
    async def test_key_objects_are_made_public(self, mock_signer: MagicMock) -> None:
        resolver = KeyResolver(mock_signer)

        assert await resolver.resolve(USER_PRIVATE_KEY) == USER_PUBLIC_KEY
        assert await resolver.resolve(KeyList((USER_PRIVATE_KEY,), 1)) == KeyList(
            (USER_PUBLIC_KEY,), 1
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["not-a-key", 42])
    async def test_invalid_inputs(self, mock_signer: MagicMock, value) -> None:
        with pytest.raises(InvalidKeyFormatError):
            await KeyResolver(mock_signer).resolve(value)
