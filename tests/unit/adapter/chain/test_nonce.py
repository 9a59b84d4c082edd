"""Unit tests for authorization nonce providers."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from interspace.adapter.chain import (
    ChainNonceProvider,
    ClockNonceProvider,
    MockNonceProvider,
    RpcNonceProvider,
)
from interspace.adapter.error import NonceSourceError
from interspace.domain.value import EthAddress

ADDRESS = EthAddress("0x" + "ab" * 20)
OTHER = EthAddress("0x" + "cd" * 20)
RPC_URL = "https://rpc.sepolia.example"


def rpc_response(status_code: int = 200, body: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body or {}
    return response


class TestClockNonceProvider:
    """Tests for millisecond clock nonces."""

    @pytest.mark.asyncio
    async def test_nonce_is_milliseconds(self):
        provider = ClockNonceProvider(clock=lambda: 1700000000.123)

        assert await provider.next_nonce(ADDRESS, 1) == 1700000000123

    @pytest.mark.asyncio
    async def test_nonces_strictly_increase_within_one_millisecond(self):
        """A frozen clock still yields fresh nonces."""
        provider = ClockNonceProvider(clock=lambda: 1000.0)

        nonces = [await provider.next_nonce(ADDRESS, 1) for _ in range(3)]

        assert nonces == [1000000, 1000001, 1000002]

    @pytest.mark.asyncio
    async def test_addresses_are_independent(self):
        provider = ClockNonceProvider(clock=lambda: 1000.0)
        await provider.next_nonce(ADDRESS, 1)

        assert await provider.next_nonce(OTHER, 1) == 1000000

    @pytest.mark.asyncio
    async def test_only_recent_addresses_are_remembered(self):
        """Addresses drop out once the clock moves past their last nonce."""
        now = [1000.0]
        provider = ClockNonceProvider(clock=lambda: now[0])
        await provider.next_nonce(ADDRESS, 1)
        await provider.next_nonce(ADDRESS, 1)

        now[0] = 1001.0
        nonce = await provider.next_nonce(OTHER, 1)

        assert nonce == 1001000
        assert provider._last == {OTHER.root: 1001000}


class TestMockNonceProvider:
    @pytest.mark.asyncio
    async def test_counts_per_address(self):
        provider = MockNonceProvider()

        assert await provider.next_nonce(ADDRESS, 1) == 1
        assert await provider.next_nonce(ADDRESS, 1) == 2
        assert await provider.next_nonce(OTHER, 1) == 1


class TestRpcNonceProvider:
    """Tests for eth_getTransactionCount nonces."""

    @pytest.mark.asyncio
    async def test_reads_pending_transaction_count(self):
        # Arrange
        provider = RpcNonceProvider({11155111: RPC_URL})
        response = rpc_response(body={"jsonrpc": "2.0", "id": 1, "result": "0x1a"})

        with patch("httpx.AsyncClient") as mock_client:
            post = AsyncMock(return_value=response)
            mock_client.return_value.__aenter__.return_value.post = post

            # Act
            nonce = await provider.next_nonce(ADDRESS, 11155111)

        # Assert
        assert nonce == 26
        payload = post.call_args.kwargs["json"]
        assert payload["method"] == "eth_getTransactionCount"
        assert payload["params"] == [ADDRESS.root, "pending"]
        assert post.call_args.args == (RPC_URL,)

    @pytest.mark.asyncio
    async def test_unconfigured_chain_raises(self):
        provider = RpcNonceProvider({})

        assert not provider.supports(1)
        with pytest.raises(NonceSourceError, match="No RPC endpoint"):
            await provider.next_nonce(ADDRESS, 1)

    @pytest.mark.asyncio
    async def test_rpc_error_raises(self):
        provider = RpcNonceProvider({1: RPC_URL})
        response = rpc_response(body={"error": {"code": -32000, "message": "boom"}})

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=response
            )
            with pytest.raises(NonceSourceError, match="RPC error"):
                await provider.next_nonce(ADDRESS, 1)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        provider = RpcNonceProvider({1: RPC_URL})
        response = rpc_response()
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=response
            )
            with pytest.raises(NonceSourceError, match="not valid JSON"):
                await provider.next_nonce(ADDRESS, 1)

    @pytest.mark.asyncio
    async def test_http_status_error_raises(self):
        provider = RpcNonceProvider({1: RPC_URL})

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=rpc_response(status_code=503)
            )
            with pytest.raises(NonceSourceError, match="503"):
                await provider.next_nonce(ADDRESS, 1)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        provider = RpcNonceProvider({1: RPC_URL})

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ConnectError("refused")
            )
            with pytest.raises(NonceSourceError, match="HTTP error"):
                await provider.next_nonce(ADDRESS, 1)


class TestChainNonceProvider:
    """Tests for RPC-or-clock selection."""

    @pytest.mark.asyncio
    async def test_uses_rpc_for_configured_chain(self):
        rpc = RpcNonceProvider({1: RPC_URL})
        rpc.next_nonce = AsyncMock(return_value=7)
        provider = ChainNonceProvider(rpc=rpc, fallback=MockNonceProvider())

        assert await provider.next_nonce(ADDRESS, 1) == 7

    @pytest.mark.asyncio
    async def test_falls_back_for_other_chains(self):
        rpc = RpcNonceProvider({1: RPC_URL})
        rpc.next_nonce = AsyncMock(return_value=7)
        provider = ChainNonceProvider(rpc=rpc, fallback=MockNonceProvider())

        assert await provider.next_nonce(ADDRESS, 137) == 1
        rpc.next_nonce.assert_not_called()
