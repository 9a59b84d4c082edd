"""Authorization nonce sources.

Nonces come from the chain (eth_getTransactionCount over JSON-RPC) when an
RPC endpoint is configured for the chain, and from a millisecond clock
otherwise.
"""

import time
from collections import defaultdict
from typing import Callable

import httpx
import logfire

from interspace.adapter.error import NonceSourceError
from interspace.domain.service.nonce import NonceProvider
from interspace.domain.value import EthAddress, parse_quantity


class ClockNonceProvider(NonceProvider):
    """Millisecond timestamps, strictly increasing per address."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize clock nonce provider.

        Args:
            clock: Returns the current time in seconds
        """
        self.clock = clock
        self._last: dict[str, int] = {}
        self._horizon = -1

    async def next_nonce(self, address: EthAddress, chain_id: int) -> int:
        """Current time in milliseconds, bumped past the last issued nonce."""
        candidate = int(self.clock() * 1000)
        if candidate > self._horizon:
            # Entries below the clock can no longer bump a nonce
            self._last = {a: n for a, n in self._last.items() if n >= candidate}
            self._horizon = candidate
        nonce = max(candidate, self._last.get(address.root, -1) + 1)
        self._last[address.root] = nonce
        return nonce


class RpcNonceProvider(NonceProvider):
    """Pending transaction count of the address, read over JSON-RPC."""

    def __init__(self, rpc_urls: dict[int, str], timeout: float = 10.0) -> None:
        """Initialize RPC nonce provider.

        Args:
            rpc_urls: JSON-RPC endpoint per chain id
            timeout: Request timeout in seconds
        """
        self.rpc_urls = rpc_urls
        self.timeout = timeout

    def supports(self, chain_id: int) -> bool:
        """Whether an endpoint is configured for the chain."""
        return chain_id in self.rpc_urls

    async def next_nonce(self, address: EthAddress, chain_id: int) -> int:
        """Fetch eth_getTransactionCount(address, "pending").

        Raises:
            NonceSourceError: If the chain has no endpoint or the call fails
        """
        url = self.rpc_urls.get(chain_id)
        if not url:
            raise NonceSourceError(f"No RPC endpoint configured for chain {chain_id}")

        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "eth_getTransactionCount",
            "params": [address.root, "pending"],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logfire.error("RPC nonce HTTP error", chain_id=chain_id, error=str(e))
            raise NonceSourceError(f"HTTP error fetching nonce: {e}")

        if response.status_code != 200:
            logfire.error(
                "RPC nonce request failed",
                chain_id=chain_id,
                status_code=response.status_code,
            )
            raise NonceSourceError(f"Nonce request failed: {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            logfire.error("RPC nonce response is not JSON", chain_id=chain_id)
            raise NonceSourceError("RPC response is not valid JSON")

        if not isinstance(body, dict) or "error" in body or "result" not in body:
            logfire.error("RPC nonce error response", chain_id=chain_id, body=body)
            error = body.get("error") if isinstance(body, dict) else body
            raise NonceSourceError(f"RPC error: {error}")

        return parse_quantity(body["result"])


class ChainNonceProvider(NonceProvider):
    """Chain nonces where an RPC endpoint exists, clock nonces elsewhere."""

    def __init__(self, rpc: RpcNonceProvider, fallback: NonceProvider) -> None:
        """Initialize chain nonce provider.

        Args:
            rpc: JSON-RPC nonce source
            fallback: Source for chains without an endpoint
        """
        self.rpc = rpc
        self.fallback = fallback

    async def next_nonce(self, address: EthAddress, chain_id: int) -> int:
        """Nonce from the chain if reachable by configuration."""
        with logfire.span(
            "chain_nonce_provider.next_nonce", address=address.root, chain_id=chain_id
        ):
            if self.rpc.supports(chain_id):
                return await self.rpc.next_nonce(address, chain_id)
            return await self.fallback.next_nonce(address, chain_id)


class MockNonceProvider(NonceProvider):
    """Mock nonce provider for testing: 1, 2, 3... per address."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)

    async def next_nonce(self, address: EthAddress, chain_id: int) -> int:
        """Next counter value for the address."""
        self._counters[address.root] += 1
        return self._counters[address.root]
