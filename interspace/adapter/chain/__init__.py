"""EVM chain adapters."""

from .nonce import (
    ChainNonceProvider,
    ClockNonceProvider,
    MockNonceProvider,
    RpcNonceProvider,
)

__all__ = [
    "ChainNonceProvider",
    "ClockNonceProvider",
    "MockNonceProvider",
    "RpcNonceProvider",
]
