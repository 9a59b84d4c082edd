"""Chain access infrastructure providers."""

from dishka import Scope, provide

from interspace.adapter.chain import (
    ChainNonceProvider,
    ClockNonceProvider,
    RpcNonceProvider,
)
from interspace.config import ChainSettings
from interspace.domain.service import NonceProvider
from interspace.util.di.base import ProviderBase


class ChainProvider(ProviderBase):
    """Chain component base."""

    __mock_component__ = "chain"


class ProdChainProvider(ChainProvider):
    """Production chain provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_nonce_provider(self, settings: ChainSettings) -> NonceProvider:
        """Provide authorization nonce source.

        Chains with a configured RPC endpoint read the account nonce from
        the node; other chains fall back to millisecond timestamps.
        """
        return ChainNonceProvider(
            rpc=RpcNonceProvider(
                rpc_urls=settings.rpc_urls, timeout=settings.rpc_timeout_seconds
            ),
            fallback=ClockNonceProvider(),
        )
