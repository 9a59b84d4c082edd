"""Mock chain providers for testing."""

from dishka import Scope, provide

from interspace.adapter.chain import MockNonceProvider
from interspace.domain.service import NonceProvider
from interspace.util.di.infrastructure.chain import ChainProvider


class MockChainProvider(ChainProvider):
    """Mock chain provider with per-address counting nonces."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_nonce_provider(self) -> NonceProvider:
        """Provide mock nonce source."""
        return MockNonceProvider()
