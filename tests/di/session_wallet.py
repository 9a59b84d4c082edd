"""Mock session wallet providers for testing."""

from dishka import Scope, provide

from interspace.adapter.session_wallet import MockSessionWalletClient
from interspace.domain.service import SessionWalletClient
from interspace.util.di.infrastructure.session_wallet import SessionWalletProvider


class MockSessionWalletProvider(SessionWalletProvider):
    """Mock session wallet provider recording calls in memory."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_session_wallet_client(self) -> SessionWalletClient:
        """Provide mock session wallet client."""
        return MockSessionWalletClient()
