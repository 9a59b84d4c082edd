"""Session wallet infrastructure providers."""

from dishka import Scope, provide

from interspace.adapter.session_wallet import HttpSessionWalletClient
from interspace.config import SessionWalletSettings
from interspace.domain.service import SessionWalletClient
from interspace.util.di.base import ProviderBase


class SessionWalletProvider(ProviderBase):
    """Session wallet component base."""

    __mock_component__ = "session_wallet"


class ProdSessionWalletProvider(SessionWalletProvider):
    """Production session wallet provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_session_wallet_client(
        self, settings: SessionWalletSettings
    ) -> SessionWalletClient:
        """Provide HTTP client for the session wallet service."""
        return HttpSessionWalletClient(
            base_url=settings.base_url,
            api_key=settings.api_key,
            timeout=settings.timeout_seconds,
        )
