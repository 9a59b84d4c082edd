"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from interspace.config import (
    AuthSettings,
    ChainSettings,
    DelegationSettings,
    EmailSettings,
    SessionWalletSettings,
    Settings,
)
from interspace.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_delegation_settings(self, settings: Settings) -> DelegationSettings:
        """Provide delegation lifecycle settings."""
        return settings.delegation

    @provide(scope=Scope.APP)
    def provide_chain_settings(self, settings: Settings) -> ChainSettings:
        """Provide chain access settings."""
        return settings.chain

    @provide(scope=Scope.APP)
    def provide_session_wallet_settings(
        self, settings: Settings
    ) -> SessionWalletSettings:
        """Provide session wallet service settings."""
        return settings.session_wallet

    @provide(scope=Scope.APP)
    def provide_email_settings(self, settings: Settings) -> EmailSettings:
        """Provide outbound email settings."""
        return settings.email
