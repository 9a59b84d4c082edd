"""Email infrastructure providers."""

from dishka import Scope, provide

from interspace.adapter.email import HttpEmailSender
from interspace.config import EmailSettings
from interspace.domain.service import EmailSender
from interspace.util.di.base import ProviderBase


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_sender(self, settings: EmailSettings) -> EmailSender:
        """Provide HTTP email sender."""
        return HttpEmailSender(
            api_url=settings.api_url,
            api_key=settings.api_key,
            from_address=settings.from_address,
            timeout=settings.timeout_seconds,
        )
