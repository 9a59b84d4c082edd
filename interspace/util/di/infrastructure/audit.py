"""Audit trail infrastructure providers."""

from dishka import Scope, provide

from interspace.adapter.audit import LogfireAuditLog
from interspace.domain.service import AuditLog
from interspace.util.di.base import ProviderBase


class AuditProvider(ProviderBase):
    """Audit component base."""

    __mock_component__ = "audit"


class ProdAuditProvider(AuditProvider):
    """Production audit provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_audit_log(self) -> AuditLog:
        """Provide audit log sink."""
        return LogfireAuditLog()
