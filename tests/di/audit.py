"""Mock audit providers for testing."""

from dishka import Scope, provide

from interspace.adapter.audit import InMemoryAuditLog
from interspace.domain.service import AuditLog
from interspace.util.di.infrastructure.audit import AuditProvider


class MockAuditProvider(AuditProvider):
    """Mock audit provider keeping events in memory."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_audit_log(self) -> AuditLog:
        """Provide in-memory audit log."""
        return InMemoryAuditLog()
