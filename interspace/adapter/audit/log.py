"""Audit log sinks."""

import logfire

from interspace.domain.service.audit import AuditEvent, AuditLog


class LogfireAuditLog(AuditLog):
    """Writes audit events as structured logfire records."""

    async def log(self, event: AuditEvent) -> None:
        """Emit the event under the `audit` tag."""
        logfire.info(
            "Audit {action}",
            action=event.action,
            resource=event.resource,
            resource_id=event.resource_id,
            account_id=str(event.account_id) if event.account_id else None,
            profile_id=str(event.profile_id) if event.profile_id else None,
            details=event.details,
            occurred_at=event.occurred_at.isoformat(),
            _tags=["audit"],
        )


class InMemoryAuditLog(AuditLog):
    """Keeps audit events in a list, for tests."""

    def __init__(self) -> None:
        self.events: list[AuditEvent] = []

    async def log(self, event: AuditEvent) -> None:
        """Append the event."""
        self.events.append(event)

    def actions(self) -> list[str]:
        """Recorded actions, in order."""
        return [event.action for event in self.events]
