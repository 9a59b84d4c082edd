"""Audit trail for security relevant delegation actions."""

from datetime import datetime
from typing import Any, Optional

import logfire
from pydantic import Field

from interspace.domain.model.common import utcnow
from interspace.domain.value import AccountId, ProfileId
from interspace.domain.value.common import ValueObject

from .base import Service


class AuditEvent(ValueObject):
    """Single audit record."""

    action: str  # e.g. "delegation.revoked"
    resource: str
    resource_id: Optional[str] = None
    account_id: Optional[AccountId] = None
    profile_id: Optional[ProfileId] = None
    details: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=utcnow)


class AuditLog:
    """Sink for audit events."""

    async def log(self, event: AuditEvent) -> None:
        """Persist or forward an audit event."""
        raise NotImplementedError


class AuditLogger(Service):
    """Fire-and-forget front for an AuditLog.

    A failing sink is reported and otherwise ignored, so audit problems
    never undo the operation being audited.
    """

    def __init__(self, audit_log: AuditLog) -> None:
        """Initialize audit logger.

        Args:
            audit_log: Audit sink
        """
        self.audit_log = audit_log

    async def record(
        self,
        action: str,
        resource: str,
        resource_id: Optional[str] = None,
        account_id: Optional[AccountId] = None,
        profile_id: Optional[ProfileId] = None,
        **details: Any,
    ) -> None:
        """Record an audit event, never raising."""
        event = AuditEvent(
            action=action,
            resource=resource,
            resource_id=resource_id,
            account_id=account_id,
            profile_id=profile_id,
            details=details,
        )
        try:
            await self.audit_log.log(event)
        except Exception as e:
            logfire.error(
                "Failed to write audit event",
                action=action,
                resource_id=resource_id,
                error=str(e),
            )
