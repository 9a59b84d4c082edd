"""Unit tests for audit logging."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from interspace.adapter.audit import InMemoryAuditLog, LogfireAuditLog
from interspace.domain.service import AuditEvent, AuditLogger
from interspace.domain.value import AccountId


class TestAuditLogger:
    """Tests for the fire-and-forget audit front."""

    @pytest.mark.asyncio
    async def test_records_event_with_details(self):
        # Arrange
        audit_log = InMemoryAuditLog()
        logger = AuditLogger(audit_log=audit_log)
        account_id = AccountId(uuid4())

        # Act
        await logger.record(
            "delegation.revoked",
            "delegation",
            resource_id="abc",
            account_id=account_id,
            chain_id=1,
        )

        # Assert
        event = audit_log.events[0]
        assert event.action == "delegation.revoked"
        assert event.resource == "delegation"
        assert event.resource_id == "abc"
        assert event.account_id == account_id
        assert event.details == {"chain_id": 1}

    @pytest.mark.asyncio
    async def test_failing_sink_is_swallowed(self):
        """Audit failures never propagate to the audited operation."""
        audit_log = InMemoryAuditLog()
        audit_log.log = AsyncMock(side_effect=RuntimeError("sink down"))
        logger = AuditLogger(audit_log=audit_log)

        await logger.record("delegation.stored", "delegation")

        audit_log.log.assert_awaited_once()


class TestLogfireAuditLog:
    @pytest.mark.asyncio
    async def test_log_does_not_raise_without_configuration(self):
        event = AuditEvent(action="account.linked", resource="identity_link")

        await LogfireAuditLog().log(event)
