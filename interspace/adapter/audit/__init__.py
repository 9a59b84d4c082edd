"""Audit log adapters."""

from .log import InMemoryAuditLog, LogfireAuditLog

__all__ = ["InMemoryAuditLog", "LogfireAuditLog"]
