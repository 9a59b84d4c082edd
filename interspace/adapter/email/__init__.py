"""Outbound email adapters."""

from .sender import HttpEmailSender, MockEmailSender

__all__ = ["HttpEmailSender", "MockEmailSender"]
