"""Session wallet service adapters."""

from .client import HttpSessionWalletClient, MockSessionWalletClient

__all__ = ["HttpSessionWalletClient", "MockSessionWalletClient"]
