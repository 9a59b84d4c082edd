"""Mock providers for testing."""

from .audit import MockAuditProvider
from .chain import MockChainProvider
from .container import build_test_container
from .email import MockEmailProvider
from .persistence import MockPersistenceProvider
from .session_wallet import MockSessionWalletProvider

__all__ = [
    "MockAuditProvider",
    "MockChainProvider",
    "MockEmailProvider",
    "MockPersistenceProvider",
    "MockSessionWalletProvider",
    "build_test_container",
]
