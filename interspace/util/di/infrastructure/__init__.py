"""Infrastructure providers."""

# Import bases
from .audit import AuditProvider
from .chain import ChainProvider
from .email import EmailProvider
from .persistence import PersistenceProvider
from .session_wallet import SessionWalletProvider

# Import implementations (needed for __subclasses__())
from .audit import ProdAuditProvider  # noqa: F401
from .chain import ProdChainProvider  # noqa: F401
from .email import ProdEmailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .session_wallet import ProdSessionWalletProvider  # noqa: F401

__all__ = [
    "AuditProvider",
    "ChainProvider",
    "EmailProvider",
    "PersistenceProvider",
    "ProdAuditProvider",
    "ProdChainProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
    "ProdSessionWalletProvider",
    "SessionWalletProvider",
]
