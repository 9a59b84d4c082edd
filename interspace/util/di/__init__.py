"""Dependency injection module."""

from typing import Type

from interspace.util.di.application import ProdApplicationProvider
from interspace.util.di.base import Component, ProviderBase
from interspace.util.di.core import ProdConfigProvider
from interspace.util.di.domain import ProdDomainProvider
from interspace.util.di.infrastructure import (
    AuditProvider,
    ChainProvider,
    EmailProvider,
    PersistenceProvider,
    ProdAuditProvider,
    ProdChainProvider,
    ProdEmailProvider,
    ProdPersistenceProvider,
    ProdSessionWalletProvider,
    SessionWalletProvider,
)

# Instantiation order; mockable components resolve through get_provider
PROVIDERS: list[Type[ProviderBase]] = [
    # Always production
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Swappable for tests
    PersistenceProvider,
    SessionWalletProvider,
    ChainProvider,
    AuditProvider,
    EmailProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve the provider class to instantiate for a PROVIDERS entry.

    Core providers have no subclasses and are returned unchanged.
    Mockable components declare one production and one mock subclass,
    told apart by their __is_mock__ flag.

    Raises:
        ValueError: If the component has no implementation of the wanted kind
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    by_kind = {getattr(c, "__is_mock__", False): c for c in implementations}
    if use_mock not in by_kind:
        kind = "mock" if use_mock else "production"
        component = getattr(base, "__mock_component__", None) or base.__name__
        raise ValueError(f"No {kind} implementation for {component}")
    return by_kind[use_mock]


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "AuditProvider",
    "ChainProvider",
    "EmailProvider",
    "PersistenceProvider",
    "SessionWalletProvider",
    # Infrastructure implementations
    "ProdAuditProvider",
    "ProdChainProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
    "ProdSessionWalletProvider",
]
