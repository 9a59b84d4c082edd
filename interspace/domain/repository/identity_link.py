"""Identity link repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.value import AccountId


class IdentityLinkRepository(ABC):
    """Repository for the identity graph's edges.

    Pairs are looked up in canonical order (see IdentityLink.canonical_pair).
    """

    @abstractmethod
    async def find(
        self, account_a_id: AccountId, account_b_id: AccountId
    ) -> Optional[IdentityLink]:
        """Find the edge between two accounts, in either argument order.

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_account(self, account_id: AccountId) -> list[IdentityLink]:
        """Get every edge touching an account, isolated ones included."""
        pass

    @abstractmethod
    async def find_closure_edges(
        self, account_ids: Iterable[AccountId]
    ) -> list[IdentityLink]:
        """Get the non-isolated edges touching any of the given accounts.

        Used by closure traversal to expand a whole frontier per query.
        """
        pass

    @abstractmethod
    async def save(self, link: IdentityLink) -> IdentityLink:
        """Insert the link or update the existing row for its pair."""
        pass

    @abstractmethod
    async def delete(self, account_a_id: AccountId, account_b_id: AccountId) -> bool:
        """Delete the edge between two accounts.

        Returns:
            True if an edge was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def lock_graph(self) -> None:
        """Serialize graph mutations for the rest of the current transaction.

        Guards the read-then-write cycle check against concurrent linkers.
        """
        pass
