"""In-memory identity link repository for testing."""

from typing import Iterable, Optional

from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.repository.identity_link import IdentityLinkRepository
from interspace.domain.value import AccountId


class InMemoryIdentityLinkRepository(IdentityLinkRepository):
    """In-memory implementation of IdentityLinkRepository for testing."""

    def __init__(self) -> None:
        self._links: dict[tuple[AccountId, AccountId], IdentityLink] = {}

    async def find(
        self, account_a_id: AccountId, account_b_id: AccountId
    ) -> Optional[IdentityLink]:
        """Find the edge between two accounts."""
        return self._links.get(IdentityLink.canonical_pair(account_a_id, account_b_id))

    async def find_by_account(self, account_id: AccountId) -> list[IdentityLink]:
        """Find every edge touching an account."""
        return [
            link
            for link in self._links.values()
            if account_id in (link.account_a_id, link.account_b_id)
        ]

    async def find_closure_edges(
        self, account_ids: Iterable[AccountId]
    ) -> list[IdentityLink]:
        """Find the linked/partial edges touching any of the given accounts."""
        ids = set(account_ids)
        return [
            link
            for link in self._links.values()
            if link.privacy_mode.joins_closure
            and (link.account_a_id in ids or link.account_b_id in ids)
        ]

    async def save(self, link: IdentityLink) -> IdentityLink:
        """Insert or update the link for its pair."""
        self._links[(link.account_a_id, link.account_b_id)] = link
        return link

    async def delete(self, account_a_id: AccountId, account_b_id: AccountId) -> bool:
        """Delete the edge between two accounts."""
        key = IdentityLink.canonical_pair(account_a_id, account_b_id)
        return self._links.pop(key, None) is not None

    async def lock_graph(self) -> None:
        """No-op: a single event loop already serializes in-memory mutations."""
        return None
