"""In-memory linked account repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.repository.linked_account import LinkedAccountRepository
from interspace.domain.value import EthAddress, LinkedAccountId, ProfileId


class InMemoryLinkedAccountRepository(LinkedAccountRepository):
    """In-memory implementation of LinkedAccountRepository for testing."""

    def __init__(self) -> None:
        # Insertion ordered, so iteration is oldest first
        self._linked_accounts: dict[LinkedAccountId, LinkedAccount] = {}

    async def find_by_id(
        self, linked_account_id: LinkedAccountId
    ) -> Optional[LinkedAccount]:
        """Find a linked account by ID."""
        return self._linked_accounts.get(linked_account_id)

    async def find_by_profile(
        self, profile_id: ProfileId, active_only: bool = True
    ) -> list[LinkedAccount]:
        """Find the linked accounts of a profile, oldest first."""
        return [
            linked
            for linked in self._linked_accounts.values()
            if linked.profile_id == profile_id and (linked.is_active or not active_only)
        ]

    async def find_by_profile_and_address(
        self, profile_id: ProfileId, address: EthAddress
    ) -> Optional[LinkedAccount]:
        """Find a profile's linked account by address."""
        for linked in self._linked_accounts.values():
            if linked.profile_id == profile_id and linked.address == address:
                return linked
        return None

    async def save(self, linked_account: LinkedAccount) -> LinkedAccount:
        """Save a linked account.

        Raises:
            IntegrityError: If the address is already linked to the profile
        """
        existing = await self.find_by_profile_and_address(
            linked_account.profile_id, linked_account.address
        )
        if existing and existing.id != linked_account.id:
            raise IntegrityError("Duplicate linked address", None, Exception())

        self._linked_accounts[linked_account.id] = linked_account
        return linked_account

    def all(self) -> list[LinkedAccount]:
        """Every stored linked account, for lookups across profiles."""
        return list(self._linked_accounts.values())
