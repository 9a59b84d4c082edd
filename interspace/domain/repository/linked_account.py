"""Linked account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.value import EthAddress, LinkedAccountId, ProfileId


class LinkedAccountRepository(ABC):
    """Repository for EOAs attached to profiles."""

    @abstractmethod
    async def find_by_id(
        self, linked_account_id: LinkedAccountId
    ) -> Optional[LinkedAccount]:
        """Find a linked account by ID.

        Args:
            linked_account_id: The linked account's unique identifier

        Returns:
            The linked account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_profile(
        self, profile_id: ProfileId, active_only: bool = True
    ) -> list[LinkedAccount]:
        """Get a profile's linked accounts, oldest first.

        Args:
            profile_id: Owning profile
            active_only: Skip deactivated accounts when True

        Returns:
            List of linked accounts (may be empty)
        """
        pass

    @abstractmethod
    async def find_by_profile_and_address(
        self, profile_id: ProfileId, address: EthAddress
    ) -> Optional[LinkedAccount]:
        """Find a profile's linked account by address, active or not."""
        pass

    @abstractmethod
    async def save(self, linked_account: LinkedAccount) -> LinkedAccount:
        """Save a linked account (create or update)."""
        pass
