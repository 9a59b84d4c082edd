"""Profile account repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from interspace.domain.model.profile import ProfileAccount
from interspace.domain.value import AccountId, ProfileId


class ProfileAccountRepository(ABC):
    """Repository for account memberships in profiles."""

    @abstractmethod
    async def find(
        self, profile_id: ProfileId, account_id: AccountId
    ) -> Optional[ProfileAccount]:
        """Find the membership row for a (profile, account) pair."""
        pass

    @abstractmethod
    async def find_by_account_ids(
        self, account_ids: Iterable[AccountId]
    ) -> list[ProfileAccount]:
        """Get memberships of any of the given accounts, oldest first."""
        pass

    @abstractmethod
    async def find_by_profile(self, profile_id: ProfileId) -> list[ProfileAccount]:
        """Get all memberships of a profile, oldest first."""
        pass

    @abstractmethod
    async def save(self, profile_account: ProfileAccount) -> ProfileAccount:
        """Save a membership row.

        Raises:
            IntegrityError: If the (profile, account) pair already has a row
        """
        pass
