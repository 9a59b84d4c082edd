"""In-memory profile membership repository for testing."""

from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from interspace.domain.model.profile import ProfileAccount
from interspace.domain.repository.profile_account import ProfileAccountRepository
from interspace.domain.value import AccountId, ProfileId


class InMemoryProfileAccountRepository(ProfileAccountRepository):
    """In-memory implementation of ProfileAccountRepository for testing."""

    def __init__(self) -> None:
        self._memberships: list[ProfileAccount] = []

    async def find(
        self, profile_id: ProfileId, account_id: AccountId
    ) -> Optional[ProfileAccount]:
        """Find the membership of an account in a profile."""
        for membership in self._memberships:
            if (
                membership.profile_id == profile_id
                and membership.account_id == account_id
            ):
                return membership
        return None

    async def find_by_account_ids(
        self, account_ids: Iterable[AccountId]
    ) -> list[ProfileAccount]:
        """Find memberships of any of the given accounts, oldest first."""
        ids = set(account_ids)
        return [m for m in self._memberships if m.account_id in ids]

    async def find_by_profile(self, profile_id: ProfileId) -> list[ProfileAccount]:
        """Find the memberships of a profile, oldest first."""
        return [m for m in self._memberships if m.profile_id == profile_id]

    async def save(self, profile_account: ProfileAccount) -> ProfileAccount:
        """Save a membership.

        Raises:
            IntegrityError: If the account is already a member of the profile
        """
        for i, membership in enumerate(self._memberships):
            if membership.id == profile_account.id:
                self._memberships[i] = profile_account
                return profile_account

        if await self.find(profile_account.profile_id, profile_account.account_id):
            raise IntegrityError("Duplicate profile membership", None, Exception())

        self._memberships.append(profile_account)
        return profile_account
