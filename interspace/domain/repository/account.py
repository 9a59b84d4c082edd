"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from interspace.domain.model.account import Account
from interspace.domain.value import AccountId, AccountType


class AccountRepository(ABC):
    """Repository for Account entity.

    Accounts are never deleted, so there is no delete operation.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, account_ids: Iterable[AccountId]) -> list[Account]:
        """Find all accounts with the given IDs (unknown IDs are skipped)."""
        pass

    @abstractmethod
    async def find_by_identity(
        self, account_type: AccountType, provider: Optional[str], identifier: str
    ) -> Optional[Account]:
        """Find an account by its unique (type, provider, identifier) key.

        Args:
            account_type: Kind of identity
            provider: Identity provider, None for provider-less types
            identifier: Lower-cased identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        Raises:
            IntegrityError: If another account already has the same identity key
        """
        pass
