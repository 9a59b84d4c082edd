"""In-memory account repository for testing."""

from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from interspace.domain.model.account import Account
from interspace.domain.repository.account import AccountRepository
from interspace.domain.value import AccountId, AccountType


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_ids(self, account_ids: Iterable[AccountId]) -> list[Account]:
        """Find accounts by IDs."""
        return [self._accounts[i] for i in account_ids if i in self._accounts]

    async def find_by_identity(
        self, account_type: AccountType, provider: Optional[str], identifier: str
    ) -> Optional[Account]:
        """Find an account by (type, provider, identifier)."""
        for account in self._accounts.values():
            if (
                account.type == account_type
                and account.provider == provider
                and account.identifier == identifier
            ):
                return account
        return None

    async def save(self, account: Account) -> Account:
        """Save an account.

        Raises:
            IntegrityError: If another account has the same identity
        """
        existing = await self.find_by_identity(
            account.type, account.provider, account.identifier
        )
        if existing and existing.id != account.id:
            raise IntegrityError("Duplicate account identity", None, Exception())

        self._accounts[account.id] = account
        return account
