"""Account repository implementation using PostgreSQL."""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.account import Account
from interspace.domain.repository.account import AccountRepository
from interspace.domain.value import AccountId, AccountType
from interspace.persistence.mappers import account_to_dict, row_to_account
from interspace.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Get account by ID."""
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_account(dict(row))

    async def find_by_ids(self, account_ids: Iterable[AccountId]) -> list[Account]:
        """Get accounts by IDs, skipping unknown ones."""
        ids = list(account_ids)
        if not ids:
            return []

        stmt = select(accounts_table).where(accounts_table.c.id.in_(ids))
        result = await self.session.execute(stmt)
        return [row_to_account(dict(row)) for row in result.mappings().all()]

    async def find_by_identity(
        self, account_type: AccountType, provider: Optional[str], identifier: str
    ) -> Optional[Account]:
        """Get account by (type, provider, identifier)."""
        provider_clause = (
            accounts_table.c.provider.is_(None)
            if provider is None
            else accounts_table.c.provider == provider
        )
        stmt = select(accounts_table).where(
            accounts_table.c.type == account_type.value,
            provider_clause,
            accounts_table.c.identifier == identifier,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_account(dict(row))

    async def save(self, account: Account) -> Account:
        """Save account to database.

        Inserts run in a savepoint so a duplicate identity only rolls back
        the insert itself.

        Raises:
            IntegrityError: If another account has the same identity
        """
        account_dict = account_to_dict(account)

        existing = await self.find_by_id(account.id)

        if existing:
            stmt = (
                accounts_table.update()
                .where(accounts_table.c.id == account.id)
                .values(**account_dict)
            )
            await self.session.execute(stmt)
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    accounts_table.insert().values(**account_dict)
                )

        await self.session.flush()
        return account
