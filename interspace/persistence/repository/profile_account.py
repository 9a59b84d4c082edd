"""Profile membership repository implementation using PostgreSQL."""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.profile import ProfileAccount
from interspace.domain.repository.profile_account import ProfileAccountRepository
from interspace.domain.value import AccountId, ProfileId
from interspace.persistence.mappers import (
    profile_account_to_dict,
    row_to_profile_account,
)
from interspace.persistence.tables import profile_accounts_table


class PostgresProfileAccountRepository(ProfileAccountRepository):
    """PostgreSQL implementation of ProfileAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find(
        self, profile_id: ProfileId, account_id: AccountId
    ) -> Optional[ProfileAccount]:
        """Get the membership of an account in a profile."""
        stmt = select(profile_accounts_table).where(
            profile_accounts_table.c.profile_id == profile_id,
            profile_accounts_table.c.account_id == account_id,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_profile_account(dict(row))

    async def find_by_account_ids(
        self, account_ids: Iterable[AccountId]
    ) -> list[ProfileAccount]:
        """Get memberships of any of the given accounts, oldest first."""
        ids = list(account_ids)
        if not ids:
            return []

        stmt = (
            select(profile_accounts_table)
            .where(profile_accounts_table.c.account_id.in_(ids))
            .order_by(profile_accounts_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_profile_account(dict(row)) for row in result.mappings().all()]

    async def find_by_profile(self, profile_id: ProfileId) -> list[ProfileAccount]:
        """Get the memberships of a profile, oldest first."""
        stmt = (
            select(profile_accounts_table)
            .where(profile_accounts_table.c.profile_id == profile_id)
            .order_by(profile_accounts_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_profile_account(dict(row)) for row in result.mappings().all()]

    async def save(self, profile_account: ProfileAccount) -> ProfileAccount:
        """Save a membership.

        Raises:
            IntegrityError: If the account is already a member of the profile
        """
        membership_dict = profile_account_to_dict(profile_account)

        stmt = select(profile_accounts_table.c.id).where(
            profile_accounts_table.c.id == profile_account.id
        )
        exists = (await self.session.execute(stmt)).first() is not None

        if exists:
            await self.session.execute(
                profile_accounts_table.update()
                .where(profile_accounts_table.c.id == profile_account.id)
                .values(**membership_dict)
            )
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    profile_accounts_table.insert().values(**membership_dict)
                )

        await self.session.flush()
        return profile_account
