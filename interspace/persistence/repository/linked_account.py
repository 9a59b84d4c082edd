"""Linked account repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.repository.linked_account import LinkedAccountRepository
from interspace.domain.value import EthAddress, LinkedAccountId, ProfileId
from interspace.persistence.mappers import linked_account_to_dict, row_to_linked_account
from interspace.persistence.tables import linked_accounts_table


class PostgresLinkedAccountRepository(LinkedAccountRepository):
    """PostgreSQL implementation of LinkedAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(
        self, linked_account_id: LinkedAccountId
    ) -> Optional[LinkedAccount]:
        """Get linked account by ID."""
        stmt = select(linked_accounts_table).where(
            linked_accounts_table.c.id == linked_account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_linked_account(dict(row))

    async def find_by_profile(
        self, profile_id: ProfileId, active_only: bool = True
    ) -> list[LinkedAccount]:
        """Get the linked accounts of a profile, oldest first."""
        stmt = select(linked_accounts_table).where(
            linked_accounts_table.c.profile_id == profile_id
        )
        if active_only:
            stmt = stmt.where(linked_accounts_table.c.is_active == True)  # noqa: E712
        stmt = stmt.order_by(linked_accounts_table.c.created_at)

        result = await self.session.execute(stmt)
        return [row_to_linked_account(dict(row)) for row in result.mappings().all()]

    async def find_by_profile_and_address(
        self, profile_id: ProfileId, address: EthAddress
    ) -> Optional[LinkedAccount]:
        """Get a profile's linked account by address, active or not."""
        stmt = select(linked_accounts_table).where(
            linked_accounts_table.c.profile_id == profile_id,
            linked_accounts_table.c.address == address.root,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_linked_account(dict(row))

    async def save(self, linked_account: LinkedAccount) -> LinkedAccount:
        """Save linked account to database.

        Raises:
            IntegrityError: If the address is already linked to the profile
        """
        linked_dict = linked_account_to_dict(linked_account)

        existing = await self.find_by_id(linked_account.id)

        if existing:
            stmt = (
                linked_accounts_table.update()
                .where(linked_accounts_table.c.id == linked_account.id)
                .values(**linked_dict)
            )
            await self.session.execute(stmt)
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    linked_accounts_table.insert().values(**linked_dict)
                )

        await self.session.flush()
        return linked_account
