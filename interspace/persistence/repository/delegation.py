"""Account delegation repository implementation using PostgreSQL."""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.repository.delegation import DelegationRepository
from interspace.domain.value import (
    DelegationId,
    DelegationStatus,
    EthAddress,
    LinkedAccountId,
)
from interspace.persistence.mappers import delegation_to_dict, row_to_delegation
from interspace.persistence.tables import (
    OPEN_DELEGATION_STATUSES,
    account_delegations_table,
    linked_accounts_table,
)

USABLE_STATUSES = [status.value for status in DelegationStatus if status.is_usable]


class PostgresDelegationRepository(DelegationRepository):
    """PostgreSQL implementation of DelegationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(
        self, delegation_id: DelegationId
    ) -> Optional[AccountDelegation]:
        """Get delegation by ID."""
        stmt = select(account_delegations_table).where(
            account_delegations_table.c.id == delegation_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_delegation(dict(row))

    async def find_open(
        self,
        linked_account_id: LinkedAccountId,
        delegated_address: EthAddress,
        chain_id: int,
    ) -> Optional[AccountDelegation]:
        """Get the open delegation for a tuple, row-locked for the transaction."""
        stmt = (
            select(account_delegations_table)
            .where(
                account_delegations_table.c.linked_account_id == linked_account_id,
                account_delegations_table.c.delegated_address
                == delegated_address.root,
                account_delegations_table.c.chain_id == chain_id,
                account_delegations_table.c.status.in_(OPEN_DELEGATION_STATUSES),
            )
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_delegation(dict(row))

    async def find_usable_for_address(
        self,
        linked_address: EthAddress,
        delegated_address: EthAddress,
        chain_id: int,
        now: datetime,
    ) -> Optional[AccountDelegation]:
        """Get a signed/active, unexpired delegation by linked EOA address."""
        stmt = (
            select(account_delegations_table)
            .join(
                linked_accounts_table,
                linked_accounts_table.c.id
                == account_delegations_table.c.linked_account_id,
            )
            .where(
                linked_accounts_table.c.address == linked_address.root,
                linked_accounts_table.c.is_active == True,  # noqa: E712
                account_delegations_table.c.delegated_address
                == delegated_address.root,
                account_delegations_table.c.chain_id == chain_id,
                account_delegations_table.c.status.in_(USABLE_STATUSES),
                or_(
                    account_delegations_table.c.expires_at.is_(None),
                    account_delegations_table.c.expires_at > now,
                ),
            )
            .order_by(account_delegations_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_delegation(dict(row))

    async def find_by_linked_accounts(
        self, linked_account_ids: Iterable[LinkedAccountId]
    ) -> list[AccountDelegation]:
        """Get every delegation of the given linked accounts, newest first."""
        ids = list(linked_account_ids)
        if not ids:
            return []

        stmt = (
            select(account_delegations_table)
            .where(account_delegations_table.c.linked_account_id.in_(ids))
            .order_by(account_delegations_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_delegation(dict(row)) for row in result.mappings().all()]

    async def save(self, delegation: AccountDelegation) -> AccountDelegation:
        """Save delegation to database.

        Inserts run in a savepoint; the partial unique index on open
        delegations turns a concurrent second insert into IntegrityError.

        Raises:
            IntegrityError: If another open delegation exists for the tuple
        """
        delegation_dict = delegation_to_dict(delegation)

        stmt = select(account_delegations_table.c.id).where(
            account_delegations_table.c.id == delegation.id
        )
        exists = (await self.session.execute(stmt)).first() is not None

        if exists:
            await self.session.execute(
                account_delegations_table.update()
                .where(account_delegations_table.c.id == delegation.id)
                .values(**delegation_dict)
            )
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    account_delegations_table.insert().values(**delegation_dict)
                )

        await self.session.flush()
        return delegation
