"""Identity link repository implementation using PostgreSQL."""

from typing import Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.repository.identity_link import IdentityLinkRepository
from interspace.domain.value import AccountId, PrivacyMode
from interspace.persistence.mappers import identity_link_to_dict, row_to_identity_link
from interspace.persistence.tables import identity_links_table

# pg_advisory_xact_lock key serializing identity graph mutations
GRAPH_LOCK_KEY = 0x1D3A7171

CLOSURE_MODES = [mode.value for mode in PrivacyMode if mode.joins_closure]


class PostgresIdentityLinkRepository(IdentityLinkRepository):
    """PostgreSQL implementation of IdentityLinkRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find(
        self, account_a_id: AccountId, account_b_id: AccountId
    ) -> Optional[IdentityLink]:
        """Get the edge between two accounts, in either argument order."""
        a, b = IdentityLink.canonical_pair(account_a_id, account_b_id)
        stmt = select(identity_links_table).where(
            identity_links_table.c.account_a_id == a,
            identity_links_table.c.account_b_id == b,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity_link(dict(row))

    async def find_by_account(self, account_id: AccountId) -> list[IdentityLink]:
        """Get every edge touching an account."""
        stmt = (
            select(identity_links_table)
            .where(
                or_(
                    identity_links_table.c.account_a_id == account_id,
                    identity_links_table.c.account_b_id == account_id,
                )
            )
            .order_by(identity_links_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_identity_link(dict(row)) for row in result.mappings().all()]

    async def find_closure_edges(
        self, account_ids: Iterable[AccountId]
    ) -> list[IdentityLink]:
        """Get the linked/partial edges touching any of the given accounts."""
        ids = list(account_ids)
        if not ids:
            return []

        stmt = (
            select(identity_links_table)
            .where(
                identity_links_table.c.privacy_mode.in_(CLOSURE_MODES),
                or_(
                    identity_links_table.c.account_a_id.in_(ids),
                    identity_links_table.c.account_b_id.in_(ids),
                ),
            )
            .order_by(identity_links_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_identity_link(dict(row)) for row in result.mappings().all()]

    async def save(self, link: IdentityLink) -> IdentityLink:
        """Insert the link or update the row for its pair.

        Raises:
            IntegrityError: If the pair was inserted concurrently
        """
        link_dict = identity_link_to_dict(link)

        existing = await self.find(link.account_a_id, link.account_b_id)

        if existing:
            stmt = (
                identity_links_table.update()
                .where(
                    identity_links_table.c.account_a_id == link.account_a_id,
                    identity_links_table.c.account_b_id == link.account_b_id,
                )
                .values(
                    privacy_mode=link_dict["privacy_mode"],
                    link_type=link_dict["link_type"],
                    updated_at=link_dict["updated_at"],
                )
            )
            await self.session.execute(stmt)
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    identity_links_table.insert().values(**link_dict)
                )

        await self.session.flush()
        return link

    async def delete(self, account_a_id: AccountId, account_b_id: AccountId) -> bool:
        """Delete the edge between two accounts."""
        a, b = IdentityLink.canonical_pair(account_a_id, account_b_id)
        stmt = identity_links_table.delete().where(
            identity_links_table.c.account_a_id == a,
            identity_links_table.c.account_b_id == b,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def lock_graph(self) -> None:
        """Take a transaction-scoped advisory lock on the identity graph."""
        await self.session.execute(select(func.pg_advisory_xact_lock(GRAPH_LOCK_KEY)))
