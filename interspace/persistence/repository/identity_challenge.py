"""Identity challenge repository implementation using PostgreSQL."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from interspace.domain.model.identity_challenge import IdentityChallenge
from interspace.domain.repository.identity_challenge import (
    IdentityChallengeRepository,
)
from interspace.domain.value import ChallengeId
from interspace.persistence.mappers import (
    identity_challenge_to_dict,
    row_to_identity_challenge,
)
from interspace.persistence.tables import identity_challenges_table


class PostgresIdentityChallengeRepository(IdentityChallengeRepository):
    """PostgreSQL implementation of IdentityChallengeRepository.

    Every call runs in its own short transaction. A failed code attempt
    or a consumed challenge stays recorded even when the request that
    checked it is rolled back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(
        self, challenge_id: ChallengeId
    ) -> Optional[IdentityChallenge]:
        """Get challenge by ID."""
        stmt = select(identity_challenges_table).where(
            identity_challenges_table.c.id == challenge_id
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()

        if not row:
            return None

        return row_to_identity_challenge(dict(row))

    async def save(self, challenge: IdentityChallenge) -> IdentityChallenge:
        """Insert a challenge, or update the attempt count of a stored one."""
        challenge_dict = identity_challenge_to_dict(challenge)

        async with self.session_factory.begin() as session:
            stmt = (
                update(identity_challenges_table)
                .where(identity_challenges_table.c.id == challenge.id)
                .values(attempts=challenge.attempts)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.execute(
                    identity_challenges_table.insert().values(**challenge_dict)
                )

        return challenge

    async def consume(self, challenge_id: ChallengeId, now: datetime) -> bool:
        """Set consumed_at in a single conditional update."""
        stmt = (
            update(identity_challenges_table)
            .where(
                identity_challenges_table.c.id == challenge_id,
                identity_challenges_table.c.consumed_at.is_(None),
            )
            .values(consumed_at=now)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
        return result.rowcount == 1

    async def delete_expired(self, now: datetime) -> int:
        """Delete challenges whose expiry has passed."""
        stmt = delete(identity_challenges_table).where(
            identity_challenges_table.c.expires_at < now
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
        return result.rowcount
