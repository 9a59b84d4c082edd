"""Profile repository implementation using PostgreSQL."""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from interspace.domain.model.profile import Profile
from interspace.domain.repository.profile import ProfileRepository
from interspace.domain.value import ProfileId
from interspace.persistence.mappers import profile_to_dict, row_to_profile
from interspace.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Get profile by ID."""
        stmt = select(profiles_table).where(profiles_table.c.id == profile_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_profile(dict(row))

    async def find_by_ids(self, profile_ids: Iterable[ProfileId]) -> list[Profile]:
        """Get profiles by IDs, skipping unknown ones."""
        ids = list(profile_ids)
        if not ids:
            return []

        stmt = select(profiles_table).where(profiles_table.c.id.in_(ids))
        result = await self.session.execute(stmt)
        return [row_to_profile(dict(row)) for row in result.mappings().all()]

    async def save(self, profile: Profile) -> Profile:
        """Save profile to database."""
        profile_dict = profile_to_dict(profile)

        existing = await self.find_by_id(profile.id)

        if existing:
            stmt = (
                profiles_table.update()
                .where(profiles_table.c.id == profile.id)
                .values(**profile_dict)
            )
        else:
            stmt = profiles_table.insert().values(**profile_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return profile
