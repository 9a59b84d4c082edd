"""Profile repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from interspace.domain.model.profile import Profile
from interspace.domain.value import ProfileId


class ProfileRepository(ABC):
    """Repository for Profile aggregate."""

    @abstractmethod
    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a profile by ID.

        Args:
            profile_id: The profile's unique identifier

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, profile_ids: Iterable[ProfileId]) -> list[Profile]:
        """Find all profiles with the given IDs (unknown IDs are skipped)."""
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Save a profile (create or update)."""
        pass
