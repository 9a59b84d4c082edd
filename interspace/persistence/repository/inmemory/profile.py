"""In-memory profile repository for testing."""

from typing import Iterable, Optional

from interspace.domain.model.profile import Profile
from interspace.domain.repository.profile import ProfileRepository
from interspace.domain.value import ProfileId


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self) -> None:
        self._profiles: dict[ProfileId, Profile] = {}

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a profile by ID."""
        return self._profiles.get(profile_id)

    async def find_by_ids(self, profile_ids: Iterable[ProfileId]) -> list[Profile]:
        """Find profiles by IDs."""
        return [self._profiles[i] for i in profile_ids if i in self._profiles]

    async def save(self, profile: Profile) -> Profile:
        """Save a profile."""
        self._profiles[profile.id] = profile
        return profile
