"""In-memory identity challenge repository for testing."""

from datetime import datetime
from typing import Optional

from interspace.domain.model.identity_challenge import IdentityChallenge
from interspace.domain.repository.identity_challenge import (
    IdentityChallengeRepository,
)
from interspace.domain.value import ChallengeId


class InMemoryIdentityChallengeRepository(IdentityChallengeRepository):
    """In-memory implementation of IdentityChallengeRepository for testing."""

    def __init__(self) -> None:
        self._challenges: dict[ChallengeId, IdentityChallenge] = {}

    async def find_by_id(
        self, challenge_id: ChallengeId
    ) -> Optional[IdentityChallenge]:
        """Find a challenge by ID."""
        return self._challenges.get(challenge_id)

    async def save(self, challenge: IdentityChallenge) -> IdentityChallenge:
        """Save a challenge."""
        self._challenges[challenge.id] = challenge
        return challenge

    async def consume(self, challenge_id: ChallengeId, now: datetime) -> bool:
        """Mark a challenge used unless it already is."""
        challenge = self._challenges.get(challenge_id)
        if challenge is None or challenge.is_consumed:
            return False
        self._challenges[challenge_id] = challenge.model_copy(
            update={"consumed_at": now}
        )
        return True

    async def delete_expired(self, now: datetime) -> int:
        """Delete challenges that expired before now."""
        expired = [c.id for c in self._challenges.values() if c.expires_at < now]
        for challenge_id in expired:
            del self._challenges[challenge_id]
        return len(expired)
