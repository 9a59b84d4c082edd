"""Identity challenge repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from interspace.domain.model.identity_challenge import IdentityChallenge
from interspace.domain.value import ChallengeId


class IdentityChallengeRepository(ABC):
    """Repository for proof-of-control challenges."""

    @abstractmethod
    async def find_by_id(
        self, challenge_id: ChallengeId
    ) -> Optional[IdentityChallenge]:
        """Find a challenge by ID.

        Args:
            challenge_id: The challenge's unique identifier

        Returns:
            The challenge if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, challenge: IdentityChallenge) -> IdentityChallenge:
        """Save a challenge (create or update)."""
        pass

    @abstractmethod
    async def consume(self, challenge_id: ChallengeId, now: datetime) -> bool:
        """Mark a challenge used unless it already is.

        Args:
            challenge_id: Challenge to consume
            now: Consumption time

        Returns:
            True if this call consumed it, False if it was already used
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete challenges that expired before now.

        Returns:
            Number of deleted challenges
        """
        pass
