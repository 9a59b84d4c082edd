"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .delegation import InMemoryDelegationRepository
from .identity_challenge import InMemoryIdentityChallengeRepository
from .identity_link import InMemoryIdentityLinkRepository
from .linked_account import InMemoryLinkedAccountRepository
from .profile import InMemoryProfileRepository
from .profile_account import InMemoryProfileAccountRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryDelegationRepository",
    "InMemoryIdentityChallengeRepository",
    "InMemoryIdentityLinkRepository",
    "InMemoryLinkedAccountRepository",
    "InMemoryProfileAccountRepository",
    "InMemoryProfileRepository",
]
