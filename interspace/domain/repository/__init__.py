"""Repository interfaces for Interspace domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from interspace.domain.repository.account import AccountRepository
from interspace.domain.repository.delegation import DelegationRepository
from interspace.domain.repository.identity_challenge import IdentityChallengeRepository
from interspace.domain.repository.identity_link import IdentityLinkRepository
from interspace.domain.repository.linked_account import LinkedAccountRepository
from interspace.domain.repository.profile import ProfileRepository
from interspace.domain.repository.profile_account import ProfileAccountRepository

__all__ = [
    "AccountRepository",
    "IdentityLinkRepository",
    "ProfileRepository",
    "ProfileAccountRepository",
    "LinkedAccountRepository",
    "DelegationRepository",
    "IdentityChallengeRepository",
]
