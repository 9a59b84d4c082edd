"""PostgreSQL repository implementations."""

from interspace.persistence.repository.account import PostgresAccountRepository
from interspace.persistence.repository.delegation import PostgresDelegationRepository
from interspace.persistence.repository.identity_challenge import (
    PostgresIdentityChallengeRepository,
)
from interspace.persistence.repository.identity_link import (
    PostgresIdentityLinkRepository,
)
from interspace.persistence.repository.linked_account import (
    PostgresLinkedAccountRepository,
)
from interspace.persistence.repository.profile import PostgresProfileRepository
from interspace.persistence.repository.profile_account import (
    PostgresProfileAccountRepository,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresIdentityLinkRepository",
    "PostgresProfileRepository",
    "PostgresProfileAccountRepository",
    "PostgresLinkedAccountRepository",
    "PostgresDelegationRepository",
    "PostgresIdentityChallengeRepository",
]
