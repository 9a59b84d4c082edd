"""Domain value objects for Interspace."""

from interspace.domain.value.identifiers import (
    AccountId,
    ChallengeId,
    DelegationId,
    LinkedAccountId,
    ProfileAccountId,
    ProfileId,
)
from interspace.domain.value.types import (
    ZERO_ADDRESS,
    AccountType,
    DelegationStatus,
    EthAddress,
    ExecutionPath,
    LinkType,
    PrivacyMode,
    parse_quantity,
)

__all__ = [
    # Identifiers
    "AccountId",
    "ProfileId",
    "ProfileAccountId",
    "LinkedAccountId",
    "DelegationId",
    "ChallengeId",
    # Types
    "AccountType",
    "PrivacyMode",
    "LinkType",
    "DelegationStatus",
    "ExecutionPath",
    "EthAddress",
    "ZERO_ADDRESS",
    "parse_quantity",
]
