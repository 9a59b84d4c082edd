"""Strongly typed identifiers for Interspace domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
ProfileId = NewType("ProfileId", UUID)
ProfileAccountId = NewType("ProfileAccountId", UUID)
LinkedAccountId = NewType("LinkedAccountId", UUID)
DelegationId = NewType("DelegationId", UUID)
ChallengeId = NewType("ChallengeId", UUID)
