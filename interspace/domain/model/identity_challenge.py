"""Identity challenge entity.

A short-lived, single-use challenge proving that a caller controls a
wallet (by signing a message) or an email address (by echoing a code).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from interspace.domain.model.common import DomainModel, utcnow
from interspace.domain.value import AccountType, ChallengeId
from interspace.domain.value.common import ValueObject


class IdentityChallenge(DomainModel):
    """Outstanding proof-of-control challenge.

    Wallet challenges carry the message to sign; email challenges carry
    only a hash of the code that was mailed out.
    """

    id: ChallengeId
    account_type: AccountType
    identifier: str  # Normalized address or email
    message: Optional[str] = None
    code_hash: Optional[str] = None
    attempts: int = 0
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utcnow())

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None


class IdentityProof(ValueObject):
    """Evidence submitted with a sign-in or link request.

    Which fields apply depends on the identity type: wallets answer a
    challenge with a personal_sign signature, emails with the mailed
    code, and social or passkey identities with the upstream key of the
    service that authenticated them.
    """

    challenge_id: Optional[ChallengeId] = None
    signature: Optional[str] = None
    code: Optional[str] = None
    upstream_key: Optional[str] = None
