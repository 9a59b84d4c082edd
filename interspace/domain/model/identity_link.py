"""Identity link entity.

Undirected edge of the identity graph. Stored with the two account ids in
canonical order so each unordered pair maps to exactly one row.
"""

from datetime import datetime

from pydantic import Field, model_validator

from interspace.domain.model.common import DomainModel, utcnow
from interspace.domain.value import AccountId, LinkType, PrivacyMode


class IdentityLink(DomainModel):
    """Edge between two accounts with a per-edge privacy mode."""

    account_a_id: AccountId
    account_b_id: AccountId
    privacy_mode: PrivacyMode = PrivacyMode.LINKED
    link_type: LinkType = LinkType.DIRECT
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_pair(self) -> "IdentityLink":
        """Reject self-loops and non-canonical ordering."""
        if self.account_a_id == self.account_b_id:
            raise ValueError("An account cannot be linked to itself")
        if str(self.account_a_id) > str(self.account_b_id):
            raise ValueError("Link endpoints must be in canonical order")
        return self

    @staticmethod
    def canonical_pair(
        first: AccountId, second: AccountId
    ) -> tuple[AccountId, AccountId]:
        """Order two account ids the way links are stored."""
        a, b = sorted((first, second), key=str)
        return a, b

    @classmethod
    def between(
        cls,
        first: AccountId,
        second: AccountId,
        privacy_mode: PrivacyMode = PrivacyMode.LINKED,
        link_type: LinkType = LinkType.DIRECT,
    ) -> "IdentityLink":
        """Build a link for an unordered pair of accounts."""
        a, b = cls.canonical_pair(first, second)
        return cls(
            account_a_id=a,
            account_b_id=b,
            privacy_mode=privacy_mode,
            link_type=link_type,
        )

    def other(self, account_id: AccountId) -> AccountId:
        """Endpoint opposite to account_id."""
        if account_id == self.account_a_id:
            return self.account_b_id
        return self.account_a_id
