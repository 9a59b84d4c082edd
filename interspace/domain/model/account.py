"""Account entity.

Canonical identity record created the first time an identifier
authenticates (wallet, email, social login, passkey or guest).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from interspace.domain.model.common import DomainModel, utcnow
from interspace.domain.value import AccountId, AccountType


class Account(DomainModel):
    """Identity record, unique per (type, provider, identifier)."""

    id: AccountId
    type: AccountType
    provider: Optional[str] = None  # e.g. 'google', 'telegram'; None for wallets
    identifier: str  # Lower-cased address, email, provider user id...
    verified: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def with_merged_metadata(self, metadata: dict[str, Any]) -> "Account":
        """Return a copy with metadata merged in.

        New keys are added, existing keys overwritten and absent keys kept.
        """
        return self.model_copy(
            update={
                "metadata": {**self.metadata, **metadata},
                "updated_at": utcnow(),
            }
        )

    @property
    def wallet_address(self) -> Optional[str]:
        """Address of the wallet this account controls, if any."""
        if self.type == AccountType.WALLET:
            return self.identifier
        address = self.metadata.get("walletAddress")
        return address.lower() if isinstance(address, str) else None
