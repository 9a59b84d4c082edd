"""Linked account entity.

An externally-owned account (EOA) attached to a profile. Unlike Account it
is address based and chain scoped.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from interspace.domain.model.common import DomainModel, utcnow
from interspace.domain.value import EthAddress, LinkedAccountId, ProfileId


class LinkedAccount(DomainModel):
    """EOA associated with a profile.

    Unlinking deactivates the row; it is never hard-deleted.
    """

    id: LinkedAccountId
    profile_id: ProfileId
    address: EthAddress
    chain_id: int = Field(default=1, gt=0)
    auth_strategy: str = "wallet"  # 'wallet' or the social provider name
    wallet_type: str = "external"
    custom_name: Optional[str] = None
    is_primary: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
