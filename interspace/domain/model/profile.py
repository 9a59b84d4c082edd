"""Profile aggregate and its account memberships.

A profile owns one custodial session wallet. Accounts reach a profile
through ProfileAccount rows.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from interspace.domain.model.common import DomainModel, utcnow
from interspace.domain.value import AccountId, EthAddress, ProfileAccountId, ProfileId

DEFAULT_PROFILE_NAME = "My Smartprofile"


class Profile(DomainModel):
    """Unit that owns a session wallet and its linked EOAs."""

    id: ProfileId
    name: str = Field(default=DEFAULT_PROFILE_NAME, min_length=1, max_length=100)
    session_wallet_address: EthAddress
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProfileAccount(DomainModel):
    """Membership of an account in a profile."""

    id: ProfileAccountId
    profile_id: ProfileId
    account_id: AccountId
    is_primary: bool = False
    permissions: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
