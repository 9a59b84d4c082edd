"""Account delegation entity and its value objects.

A delegation lets a profile's session wallet act for one of the profile's
linked EOAs, bounded by a permission set and an optional expiry.
"""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from interspace.domain.model.common import DomainModel, ensure_utc, utcnow
from interspace.domain.value import (
    DelegationId,
    DelegationStatus,
    EthAddress,
    LinkedAccountId,
    parse_quantity,
)
from interspace.domain.value.common import ValueObject

# Legacy permission keys accepted on input, mapped to their current names
_LEGACY_PERMISSION_KEYS = {
    "transfer": "can_transfer",
    "swap": "can_swap",
    "approve": "can_approve",
    "all": "full_access",
}


class DelegationPermissions(ValueObject):
    """What a delegation allows the session wallet to do.

    Amounts are in wei. can_transfer left unset together with the legacy
    `all` flag marks a full-trust delegation.
    """

    can_transfer: Optional[bool] = None
    can_swap: bool = False
    can_interact_with_contracts: bool = False
    can_approve: Optional[bool] = None  # None: follows can_transfer
    max_transaction_value: Optional[int] = None
    allowed_chains: list[int] = Field(default_factory=list)
    allowed_contracts: Optional[list[EthAddress]] = None
    allowed_methods: dict[str, list[str]] = Field(default_factory=dict)
    requires_multisig: Optional[bool] = None
    full_access: bool = False  # legacy `all`

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_keys(cls, data: Any) -> Any:
        """Map legacy {transfer, swap, approve, all} keys onto current fields."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, current in _LEGACY_PERMISSION_KEYS.items():
            if legacy in data:
                value = data.pop(legacy)
                data.setdefault(current, value)
        return data

    @field_validator("max_transaction_value", mode="before")
    @classmethod
    def parse_max_value(cls, v: Any) -> Optional[int]:
        """Accept wei amounts as int, decimal or hex strings."""
        if v is None:
            return None
        return parse_quantity(v)

    @field_validator("allowed_methods", mode="before")
    @classmethod
    def normalize_allowed_methods(cls, v: Any) -> Any:
        """Lower-case contract addresses and method selectors."""
        if not isinstance(v, dict):
            return v
        normalized: dict[str, list[str]] = {}
        for contract, selectors in v.items():
            address = EthAddress(str(contract)).root
            cleaned = []
            for selector in selectors:
                selector = str(selector).lower()
                if not re.match(r"^0x[0-9a-f]{8}$", selector):
                    raise ValueError(f"Invalid method selector: {selector}")
                cleaned.append(selector)
            normalized[address] = cleaned
        return normalized

    @classmethod
    def full_trust(cls) -> "DelegationPermissions":
        """Permission set used when the caller does not supply one."""
        return cls(full_access=True)

    def to_json(self) -> dict[str, Any]:
        """JSON-safe representation for storage."""
        data = self.model_dump(mode="json")
        if self.max_transaction_value is not None:
            data["max_transaction_value"] = str(self.max_transaction_value)
        return data


class AuthorizationData(ValueObject):
    """The (chain, delegate address, nonce) triple the EOA signs over."""

    chain_id: int = Field(ge=0)
    address: EthAddress
    nonce: int

    @field_validator("nonce", mode="before")
    @classmethod
    def parse_nonce(cls, v: Any) -> int:
        """Accept nonces as int, decimal or hex strings."""
        return parse_quantity(v)

    def to_json(self) -> dict[str, Any]:
        """JSON-safe representation; the nonce may exceed JS integer range."""
        return {
            "chain_id": self.chain_id,
            "address": self.address.root,
            "nonce": str(self.nonce),
        }


def _normalize_word(v: Any) -> str:
    """Normalize a 32-byte signature scalar to 0x + 64 lower-case hex chars."""
    if isinstance(v, int):
        v = hex(v)
    text = str(v).lower()
    if text.startswith("0x"):
        text = text[2:]
    if not re.match(r"^[0-9a-f]{1,64}$", text):
        raise ValueError("Signature component must be at most 32 bytes of hex")
    return "0x" + text.rjust(64, "0")


class DelegationSignature(ValueObject):
    """ECDSA signature over the authorization digest."""

    y_parity: int
    r: str
    s: str

    @field_validator("y_parity", mode="before")
    @classmethod
    def normalize_y_parity(cls, v: Any) -> int:
        """Accept 0/1 as well as legacy 27/28 v values."""
        value = parse_quantity(v)
        if value in (27, 28):
            value -= 27
        if value not in (0, 1):
            raise ValueError("y_parity must be 0 or 1")
        return value

    @field_validator("r", "s", mode="before")
    @classmethod
    def normalize_scalar(cls, v: Any) -> str:
        """Left-pad signature scalars to 32 bytes."""
        return _normalize_word(v)

    def to_bytes(self) -> bytes:
        """65-byte r || s || recovery id form."""
        r = bytes.fromhex(self.r[2:])
        s = bytes.fromhex(self.s[2:])
        return r + s + bytes([self.y_parity])


class SignedAuthorization(ValueObject):
    """Authorization tuple returned by the EOA together with its signature."""

    chain_id: int = Field(ge=0)
    address: EthAddress  # Session wallet being delegated to
    nonce: int
    y_parity: int
    r: str
    s: str

    @field_validator("nonce", mode="before")
    @classmethod
    def parse_nonce(cls, v: Any) -> int:
        """Accept nonces as int, decimal or hex strings."""
        return parse_quantity(v)

    @property
    def authorization_data(self) -> AuthorizationData:
        """The signed-over triple."""
        return AuthorizationData(
            chain_id=self.chain_id, address=self.address, nonce=self.nonce
        )

    @property
    def signature(self) -> DelegationSignature:
        """Signature part; raises pydantic ValidationError when malformed."""
        return DelegationSignature(y_parity=self.y_parity, r=self.r, s=self.s)


class AccountDelegation(DomainModel):
    """Delegation record.

    Lifecycle: pending -> signed -> active, with revoked terminal from any
    state. Expiry is derived from expires_at and never stored.
    """

    id: DelegationId
    linked_account_id: LinkedAccountId
    delegated_address: EthAddress  # Session wallet
    chain_id: int = Field(ge=0)
    authorization_data: AuthorizationData
    signature: Optional[DelegationSignature] = None
    permissions: DelegationPermissions = Field(
        default_factory=DelegationPermissions.full_trust
    )
    nonce: int
    expires_at: Optional[datetime] = None
    status: DelegationStatus = DelegationStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    activated_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    transaction_hash: Optional[str] = None

    @field_validator("expires_at", mode="after")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store expiry as an aware datetime."""
        return ensure_utc(v)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether expires_at lies in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        """Whether this delegation may authorize transactions right now."""
        return self.status.is_usable and not self.is_expired(now)

    def is_stale_challenge(self, pending_ttl_seconds: int, now: datetime) -> bool:
        """Whether this is a pending challenge nobody signed in time."""
        if self.status != DelegationStatus.PENDING:
            return False
        return (now - ensure_utc(self.created_at)).total_seconds() > pending_ttl_seconds


class DelegationChallenge(ValueObject):
    """What a client needs to have the linked EOA sign a delegation."""

    delegation_id: DelegationId
    authorization_data: AuthorizationData
    message: str  # 0x-prefixed digest to sign
    permissions: DelegationPermissions
    expires_at: Optional[datetime] = None
