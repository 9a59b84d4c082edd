"""Domain value objects for Interspace.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum
from typing import Any

from pydantic import field_validator

from interspace.domain.value.common import RootValueObject


class AccountType(str, Enum):
    """Kind of identity an Account was authenticated with."""

    WALLET = "wallet"
    EMAIL = "email"
    SOCIAL = "social"
    PASSKEY = "passkey"
    GUEST = "guest"


class PrivacyMode(str, Enum):
    """Visibility policy of an identity link.

    LINKED and PARTIAL edges take part in the identity closure,
    ISOLATED edges are only visible to explicit queries.
    """

    LINKED = "linked"
    PARTIAL = "partial"
    ISOLATED = "isolated"

    @property
    def joins_closure(self) -> bool:
        """Whether edges with this mode are followed by closure traversal."""
        return self in (PrivacyMode.LINKED, PrivacyMode.PARTIAL)


class LinkType(str, Enum):
    """How an identity link came about."""

    DIRECT = "direct"
    INFERRED = "inferred"


class DelegationStatus(str, Enum):
    """Stored lifecycle status of an account delegation.

    Expiry is computed from expires_at and never stored.
    """

    PENDING = "pending"
    SIGNED = "signed"
    ACTIVE = "active"
    REVOKED = "revoked"

    @property
    def is_usable(self) -> bool:
        """Whether a delegation in this status may authorize transactions."""
        return self in (DelegationStatus.SIGNED, DelegationStatus.ACTIVE)

    @property
    def is_open(self) -> bool:
        """Whether this status occupies the per-tuple uniqueness slot."""
        return self is not DelegationStatus.REVOKED


class ExecutionPath(str, Enum):
    """Route a profile transaction takes."""

    DIRECT = "direct"
    DELEGATED = "delegated"


class EthAddress(RootValueObject[str]):
    """20-byte EVM address, hex encoded with 0x prefix.

    Stored lower case so comparisons are case-insensitive.
    """

    @field_validator("root")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Validate address format and normalize case."""
        if not re.match(r"^0x[0-9a-fA-F]{40}$", v):
            raise ValueError("Address must be 0x followed by 40 hex characters")
        return v.lower()

    def to_bytes(self) -> bytes:
        """Raw 20 address bytes."""
        return bytes.fromhex(self.root[2:])


ZERO_ADDRESS = EthAddress("0x" + "0" * 40)


def parse_quantity(value: Any) -> int:
    """Parse a non-negative integer quantity.

    Accepts ints, decimal strings and 0x-prefixed hex strings, the forms
    wei amounts and nonces arrive in from JSON clients.
    """
    if isinstance(value, bool):
        raise ValueError("Quantity must be an integer, not a boolean")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                result = int(text, 16)
            else:
                result = int(text, 10)
        except ValueError:
            raise ValueError(f"Invalid quantity: {value!r}")
    else:
        raise ValueError(f"Invalid quantity: {value!r}")

    if result < 0:
        raise ValueError("Quantity must not be negative")
    return result
