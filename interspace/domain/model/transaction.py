"""Transaction request value object."""

import re
from typing import Any, Optional

from pydantic import Field, field_validator

from interspace.domain.value import EthAddress, parse_quantity
from interspace.domain.value.common import ValueObject


class TransactionRequest(ValueObject):
    """Transaction a profile wants to send, before any signing."""

    to: EthAddress
    value: int = 0  # wei
    data: str = "0x"
    chain_id: int = Field(gt=0)

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: Any) -> int:
        """Accept wei amounts as int, decimal or hex strings."""
        if v is None:
            return 0
        return parse_quantity(v)

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, v: Any) -> str:
        """Call data must be 0x-prefixed hex; empty means plain transfer."""
        if v is None or v == "":
            return "0x"
        text = str(v).lower()
        if not re.match(r"^0x([0-9a-f]{2})*$", text):
            raise ValueError("Call data must be 0x-prefixed, even-length hex")
        return text

    @property
    def is_plain_transfer(self) -> bool:
        """True when there is no call data."""
        return self.data == "0x"

    @property
    def selector(self) -> Optional[str]:
        """Leading 4-byte function selector, if the call data has one."""
        if len(self.data) < 10:
            return None
        return self.data[:10]
