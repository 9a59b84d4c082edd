"""Unit tests for delegation value objects and entity."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pydantic
import pytest

from interspace.domain.model.common import utcnow
from interspace.domain.model.delegation import (
    AccountDelegation,
    AuthorizationData,
    DelegationPermissions,
    DelegationSignature,
)
from interspace.domain.value import (
    DelegationId,
    DelegationStatus,
    EthAddress,
    LinkedAccountId,
)

SESSION_WALLET = EthAddress("0x" + "ab" * 20)


def delegation(**overrides) -> AccountDelegation:
    fields = dict(
        id=DelegationId(uuid4()),
        linked_account_id=LinkedAccountId(uuid4()),
        delegated_address=SESSION_WALLET,
        chain_id=1,
        authorization_data=AuthorizationData(
            chain_id=1, address=SESSION_WALLET, nonce=1
        ),
        nonce=1,
    )
    fields.update(overrides)
    return AccountDelegation(**fields)


class TestDelegationPermissions:
    """Tests for permission parsing."""

    def test_default_is_deny_all_flags(self):
        permissions = DelegationPermissions()

        assert permissions.can_transfer is None
        assert permissions.can_swap is False
        assert permissions.full_access is False

    def test_max_value_accepts_hex_and_decimal(self):
        hex_cap = DelegationPermissions(max_transaction_value="0x10")
        decimal_cap = DelegationPermissions(max_transaction_value="10")

        assert hex_cap.max_transaction_value == 16
        assert decimal_cap.max_transaction_value == 10

    def test_to_json_renders_wei_as_string(self):
        permissions = DelegationPermissions(max_transaction_value=10**19)

        assert permissions.to_json()["max_transaction_value"] == "10000000000000000000"

    def test_invalid_selector_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DelegationPermissions(allowed_methods={SESSION_WALLET.root: ["0x1234"]})


class TestDelegationSignature:
    def test_scalars_are_left_padded(self):
        signature = DelegationSignature(y_parity=0, r="0x1", s=255)

        assert signature.r == "0x" + "0" * 63 + "1"
        assert signature.s.endswith("ff") and len(signature.s) == 66
        assert len(signature.to_bytes()) == 65

    def test_oversized_scalar_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DelegationSignature(y_parity=0, r="0x" + "1" * 65, s="0x1")

    def test_invalid_parity_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DelegationSignature(y_parity=2, r="0x1", s="0x1")


class TestAccountDelegation:
    """Tests for derived lifecycle state."""

    def test_no_expiry_never_expires(self):
        assert not delegation(status=DelegationStatus.SIGNED).is_expired()

    def test_expiry_is_derived(self):
        record = delegation(
            status=DelegationStatus.ACTIVE, expires_at=utcnow() - timedelta(seconds=1)
        )

        assert record.is_expired()
        assert not record.is_usable()

    def test_naive_expiry_is_treated_as_utc(self):
        naive = datetime(2030, 1, 1, 12, 0)

        record = delegation(expires_at=naive)

        assert record.expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_only_signed_and_active_are_usable(self):
        assert delegation(status=DelegationStatus.SIGNED).is_usable()
        assert delegation(status=DelegationStatus.ACTIVE).is_usable()
        assert not delegation(status=DelegationStatus.PENDING).is_usable()
        assert not delegation(status=DelegationStatus.REVOKED).is_usable()

    def test_stale_challenge(self):
        now = utcnow()
        old = delegation(created_at=now - timedelta(seconds=601))

        assert old.is_stale_challenge(600, now)
        assert not delegation(created_at=now).is_stale_challenge(600, now)
        signed = delegation(
            status=DelegationStatus.SIGNED, created_at=now - timedelta(days=1)
        )
        assert not signed.is_stale_challenge(600, now)
