"""Unit tests for delegation permission evaluation."""

from interspace.domain.model.delegation import DelegationPermissions
from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.service.permission import (
    TransactionAction,
    classify_transaction,
    evaluate_transaction,
    has_permission_for_transaction,
)
from tests.conftest import CENTI_ETH, POLYGON, SEPOLIA

ROUTER = "0x" + "11" * 20
TOKEN = "0x" + "22" * 20
RECIPIENT = "0x" + "33" * 20

TRANSFER_CALL = "0xa9059cbb" + "00" * 64
APPROVE_CALL = "0x095ea7b3" + "00" * 64
SWAP_CALL = "0x38ed1739" + "00" * 64
OTHER_CALL = "0xdeadbeef"


def tx(to=RECIPIENT, value=0, data="0x", chain_id=SEPOLIA) -> TransactionRequest:
    return TransactionRequest(to=to, value=value, data=data, chain_id=chain_id)


class TestClassifyTransaction:
    def test_selectors_are_bucketed(self):
        assert classify_transaction(tx()) == TransactionAction.TRANSFER
        assert classify_transaction(tx(data=TRANSFER_CALL)) == (
            TransactionAction.TRANSFER
        )
        assert classify_transaction(tx(data=APPROVE_CALL)) == TransactionAction.APPROVE
        assert classify_transaction(tx(data=SWAP_CALL)) == TransactionAction.SWAP
        assert classify_transaction(tx(data=OTHER_CALL)) == (
            TransactionAction.CONTRACT_INTERACTION
        )

    def test_short_call_data_counts_as_contract_interaction(self):
        """Fewer than four bytes of data still reach the target's fallback."""
        assert classify_transaction(tx(data="0xabcd")) == (
            TransactionAction.CONTRACT_INTERACTION
        )
        assert classify_transaction(tx(data="0x01")) == (
            TransactionAction.CONTRACT_INTERACTION
        )

    def test_short_call_data_needs_contract_permission(self):
        permissions = DelegationPermissions(
            can_transfer=True, can_interact_with_contracts=False, allowed_contracts=[]
        )

        decision = evaluate_transaction(permissions, tx(to=ROUTER, data="0x01"))

        assert not decision.allowed
        assert decision.action == TransactionAction.CONTRACT_INTERACTION
        assert "not authorized for contract interaction" in decision.reason


class TestValueCap:
    """Tests for max_transaction_value."""

    def test_value_above_cap_denied(self):
        """0.02 ETH against a 0.01 ETH cap is refused."""
        permissions = DelegationPermissions(
            can_transfer=True, max_transaction_value=str(CENTI_ETH)
        )

        decision = evaluate_transaction(permissions, tx(value=2 * CENTI_ETH))

        assert not decision.allowed
        assert "exceeds maximum allowed" in decision.reason

    def test_value_below_cap_allowed(self):
        """0.005 ETH against a 0.01 ETH cap passes."""
        permissions = DelegationPermissions(
            can_transfer=True, max_transaction_value=CENTI_ETH
        )

        assert has_permission_for_transaction(permissions, tx(value=CENTI_ETH // 2))

    def test_value_equal_to_cap_allowed(self):
        permissions = DelegationPermissions(
            can_transfer=True, max_transaction_value=hex(CENTI_ETH)
        )

        assert has_permission_for_transaction(permissions, tx(value=CENTI_ETH))


class TestChainScope:
    """Tests for allowed_chains."""

    def test_other_chain_denied(self):
        """A Sepolia-only delegation cannot be used on Polygon."""
        permissions = DelegationPermissions(
            can_transfer=True, allowed_chains=[SEPOLIA]
        )

        decision = evaluate_transaction(permissions, tx(chain_id=POLYGON))

        assert not decision.allowed
        assert str(POLYGON) in decision.reason

    def test_listed_chain_allowed(self):
        permissions = DelegationPermissions(
            can_transfer=True, allowed_chains=[SEPOLIA]
        )

        assert has_permission_for_transaction(permissions, tx(chain_id=SEPOLIA))

    def test_empty_chain_list_allows_any_chain(self):
        permissions = DelegationPermissions(can_transfer=True)

        assert has_permission_for_transaction(permissions, tx(chain_id=POLYGON))


class TestActionFlags:
    """Tests for the per-action permission flags."""

    def test_plain_transfer_requires_can_transfer(self):
        permissions = DelegationPermissions(can_transfer=False, can_swap=True)

        decision = evaluate_transaction(permissions, tx(value=1))

        assert not decision.allowed
        assert decision.reason == "Delegation is not authorized for transfer"

    def test_swap_requires_can_swap(self):
        permissions = DelegationPermissions(can_transfer=True)

        decision = evaluate_transaction(permissions, tx(to=ROUTER, data=SWAP_CALL))

        assert not decision.allowed
        assert decision.action == TransactionAction.SWAP

    def test_approve_follows_can_transfer_when_unset(self):
        """can_approve left unset inherits can_transfer."""
        permissions = DelegationPermissions(can_transfer=True)

        assert has_permission_for_transaction(
            permissions, tx(to=TOKEN, data=APPROVE_CALL)
        )

    def test_explicit_can_approve_wins(self):
        permissions = DelegationPermissions(can_transfer=True, can_approve=False)

        assert not has_permission_for_transaction(
            permissions, tx(to=TOKEN, data=APPROVE_CALL)
        )

    def test_contract_call_requires_flag(self):
        permissions = DelegationPermissions(can_transfer=True)

        decision = evaluate_transaction(permissions, tx(to=ROUTER, data=OTHER_CALL))

        assert decision.reason == (
            "Delegation is not authorized for contract interaction"
        )


class TestContractAndMethodLists:
    """Tests for allowed_contracts and allowed_methods."""

    def test_swap_limited_to_allowed_contracts(self):
        permissions = DelegationPermissions(
            can_transfer=True, can_swap=True, allowed_contracts=[ROUTER]
        )

        assert has_permission_for_transaction(
            permissions, tx(to=ROUTER, data=SWAP_CALL)
        )
        assert not has_permission_for_transaction(
            permissions, tx(to=TOKEN, data=SWAP_CALL)
        )

    def test_allowed_contracts_do_not_restrict_token_transfers(self):
        """Token transfer calls are governed by can_transfer alone."""
        permissions = DelegationPermissions(
            can_transfer=True, allowed_contracts=[ROUTER]
        )

        assert has_permission_for_transaction(
            permissions, tx(to=TOKEN, data=TRANSFER_CALL)
        )

    def test_empty_contract_list_does_not_restrict(self):
        """An empty allowed_contracts list behaves like an unset one."""
        permissions = DelegationPermissions(
            can_transfer=True,
            can_interact_with_contracts=True,
            allowed_contracts=[],
        )

        assert has_permission_for_transaction(
            permissions, tx(to=ROUTER, data=OTHER_CALL)
        )

    def test_allowed_methods_take_precedence(self):
        """An explicit method list allows listed selectors despite the flags."""
        permissions = DelegationPermissions(
            can_transfer=False,
            allowed_methods={TOKEN.upper().replace("0X", "0x"): ["0xDEADBEEF"]},
        )

        assert has_permission_for_transaction(
            permissions, tx(to=TOKEN, data=OTHER_CALL)
        )

    def test_unlisted_method_denied(self):
        permissions = DelegationPermissions(
            can_transfer=True,
            can_interact_with_contracts=True,
            allowed_methods={TOKEN: ["0xdeadbeef"]},
        )

        decision = evaluate_transaction(permissions, tx(to=TOKEN, data=APPROVE_CALL))

        assert not decision.allowed
        assert "method 0x095ea7b3" in decision.reason


class TestLegacyPermissions:
    """Tests for legacy permission sets."""

    def test_full_trust_allows_everything(self):
        """The default permission set is unrestricted."""
        permissions = DelegationPermissions.full_trust()

        assert has_permission_for_transaction(
            permissions, tx(to=ROUTER, value=10**20, data=OTHER_CALL, chain_id=POLYGON)
        )

    def test_legacy_keys_are_mapped(self):
        permissions = DelegationPermissions.model_validate(
            {"transfer": True, "swap": True, "approve": False}
        )

        assert permissions.can_transfer is True
        assert permissions.can_swap is True
        assert permissions.can_approve is False

    def test_legacy_all_with_explicit_transfer_is_not_full_trust(self):
        """`all` only short-circuits when can_transfer was left unset."""
        permissions = DelegationPermissions.model_validate(
            {"all": True, "can_transfer": False}
        )

        assert not has_permission_for_transaction(permissions, tx(value=1))
