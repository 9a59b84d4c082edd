"""Unit tests for ExecutionRouter."""

from datetime import timedelta
from uuid import uuid4

import pytest

from interspace.domain.error import NotFoundError, ValidationError
from interspace.domain.model.common import utcnow
from interspace.domain.model.delegation import DelegationPermissions
from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.repository import DelegationRepository, LinkedAccountRepository
from interspace.domain.service import (
    AuditLog,
    DelegationService,
    ExecutionRouter,
    SessionWalletClient,
)
from interspace.domain.value import (
    DelegationStatus,
    EthAddress,
    ExecutionPath,
    ProfileId,
)
from tests.conftest import CENTI_ETH, POLYGON, SEPOLIA, Owner, create_owner
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

RECIPIENT = "0x" + "33" * 20
OTHER_WALLET = EthAddress("0x" + "77" * 20)


async def delegate(env, owner: Owner, permissions=None, chain_id=SEPOLIA):
    """Signed delegation from owner's EOA to its session wallet."""
    service = await env.get(DelegationService)
    challenge = await service.create_delegation_authorization(
        owner.account.id, owner.linked.id, chain_id, permissions=permissions
    )
    data = challenge.authorization_data
    signed = owner.wallet.sign_authorization(data.chain_id, data.address, data.nonce)
    return await service.store_delegation(owner.account.id, owner.linked.id, signed)


def transfer(value: int = 0, chain_id: int = SEPOLIA) -> TransactionRequest:
    return TransactionRequest(to=RECIPIENT, value=value, chain_id=chain_id)


class TestPlanExecution:
    """Tests for choosing the execution path."""

    @pytest.mark.asyncio
    async def test_direct_without_delegation(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        owner = await create_owner(unit_env, seed=1)

        plan = await router.plan_execution(owner.profile.id, transfer())

        assert plan.path == ExecutionPath.DIRECT
        assert plan.delegation_id is None

    @pytest.mark.asyncio
    async def test_delegated_when_delegation_covers_chain(self, unit_env):
        """A signed delegation on the transaction's chain is used."""
        # Arrange
        router = await unit_env.get(ExecutionRouter)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)

        # Act
        plan = await router.plan_execution(owner.profile.id, transfer())

        # Assert
        assert plan.path == ExecutionPath.DELEGATED
        assert plan.delegation_id == delegation.id
        assert plan.linked_account_id == owner.linked.id
        assert await router.determine_best_execution_path(
            owner.profile.id, transfer(chain_id=POLYGON)
        ) == ExecutionPath.DIRECT

    @pytest.mark.asyncio
    async def test_inactive_linked_account_is_skipped(self, unit_env):
        """Delegations of unlinked EOAs are not used for routing."""
        # Arrange
        router = await unit_env.get(ExecutionRouter)
        linked_repo = await unit_env.get(LinkedAccountRepository)
        owner = await create_owner(unit_env, seed=1)
        await delegate(unit_env, owner)
        await linked_repo.save(owner.linked.model_copy(update={"is_active": False}))

        # Act
        plan = await router.plan_execution(owner.profile.id, transfer())

        # Assert
        assert plan.path == ExecutionPath.DIRECT

    @pytest.mark.asyncio
    async def test_unknown_profile_not_found(self, unit_env):
        router = await unit_env.get(ExecutionRouter)

        with pytest.raises(NotFoundError):
            await router.plan_execution(ProfileId(uuid4()), transfer())


class TestExecuteWithDelegation:
    """Tests for executing through a delegation."""

    @pytest.mark.asyncio
    async def test_executes_through_session_wallet(self, unit_env):
        # Arrange
        router = await unit_env.get(ExecutionRouter)
        client = await unit_env.get(SessionWalletClient)
        audit_log = await unit_env.get(AuditLog)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)

        # Act
        tx_hash = await router.execute_with_delegation(
            owner.account.id, delegation.id, transfer(value=CENTI_ETH)
        )

        # Assert
        assert tx_hash.startswith("0x")
        assert client.executed[-1]["delegator_address"] == owner.linked.address
        assert client.executed[-1]["value"] == CENTI_ETH
        assert audit_log.actions()[-1] == "delegation.executed"

    @pytest.mark.asyncio
    async def test_value_cap_enforced(self, unit_env):
        """0.02 ETH is refused by a 0.01 ETH delegation."""
        # Arrange
        router = await unit_env.get(ExecutionRouter)
        client = await unit_env.get(SessionWalletClient)
        owner = await create_owner(unit_env, seed=1)
        permissions = DelegationPermissions(
            can_transfer=True, max_transaction_value=CENTI_ETH
        )
        delegation = await delegate(unit_env, owner, permissions=permissions)

        # Act / Assert
        with pytest.raises(ValidationError, match="exceeds maximum allowed"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer(value=2 * CENTI_ETH)
            )
        assert client.executed == []

        await router.execute_with_delegation(
            owner.account.id, delegation.id, transfer(value=CENTI_ETH // 2)
        )
        assert len(client.executed) == 1

    @pytest.mark.asyncio
    async def test_chain_mismatch_rejected(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)

        with pytest.raises(ValidationError, match="not allowed"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer(chain_id=POLYGON)
            )

    @pytest.mark.asyncio
    async def test_delegation_to_other_wallet_rejected(self, unit_env):
        """The delegate must be the profile's own session wallet."""
        # Arrange
        router = await unit_env.get(ExecutionRouter)
        client = await unit_env.get(SessionWalletClient)
        repo = await unit_env.get(DelegationRepository)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)
        await repo.save(
            delegation.model_copy(update={"delegated_address": OTHER_WALLET})
        )

        # Act / Assert
        with pytest.raises(ValidationError, match="session wallet"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer()
            )
        assert client.executed == []

    @pytest.mark.asyncio
    async def test_revoked_delegation_rejected(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        service = await unit_env.get(DelegationService)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)
        await service.revoke_delegation(owner.account.id, delegation.id)

        with pytest.raises(ValidationError, match="revoked"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer()
            )

    @pytest.mark.asyncio
    async def test_expired_delegation_rejected(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        repo = await unit_env.get(DelegationRepository)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)
        await repo.save(
            delegation.model_copy(
                update={"expires_at": utcnow() - timedelta(seconds=1)}
            )
        )

        with pytest.raises(ValidationError, match="expired"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer()
            )

    @pytest.mark.asyncio
    async def test_unsigned_delegation_rejected(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        service = await unit_env.get(DelegationService)
        owner = await create_owner(unit_env, seed=1)
        challenge = await service.create_delegation_authorization(
            owner.account.id, owner.linked.id, SEPOLIA
        )

        with pytest.raises(ValidationError, match="not been signed"):
            await router.execute_with_delegation(
                owner.account.id, challenge.delegation_id, transfer()
            )

    @pytest.mark.asyncio
    async def test_inactive_linked_account_rejected(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        linked_repo = await unit_env.get(LinkedAccountRepository)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)
        await linked_repo.save(owner.linked.model_copy(update={"is_active": False}))

        with pytest.raises(ValidationError, match="no longer active"):
            await router.execute_with_delegation(
                owner.account.id, delegation.id, transfer()
            )

    @pytest.mark.asyncio
    async def test_active_delegation_executes(self, unit_env):
        """Activated delegations stay usable."""
        router = await unit_env.get(ExecutionRouter)
        service = await unit_env.get(DelegationService)
        owner = await create_owner(unit_env, seed=1)
        delegation = await delegate(unit_env, owner)
        active = await service.activate_delegation(owner.account.id, delegation.id)
        assert active.status == DelegationStatus.ACTIVE

        tx_hash = await router.execute_with_delegation(
            owner.account.id, delegation.id, transfer()
        )

        assert tx_hash

    @pytest.mark.asyncio
    async def test_stranger_cannot_execute(self, unit_env):
        router = await unit_env.get(ExecutionRouter)
        owner = await create_owner(unit_env, seed=1)
        stranger = await create_owner(unit_env, seed=2)
        delegation = await delegate(unit_env, owner)

        with pytest.raises(NotFoundError):
            await router.execute_with_delegation(
                stranger.account.id, delegation.id, transfer()
            )
