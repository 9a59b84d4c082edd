"""Unit tests for linked account use cases."""

import pytest

from interspace.application.usecase.linked_account import (
    LinkAccountRequest,
    LinkAccountUseCase,
    ListLinkedAccountsRequest,
    ListLinkedAccountsUseCase,
    UnlinkAccountRequest,
    UnlinkAccountUseCase,
)
from interspace.domain.error import NotFoundError
from interspace.domain.service import AuditLog
from tests.conftest import SEPOLIA, create_owner
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

LEDGER = "0x" + "CD" * 20


class TestLinkedAccountUseCases:
    """Tests for linking, listing and unlinking EOAs."""

    @pytest.mark.asyncio
    async def test_link_list_unlink(self, unit_env):
        # Arrange
        link_use_case = await unit_env.get(LinkAccountUseCase)
        list_use_case = await unit_env.get(ListLinkedAccountsUseCase)
        unlink_use_case = await unit_env.get(UnlinkAccountUseCase)
        audit_log = await unit_env.get(AuditLog)
        owner = await create_owner(unit_env, seed=1)
        caller = str(owner.account.id)

        # Act
        item = await link_use_case.execute(
            LinkAccountRequest(
                account_id=caller,
                profile_id=str(owner.profile.id),
                address=LEDGER,
                chain_id=SEPOLIA,
                wallet_type="ledger",
            )
        )
        await unlink_use_case.execute(
            UnlinkAccountRequest(
                account_id=caller, linked_account_id=item.linked_account_id
            )
        )

        # Assert
        assert item.address == LEDGER.lower()
        active = await list_use_case.execute(
            ListLinkedAccountsRequest(
                account_id=caller, profile_id=str(owner.profile.id)
            )
        )
        everything = await list_use_case.execute(
            ListLinkedAccountsRequest(
                account_id=caller,
                profile_id=str(owner.profile.id),
                include_inactive=True,
            )
        )
        assert [i.linked_account_id for i in active.linked_accounts] == [
            str(owner.linked.id)
        ]
        assert len(everything.linked_accounts) == 2
        assert audit_log.actions() == [
            "linked_account.created",
            "linked_account.removed",
        ]

    @pytest.mark.asyncio
    async def test_listing_foreign_profile_not_found(self, unit_env):
        list_use_case = await unit_env.get(ListLinkedAccountsUseCase)
        owner = await create_owner(unit_env, seed=1)
        stranger = await create_owner(unit_env, seed=2)

        with pytest.raises(NotFoundError):
            await list_use_case.execute(
                ListLinkedAccountsRequest(
                    account_id=str(stranger.account.id),
                    profile_id=str(owner.profile.id),
                )
            )
