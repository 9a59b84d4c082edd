"""Unit tests for IdentityLinkService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from interspace.domain.error import ConflictError, NotFoundError, ValidationError
from interspace.domain.service import (
    IdentityLinkService,
    ProfileService,
    SessionWalletClient,
)
from interspace.domain.value import AccountId, PrivacyMode
from tests.conftest import create_account
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLinkAccounts:
    """Tests for creating and updating identity links."""

    @pytest.mark.asyncio
    async def test_link_is_stored_in_canonical_order(self, unit_env):
        """Link between two accounts is undirected."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")

        # Act
        link = await service.link_accounts(b.id, a.id)

        # Assert
        assert link.account_a_id == min(a.id, b.id, key=str)
        assert link.account_b_id == max(a.id, b.id, key=str)
        assert link.privacy_mode == PrivacyMode.LINKED

    @pytest.mark.asyncio
    async def test_self_link_rejected(self, unit_env):
        """An account cannot be linked to itself."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")

        with pytest.raises(ValidationError, match="itself"):
            await service.link_accounts(a.id, a.id)

    @pytest.mark.asyncio
    async def test_unknown_account_rejected(self, unit_env):
        """Both accounts must exist."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")

        with pytest.raises(NotFoundError):
            await service.link_accounts(a.id, AccountId(uuid4()))

    @pytest.mark.asyncio
    async def test_concurrent_insert_is_a_conflict(self, unit_env, monkeypatch):
        """A pair inserted by another transaction surfaces as a conflict."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        monkeypatch.setattr(
            service.identity_link_repository,
            "save",
            AsyncMock(side_effect=IntegrityError("duplicate key", None, Exception())),
        )

        with pytest.raises(ConflictError, match="already linked"):
            await service.link_accounts(a.id, b.id)

    @pytest.mark.asyncio
    async def test_circular_link_rejected(self, unit_env):
        """Closing a triangle of closure edges is a conflict."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        c = await create_account(unit_env, "c@example.com")
        await service.link_accounts(a.id, b.id)
        await service.link_accounts(b.id, c.id)

        # Act / Assert
        with pytest.raises(ConflictError, match="Circular link detected"):
            await service.link_accounts(c.id, a.id)

    @pytest.mark.asyncio
    async def test_isolated_edge_may_close_a_loop(self, unit_env):
        """Isolated edges never join the closure, so they are always accepted."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        c = await create_account(unit_env, "c@example.com")
        await service.link_accounts(a.id, b.id)
        await service.link_accounts(b.id, c.id)

        # Act
        link = await service.link_accounts(c.id, a.id, PrivacyMode.ISOLATED)

        # Assert
        assert link.privacy_mode == PrivacyMode.ISOLATED
        assert await service.get_linked_accounts(a.id) == {a.id, b.id, c.id}

    @pytest.mark.asyncio
    async def test_relinking_updates_privacy_mode(self, unit_env):
        """Linking an already linked pair changes the mode of the edge."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        await service.link_accounts(a.id, b.id)

        link = await service.link_accounts(a.id, b.id, PrivacyMode.PARTIAL)

        assert link.privacy_mode == PrivacyMode.PARTIAL
        assert len(await service.get_links(a.id)) == 1

    @pytest.mark.asyncio
    async def test_reopening_isolated_edge_checks_for_cycles(self, unit_env):
        """Promoting an isolated edge back into the closure can close a cycle."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        c = await create_account(unit_env, "c@example.com")
        await service.link_accounts(a.id, b.id)
        await service.link_accounts(b.id, c.id)
        await service.link_accounts(a.id, c.id, PrivacyMode.ISOLATED)

        # Act / Assert
        with pytest.raises(ConflictError, match="Circular link detected"):
            await service.link_accounts(a.id, c.id, PrivacyMode.LINKED)


class TestClosure:
    """Tests for identity closure resolution."""

    @pytest.mark.asyncio
    async def test_closure_includes_self(self, unit_env):
        """An unlinked account's closure is just itself."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")

        assert await service.get_linked_accounts(a.id) == {a.id}

    @pytest.mark.asyncio
    async def test_unknown_account_closure_not_found(self, unit_env):
        service = await unit_env.get(IdentityLinkService)

        with pytest.raises(NotFoundError):
            await service.get_linked_accounts(AccountId(uuid4()))
        with pytest.raises(NotFoundError):
            await service.get_accessible_profiles(AccountId(uuid4()))

    @pytest.mark.asyncio
    async def test_closure_is_transitive_and_symmetric(self, unit_env):
        """Every member of a chain sees the whole chain."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        c = await create_account(unit_env, "c@example.com")
        await service.link_accounts(a.id, b.id)
        await service.link_accounts(b.id, c.id, PrivacyMode.PARTIAL)

        # Act / Assert
        expected = {a.id, b.id, c.id}
        assert await service.get_linked_accounts(a.id) == expected
        assert await service.get_linked_accounts(c.id) == expected

    @pytest.mark.asyncio
    async def test_isolated_edges_are_not_followed(self, unit_env):
        """Isolated links stay queryable but do not extend the closure."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        await service.link_accounts(a.id, b.id, PrivacyMode.ISOLATED)

        # Act
        closure = await service.get_linked_accounts(a.id)
        links = await service.get_links(a.id)

        # Assert
        assert closure == {a.id}
        assert len(links) == 1

    @pytest.mark.asyncio
    async def test_unlink_splits_closure(self, unit_env):
        """Removing the only edge separates the accounts."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        await service.link_accounts(a.id, b.id)

        await service.unlink_accounts(b.id, a.id)

        assert await service.get_linked_accounts(a.id) == {a.id}

    @pytest.mark.asyncio
    async def test_unlink_missing_edge_raises(self, unit_env):
        """Unlinking accounts that are not linked is not found."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")

        with pytest.raises(NotFoundError):
            await service.unlink_accounts(a.id, b.id)

    @pytest.mark.asyncio
    async def test_update_privacy_of_missing_edge_raises(self, unit_env):
        """Only existing links can change mode."""
        service = await unit_env.get(IdentityLinkService)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")

        with pytest.raises(NotFoundError):
            await service.update_link_privacy(a.id, b.id, PrivacyMode.ISOLATED)


class TestAccessibleProfiles:
    """Tests for profile resolution over the closure."""

    @pytest.mark.asyncio
    async def test_profiles_of_linked_accounts_are_accessible(self, unit_env):
        """Profiles owned by any closure member are returned once each."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        profile_service = await unit_env.get(ProfileService)
        wallet_client = await unit_env.get(SessionWalletClient)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        profile_a = await profile_service.create_profile(
            a, await wallet_client.create_session_wallet(a.id), name="Work"
        )
        profile_b = await profile_service.create_profile(
            b, await wallet_client.create_session_wallet(b.id), name="Gaming"
        )
        # Shared profile: both accounts are members
        await profile_service.link_profile_to_account(profile_a.id, b.id)
        await service.link_accounts(a.id, b.id)

        # Act
        profiles = await service.get_accessible_profiles(a.id)

        # Assert
        assert [p.id for p in profiles] == [profile_a.id, profile_b.id]

    @pytest.mark.asyncio
    async def test_isolated_link_hides_profiles(self, unit_env):
        """Profiles behind an isolated edge are not accessible."""
        # Arrange
        service = await unit_env.get(IdentityLinkService)
        profile_service = await unit_env.get(ProfileService)
        wallet_client = await unit_env.get(SessionWalletClient)
        a = await create_account(unit_env, "a@example.com")
        b = await create_account(unit_env, "b@example.com")
        await profile_service.create_profile(
            b, await wallet_client.create_session_wallet(b.id)
        )
        await service.link_accounts(a.id, b.id, PrivacyMode.ISOLATED)

        # Act
        profiles = await service.get_accessible_profiles(a.id)

        # Assert
        assert profiles == []
