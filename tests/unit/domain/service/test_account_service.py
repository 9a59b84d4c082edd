"""Unit tests for AccountService."""

from uuid import uuid4

import pytest

from interspace.domain.error import NotFoundError
from interspace.domain.service import AccountService
from interspace.domain.value import AccountId, AccountType
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

WALLET = "0x" + "Ab" * 20


class TestFindOrCreateAccount:
    """Tests for find_or_create_account."""

    @pytest.mark.asyncio
    async def test_creates_then_finds(self, unit_env):
        """Same identity resolves to the same account."""
        # Arrange
        service = await unit_env.get(AccountService)

        # Act
        first, created = await service.find_or_create_account(
            AccountType.EMAIL, "Alice@Example.com"
        )
        second, created_again = await service.find_or_create_account(
            AccountType.EMAIL, " alice@example.com "
        )

        # Assert
        assert created is True
        assert created_again is False
        assert first.id == second.id
        assert first.identifier == "alice@example.com"
        assert first.verified is False

    @pytest.mark.asyncio
    async def test_wallet_accounts_are_verified_and_lower_cased(self, unit_env):
        service = await unit_env.get(AccountService)

        account, _ = await service.find_or_create_account(AccountType.WALLET, WALLET)

        assert account.verified is True
        assert account.identifier == WALLET.lower()
        assert account.wallet_address == WALLET.lower()

    @pytest.mark.asyncio
    async def test_provider_is_part_of_identity(self, unit_env):
        """The same user id at two providers is two accounts."""
        service = await unit_env.get(AccountService)

        google, _ = await service.find_or_create_account(
            AccountType.SOCIAL, "12345", provider="google"
        )
        telegram, _ = await service.find_or_create_account(
            AccountType.SOCIAL, "12345", provider="telegram"
        )

        assert google.id != telegram.id

    @pytest.mark.asyncio
    async def test_metadata_is_merged_on_return(self, unit_env):
        """Existing keys are kept, new keys added, repeated keys overwritten."""
        service = await unit_env.get(AccountService)
        await service.find_or_create_account(
            AccountType.SOCIAL, "u1", provider="google", metadata={"a": 1, "b": 1}
        )

        account, _ = await service.find_or_create_account(
            AccountType.SOCIAL, "u1", provider="google", metadata={"b": 2, "c": 3}
        )

        assert account.metadata == {"a": 1, "b": 2, "c": 3}


class TestAccountUpdates:
    @pytest.mark.asyncio
    async def test_verify_account(self, unit_env):
        service = await unit_env.get(AccountService)
        account, _ = await service.find_or_create_account(
            AccountType.EMAIL, "bob@example.com"
        )

        verified = await service.verify_account(account.id)

        assert verified.verified is True
        assert (await service.get_account(account.id)).verified is True

    @pytest.mark.asyncio
    async def test_update_metadata(self, unit_env):
        service = await unit_env.get(AccountService)
        account, _ = await service.find_or_create_account(
            AccountType.EMAIL, "bob@example.com", metadata={"name": "Bob"}
        )

        updated = await service.update_account_metadata(
            account.id, {"walletAddress": WALLET}
        )

        assert updated.metadata == {"name": "Bob", "walletAddress": WALLET}
        assert updated.wallet_address == WALLET.lower()

    @pytest.mark.asyncio
    async def test_unknown_account_not_found(self, unit_env):
        service = await unit_env.get(AccountService)

        with pytest.raises(NotFoundError):
            await service.get_account(AccountId(uuid4()))
