"""Unit tests for IdentityProofService."""

from datetime import timedelta

import pytest

from interspace.config import AuthSettings
from interspace.domain.error import IdentityProofError, ValidationError
from interspace.domain.model.common import utcnow
from interspace.domain.model.identity_challenge import IdentityProof
from interspace.domain.repository import IdentityChallengeRepository
from interspace.domain.service import EmailSender, IdentityProofService
from interspace.domain.service.identity_proof_service import hash_code
from interspace.domain.service.signature import checksum_address
from interspace.domain.value import AccountType
from tests.conftest import Wallet
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

EMAIL = "alice@example.com"


def wrong_code(code: str) -> str:
    return "000000" if code != "000000" else "111111"


class TestIssueChallenge:
    """Tests for challenge creation."""

    @pytest.mark.asyncio
    async def test_wallet_challenge_carries_sign_in_message(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        wallet = Wallet.from_seed(1)

        # Act
        challenge = await service.issue_challenge(
            AccountType.WALLET, wallet.address.root.upper().replace("0X", "0x")
        )

        # Assert
        assert challenge.identifier == wallet.address.root
        assert challenge.code_hash is None
        lines = challenge.message.split("\n")
        assert lines[0].endswith("wants you to sign in with your Ethereum account:")
        assert lines[1] == checksum_address(wallet.address)
        assert "Sign in to Interspace." in lines
        assert "Chain ID: 1" in lines
        ttl = challenge.expires_at - challenge.created_at
        assert ttl == timedelta(seconds=300)

    @pytest.mark.asyncio
    async def test_email_challenge_mails_code_and_stores_hash(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        email_sender = await unit_env.get(EmailSender)

        # Act
        challenge = await service.issue_challenge(
            AccountType.EMAIL, "Alice@Example.com"
        )

        # Assert
        code = email_sender.last_code(EMAIL)
        assert code is not None and len(code) == 6 and code.isdigit()
        assert challenge.message is None
        assert challenge.code_hash == hash_code(challenge.id, code)
        assert challenge.expires_at - challenge.created_at == timedelta(seconds=600)

    @pytest.mark.asyncio
    async def test_challenge_types_are_limited(self, unit_env):
        service = await unit_env.get(IdentityProofService)

        with pytest.raises(ValidationError, match="do not use challenges"):
            await service.issue_challenge(AccountType.SOCIAL, "1234")

    @pytest.mark.asyncio
    async def test_malformed_identifiers_rejected(self, unit_env):
        service = await unit_env.get(IdentityProofService)

        with pytest.raises(ValidationError, match="wallet address"):
            await service.issue_challenge(AccountType.WALLET, "0x1234")
        with pytest.raises(ValidationError, match="email"):
            await service.issue_challenge(AccountType.EMAIL, "not-an-email")

    @pytest.mark.asyncio
    async def test_expired_challenges_are_purged(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        repository = await unit_env.get(IdentityChallengeRepository)
        old = await service.issue_challenge(AccountType.EMAIL, EMAIL)
        await repository.save(
            old.model_copy(update={"expires_at": utcnow() - timedelta(seconds=1)})
        )

        # Act
        await service.issue_challenge(AccountType.EMAIL, EMAIL)

        # Assert
        assert await repository.find_by_id(old.id) is None


class TestVerifyWallet:
    """Tests for wallet signature proofs."""

    @pytest.mark.asyncio
    async def test_valid_signature_consumes_challenge(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        repository = await unit_env.get(IdentityChallengeRepository)
        wallet = Wallet.from_seed(1)
        challenge = await service.issue_challenge(
            AccountType.WALLET, wallet.address.root
        )
        proof = IdentityProof(
            challenge_id=challenge.id, signature=wallet.sign_message(challenge.message)
        )

        # Act
        await service.verify(AccountType.WALLET, wallet.address.root, proof)

        # Assert
        stored = await repository.find_by_id(challenge.id)
        assert stored.is_consumed
        with pytest.raises(IdentityProofError, match="already used"):
            await service.verify(AccountType.WALLET, wallet.address.root, proof)

    @pytest.mark.asyncio
    async def test_expired_challenge_rejected(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        repository = await unit_env.get(IdentityChallengeRepository)
        wallet = Wallet.from_seed(1)
        challenge = await service.issue_challenge(
            AccountType.WALLET, wallet.address.root
        )
        await repository.save(
            challenge.model_copy(
                update={"expires_at": utcnow() - timedelta(seconds=1)}
            )
        )
        proof = IdentityProof(
            challenge_id=challenge.id, signature=wallet.sign_message(challenge.message)
        )

        # Act / Assert
        with pytest.raises(IdentityProofError, match="expired"):
            await service.verify(AccountType.WALLET, wallet.address.root, proof)

    @pytest.mark.asyncio
    async def test_missing_signature_rejected(self, unit_env):
        service = await unit_env.get(IdentityProofService)
        wallet = Wallet.from_seed(1)
        challenge = await service.issue_challenge(
            AccountType.WALLET, wallet.address.root
        )

        with pytest.raises(IdentityProofError, match="Signature is required"):
            await service.verify(
                AccountType.WALLET,
                wallet.address.root,
                IdentityProof(challenge_id=challenge.id),
            )

    @pytest.mark.asyncio
    async def test_email_challenge_cannot_prove_wallet(self, unit_env):
        service = await unit_env.get(IdentityProofService)
        challenge = await service.issue_challenge(AccountType.EMAIL, EMAIL)

        with pytest.raises(IdentityProofError, match="Unknown challenge"):
            await service.verify(
                AccountType.WALLET,
                Wallet.from_seed(1).address.root,
                IdentityProof(challenge_id=challenge.id, signature="0x00"),
            )

    @pytest.mark.asyncio
    async def test_proof_without_challenge_rejected(self, unit_env):
        service = await unit_env.get(IdentityProofService)

        with pytest.raises(IdentityProofError, match="Challenge id"):
            await service.verify(
                AccountType.WALLET,
                Wallet.from_seed(1).address.root,
                IdentityProof(signature="0x00"),
            )


class TestVerifyEmail:
    """Tests for emailed code proofs."""

    @pytest.mark.asyncio
    async def test_correct_code_verifies(self, unit_env):
        service = await unit_env.get(IdentityProofService)
        email_sender = await unit_env.get(EmailSender)
        challenge = await service.issue_challenge(AccountType.EMAIL, EMAIL)
        code = email_sender.last_code(EMAIL)

        await service.verify(
            AccountType.EMAIL,
            "ALICE@example.com",
            IdentityProof(challenge_id=challenge.id, code=code),
        )

    @pytest.mark.asyncio
    async def test_wrong_code_counts_an_attempt(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        repository = await unit_env.get(IdentityChallengeRepository)
        email_sender = await unit_env.get(EmailSender)
        challenge = await service.issue_challenge(AccountType.EMAIL, EMAIL)
        code = email_sender.last_code(EMAIL)

        # Act
        with pytest.raises(IdentityProofError, match="invalid"):
            await service.verify(
                AccountType.EMAIL,
                EMAIL,
                IdentityProof(challenge_id=challenge.id, code=wrong_code(code)),
            )

        # Assert
        stored = await repository.find_by_id(challenge.id)
        assert stored.attempts == 1
        assert not stored.is_consumed

    @pytest.mark.asyncio
    async def test_attempt_limit_locks_challenge(self, unit_env):
        """After five misses even the right code is refused."""
        # Arrange
        service = await unit_env.get(IdentityProofService)
        email_sender = await unit_env.get(EmailSender)
        challenge = await service.issue_challenge(AccountType.EMAIL, EMAIL)
        code = email_sender.last_code(EMAIL)
        for _ in range(5):
            with pytest.raises(IdentityProofError, match="invalid"):
                await service.verify(
                    AccountType.EMAIL,
                    EMAIL,
                    IdentityProof(challenge_id=challenge.id, code=wrong_code(code)),
                )

        # Act / Assert
        with pytest.raises(IdentityProofError, match="Too many attempts"):
            await service.verify(
                AccountType.EMAIL,
                EMAIL,
                IdentityProof(challenge_id=challenge.id, code=code),
            )


class TestVerifyOtherTypes:
    """Tests for guest and upstream-authenticated identities."""

    @pytest.mark.asyncio
    async def test_missing_proof_rejected(self, unit_env):
        service = await unit_env.get(IdentityProofService)

        with pytest.raises(IdentityProofError, match="required"):
            await service.verify(AccountType.EMAIL, EMAIL, None)

    @pytest.mark.asyncio
    async def test_guest_cannot_be_proven(self, unit_env):
        service = await unit_env.get(IdentityProofService)

        with pytest.raises(IdentityProofError, match="Guest"):
            await service.verify(AccountType.GUEST, "guest-1", IdentityProof())

    @pytest.mark.asyncio
    async def test_upstream_key_checked(self, unit_env):
        # Arrange
        service = await unit_env.get(IdentityProofService)
        service.settings = AuthSettings(upstream_api_key="upstream-secret")

        # Act
        await service.verify(
            AccountType.PASSKEY, "cred-1", IdentityProof(upstream_key="upstream-secret")
        )

        # Assert
        with pytest.raises(IdentityProofError, match="invalid"):
            await service.verify(
                AccountType.SOCIAL, "1234", IdentityProof(upstream_key="guess")
            )
        with pytest.raises(IdentityProofError, match="invalid"):
            await service.verify(AccountType.SOCIAL, "1234", IdentityProof())
