"""Test configuration and shared helpers."""

from dataclasses import dataclass
from typing import Any, Optional

from coincurve import PrivateKey
from dishka import AsyncContainer

from interspace.domain.model.account import Account
from interspace.domain.model.delegation import SignedAuthorization
from interspace.domain.model.identity_challenge import IdentityProof
from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.model.profile import Profile
from interspace.domain.service import (
    AccountService,
    EmailSender,
    IdentityProofService,
    LinkedAccountService,
    ProfileService,
    SessionWalletClient,
)
from interspace.domain.service.signature import (
    authorization_digest,
    personal_message_digest,
    public_key_to_address,
)
from interspace.domain.value import AccountType, EthAddress

# 0.01 ETH in wei
CENTI_ETH = 10**16
SEPOLIA = 11155111
POLYGON = 137


@dataclass
class Wallet:
    """secp256k1 key pair standing in for a user's EOA."""

    private_key: PrivateKey

    @classmethod
    def from_seed(cls, seed: int) -> "Wallet":
        """Deterministic wallet; seed must be in [1, curve order)."""
        return cls(PrivateKey(seed.to_bytes(32, "big")))

    @property
    def address(self) -> EthAddress:
        return public_key_to_address(self.private_key.public_key)

    def sign_authorization(
        self, chain_id: int, address: EthAddress, nonce: int
    ) -> SignedAuthorization:
        """Sign the delegation digest for (chain_id, address, nonce)."""
        digest = authorization_digest(chain_id, address, nonce)
        signature = self.private_key.sign_recoverable(digest, hasher=None)
        return SignedAuthorization(
            chain_id=chain_id,
            address=address,
            nonce=nonce,
            r="0x" + signature[:32].hex(),
            s="0x" + signature[32:64].hex(),
            y_parity=signature[64],
        )

    def sign_message(self, message: str) -> str:
        """personal_sign over message, as a 65-byte hex string with v = 27/28."""
        signature = self.private_key.sign_recoverable(
            personal_message_digest(message), hasher=None
        )
        return "0x" + (signature[:64] + bytes([signature[64] + 27])).hex()


@dataclass
class Owner:
    """Account with a provisioned profile and its wallet linked."""

    wallet: Wallet
    account: Account
    profile: Profile
    linked: LinkedAccount


async def create_owner(
    env: AsyncContainer, seed: int, chain_id: int = SEPOLIA
) -> Owner:
    """Provision a wallet account, its profile and linked EOA through services."""
    account_service = await env.get(AccountService)
    profile_service = await env.get(ProfileService)
    linked_account_service = await env.get(LinkedAccountService)
    session_wallet_client = await env.get(SessionWalletClient)

    wallet = Wallet.from_seed(seed)
    account, _ = await account_service.find_or_create_account(
        AccountType.WALLET, wallet.address.root, metadata={"chainId": chain_id}
    )
    address = await session_wallet_client.create_session_wallet(account.id)
    profile = await profile_service.create_profile(account, address)
    linked = await linked_account_service.auto_link_account(account, profile)
    assert linked is not None
    return Owner(wallet=wallet, account=account, profile=profile, linked=linked)


async def create_account(
    env: AsyncContainer,
    identifier: str,
    account_type: AccountType = AccountType.EMAIL,
    metadata: Optional[dict[str, Any]] = None,
) -> Account:
    """Create a bare account."""
    account_service = await env.get(AccountService)
    account, _ = await account_service.find_or_create_account(
        account_type, identifier, metadata=metadata
    )
    return account


async def prove_wallet(env: AsyncContainer, wallet: Wallet) -> IdentityProof:
    """Answer a fresh sign-in challenge with the wallet's signature."""
    proof_service = await env.get(IdentityProofService)
    challenge = await proof_service.issue_challenge(
        AccountType.WALLET, wallet.address.root
    )
    assert challenge.message is not None
    return IdentityProof(
        challenge_id=challenge.id, signature=wallet.sign_message(challenge.message)
    )


async def prove_email(env: AsyncContainer, email: str) -> IdentityProof:
    """Answer a fresh email challenge with the code the mock mailer received."""
    proof_service = await env.get(IdentityProofService)
    email_sender = await env.get(EmailSender)
    challenge = await proof_service.issue_challenge(AccountType.EMAIL, email)
    return IdentityProof(
        challenge_id=challenge.id, code=email_sender.last_code(email.lower())
    )
