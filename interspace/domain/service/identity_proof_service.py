"""Proof-of-control for sign-in and account linking.

Wallets answer a sign-in message (EIP-4361 text, EIP-191 signature).
Emails echo a six digit code mailed to them. Social and passkey
identities are authenticated upstream, and the upstream service vouches
for them with a shared key. Wallet and email challenges are single use.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire
import pydantic

from interspace.config import AuthSettings
from interspace.domain.error import IdentityProofError, ValidationError
from interspace.domain.model.common import utcnow
from interspace.domain.model.identity_challenge import (
    IdentityChallenge,
    IdentityProof,
)
from interspace.domain.repository import IdentityChallengeRepository
from interspace.domain.value import AccountType, ChallengeId, EthAddress

from .account_service import normalize_identifier
from .base import Service
from .email import EmailSender
from .signature import checksum_address, verify_message_signature

SIGN_IN_STATEMENT = "Sign in to Interspace."


def hash_code(challenge_id: ChallengeId, code: str) -> str:
    """Hash of an email code, salted with its challenge id."""
    return hashlib.sha256(f"{challenge_id}:{code}".encode()).hexdigest()


class IdentityProofService(Service):
    """Issues and checks proof-of-control challenges."""

    def __init__(
        self,
        identity_challenge_repository: IdentityChallengeRepository,
        email_sender: EmailSender,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize identity proof service.

        Args:
            identity_challenge_repository: Challenge store
            email_sender: Delivers email codes
            auth_settings: Challenge lifetimes, attempt limit and upstream key
        """
        self.identity_challenge_repository = identity_challenge_repository
        self.email_sender = email_sender
        self.settings = auth_settings

    async def issue_challenge(
        self, account_type: AccountType, identifier: str
    ) -> IdentityChallenge:
        """Create a challenge for a wallet or an email address.

        For wallets the returned challenge carries the message to sign.
        For emails a code is mailed out and only its hash is stored.

        Raises:
            ValidationError: If the type takes no challenge or the
                identifier is malformed
        """
        identifier = normalize_identifier(account_type, identifier)
        with logfire.span(
            "identity_proof_service.issue_challenge", account_type=account_type.value
        ):
            now = utcnow()
            await self.identity_challenge_repository.delete_expired(now)
            challenge_id = ChallengeId(uuid4())

            if account_type == AccountType.WALLET:
                try:
                    address = EthAddress(identifier)
                except pydantic.ValidationError as e:
                    raise ValidationError(f"Invalid wallet address: {e}") from e
                ttl = timedelta(seconds=self.settings.challenge_ttl_seconds)
                expires_at = now + ttl
                challenge = IdentityChallenge(
                    id=challenge_id,
                    account_type=account_type,
                    identifier=identifier,
                    message=self._sign_in_message(address, now, expires_at),
                    expires_at=expires_at,
                    created_at=now,
                )
                await self.identity_challenge_repository.save(challenge)

            elif account_type == AccountType.EMAIL:
                if "@" not in identifier:
                    raise ValidationError("Invalid email address")
                code = f"{secrets.randbelow(10**6):06d}"
                challenge = IdentityChallenge(
                    id=challenge_id,
                    account_type=account_type,
                    identifier=identifier,
                    code_hash=hash_code(challenge_id, code),
                    expires_at=now
                    + timedelta(seconds=self.settings.email_code_ttl_seconds),
                    created_at=now,
                )
                await self.identity_challenge_repository.save(challenge)
                await self.email_sender.send_verification_code(identifier, code)

            else:
                raise ValidationError(
                    f"{account_type.value} accounts do not use challenges"
                )

            logfire.info(
                "Identity challenge issued",
                challenge_id=str(challenge.id),
                account_type=account_type.value,
            )
            return challenge

    async def verify(
        self,
        account_type: AccountType,
        identifier: str,
        proof: Optional[IdentityProof],
    ) -> None:
        """Check that proof shows control of the identity.

        A wallet or email challenge is consumed when it verifies. A wrong
        email code counts against the challenge's attempt limit.

        Raises:
            IdentityProofError: If the proof is missing or does not hold
        """
        identifier = normalize_identifier(account_type, identifier)
        with logfire.span(
            "identity_proof_service.verify", account_type=account_type.value
        ):
            if account_type == AccountType.GUEST:
                raise IdentityProofError("Guest identities cannot be proven")

            if proof is None:
                logfire.warn("Identity proof missing", account_type=account_type.value)
                raise IdentityProofError("Proof of control is required")

            if account_type in (AccountType.SOCIAL, AccountType.PASSKEY):
                self._verify_upstream(proof)
                return

            challenge = await self._open_challenge(account_type, identifier, proof)
            if account_type == AccountType.WALLET:
                self._verify_wallet(challenge, proof)
            else:
                await self._verify_email(challenge, proof)

            consumed = await self.identity_challenge_repository.consume(
                challenge.id, utcnow()
            )
            if not consumed:
                raise IdentityProofError("Challenge was already used")

            logfire.info(
                "Identity proven",
                challenge_id=str(challenge.id),
                account_type=account_type.value,
            )

    def _verify_upstream(self, proof: IdentityProof) -> None:
        expected = self.settings.upstream_api_key
        if not expected:
            raise IdentityProofError("Upstream authentication is not configured")
        if not proof.upstream_key or not hmac.compare_digest(
            proof.upstream_key.encode(), expected.encode()
        ):
            logfire.warn("Upstream key rejected")
            raise IdentityProofError("Upstream key is invalid")

    async def _open_challenge(
        self, account_type: AccountType, identifier: str, proof: IdentityProof
    ) -> IdentityChallenge:
        """Load the challenge a proof answers, if it is still usable."""
        if proof.challenge_id is None:
            raise IdentityProofError("Challenge id is required")

        challenge = await self.identity_challenge_repository.find_by_id(
            proof.challenge_id
        )
        if (
            challenge is None
            or challenge.account_type != account_type
            or challenge.identifier != identifier
        ):
            raise IdentityProofError("Unknown challenge")
        if challenge.is_consumed:
            raise IdentityProofError("Challenge was already used")
        if challenge.is_expired():
            raise IdentityProofError("Challenge has expired")
        return challenge

    def _verify_wallet(
        self, challenge: IdentityChallenge, proof: IdentityProof
    ) -> None:
        if not proof.signature or challenge.message is None:
            raise IdentityProofError("Signature is required")
        if not verify_message_signature(
            EthAddress(challenge.identifier), challenge.message, proof.signature
        ):
            raise IdentityProofError("Signature does not match wallet")

    async def _verify_email(
        self, challenge: IdentityChallenge, proof: IdentityProof
    ) -> None:
        if challenge.attempts >= self.settings.max_code_attempts:
            raise IdentityProofError("Too many attempts")
        if not proof.code:
            raise IdentityProofError("Verification code is required")

        expected = challenge.code_hash or ""
        if not hmac.compare_digest(hash_code(challenge.id, proof.code), expected):
            await self.identity_challenge_repository.save(
                challenge.model_copy(update={"attempts": challenge.attempts + 1})
            )
            logfire.warn(
                "Email code rejected",
                challenge_id=str(challenge.id),
                attempts=challenge.attempts + 1,
            )
            raise IdentityProofError("Verification code is invalid")

    def _sign_in_message(
        self, address: EthAddress, issued_at: datetime, expires_at: datetime
    ) -> str:
        """EIP-4361 sign-in text for a wallet."""
        return "\n".join(
            [
                f"{self.settings.siwe_domain} wants you to sign in with your "
                "Ethereum account:",
                checksum_address(address),
                "",
                SIGN_IN_STATEMENT,
                "",
                f"URI: {self.settings.siwe_uri}",
                "Version: 1",
                "Chain ID: 1",
                f"Nonce: {secrets.token_hex(8)}",
                f"Issued At: {issued_at.isoformat()}",
                f"Expiration Time: {expires_at.isoformat()}",
            ]
        )
