"""Provision account use case."""

from datetime import datetime
from typing import Any
from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from interspace.domain.error import ValidationError
from interspace.domain.model.identity_challenge import IdentityProof
from interspace.domain.model.profile import Profile
from interspace.domain.service import (
    AccountService,
    AuditLogger,
    IdentityLinkService,
    IdentityProofService,
    JWTService,
    LinkedAccountService,
    ProfileService,
    SessionWalletClient,
)
from interspace.domain.value import AccountType


class ProfileItem(BaseModel):
    """Profile information for responses."""

    profile_id: str
    name: str
    session_wallet_address: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileItem":
        return cls(
            profile_id=str(profile.id),
            name=profile.name,
            session_wallet_address=profile.session_wallet_address.root,
            is_active=profile.is_active,
            created_at=profile.created_at,
        )


class ProvisionAccountRequest(BaseModel):
    """Provision account request.

    Every type but guest carries a proof of control. Guest identifiers are
    generated here and never supplied by the caller.
    """

    account_type: AccountType
    identifier: str | None = None  # Address, email or provider user id
    proof: IdentityProof | None = None
    provider: str | None = None  # Social provider name
    metadata: dict[str, Any] = Field(default_factory=dict)
    profile_name: str | None = None  # Name for an auto-created profile


class ProvisionAccountResponse(BaseModel):
    """Provision account response."""

    token: str
    account_id: str
    account_type: AccountType
    is_new_account: bool
    profiles: list[ProfileItem]
    linked_account_id: str | None = None  # Set when a wallet was auto-linked


class ProvisionAccountUseCase:
    """Use case for signing an identity in and provisioning its profile."""

    def __init__(
        self,
        account_service: AccountService,
        profile_service: ProfileService,
        identity_link_service: IdentityLinkService,
        identity_proof_service: IdentityProofService,
        linked_account_service: LinkedAccountService,
        session_wallet_client: SessionWalletClient,
        jwt_service: JWTService,
        audit_logger: AuditLogger,
    ) -> None:
        """Initialize provision account use case.

        Args:
            account_service: Account domain service
            profile_service: Profile domain service
            identity_link_service: Identity link graph service
            identity_proof_service: Proof-of-control checks
            linked_account_service: Linked account domain service
            session_wallet_client: Session wallet collaborator
            jwt_service: JWT token domain service
            audit_logger: Audit trail
        """
        self.account_service = account_service
        self.profile_service = profile_service
        self.identity_link_service = identity_link_service
        self.identity_proof_service = identity_proof_service
        self.linked_account_service = linked_account_service
        self.session_wallet_client = session_wallet_client
        self.jwt_service = jwt_service
        self.audit_logger = audit_logger

    async def execute(
        self, request: ProvisionAccountRequest
    ) -> ProvisionAccountResponse:
        """Execute provisioning flow.

        Steps:
        1. Check the proof of control (guests get a fresh identifier instead)
        2. Find or create the account, merging metadata and marking it verified
        3. Collect the profiles reachable through the identity graph
        4. If there are none: create a session wallet and a profile
        5. Auto-link the wallet the account controls to the new profile
        6. Issue a JWT for the account

        Args:
            request: Provision request with the authenticated identity

        Returns:
            Token, account id and accessible profiles

        Raises:
            ValidationError: If a non-guest request has no identifier
            IdentityProofError: If the proof does not hold
        """
        with logfire.span(
            "provision_account.execute",
            account_type=request.account_type.value,
            provider=request.provider,
        ):
            identifier = await self._proven_identifier(request)
            account, created = await self.account_service.find_or_create_account(
                request.account_type,
                identifier,
                provider=request.provider,
                metadata=request.metadata,
            )
            if not account.verified and account.type != AccountType.GUEST:
                account = await self.account_service.verify_account(account.id)

            profiles = await self.identity_link_service.get_accessible_profiles(
                account.id
            )
            linked_account_id = None
            if not profiles:
                address = await self.session_wallet_client.create_session_wallet(
                    account.id
                )
                profile = await self.profile_service.create_profile(
                    account, address, name=request.profile_name
                )
                linked = await self.linked_account_service.auto_link_account(
                    account, profile
                )
                if linked:
                    linked_account_id = str(linked.id)
                profiles = [profile]

                logfire.info(
                    "Profile provisioned",
                    account_id=str(account.id),
                    profile_id=str(profile.id),
                )
                await self.audit_logger.record(
                    "profile.created",
                    "profile",
                    resource_id=str(profile.id),
                    account_id=account.id,
                    profile_id=profile.id,
                    auto_linked=linked is not None,
                )

            token = self.jwt_service.create_token(account.id, account.type)

            return ProvisionAccountResponse(
                token=token,
                account_id=str(account.id),
                account_type=account.type,
                is_new_account=created,
                profiles=[ProfileItem.from_profile(p) for p in profiles],
                linked_account_id=linked_account_id,
            )

    async def _proven_identifier(self, request: ProvisionAccountRequest) -> str:
        if request.account_type == AccountType.GUEST:
            return f"guest-{uuid4().hex}"
        if not request.identifier:
            raise ValidationError("identifier is required")
        await self.identity_proof_service.verify(
            request.account_type, request.identifier, request.proof
        )
        return request.identifier
