"""Link accounts use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from interspace.domain.error import AuthorizationError, ConflictError, ValidationError
from interspace.domain.model.identity_challenge import IdentityProof
from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.service import (
    AccountService,
    AuditLogger,
    IdentityLinkService,
    IdentityProofService,
)
from interspace.domain.value import AccountId, AccountType, LinkType, PrivacyMode


class LinkItem(BaseModel):
    """Identity link information for responses."""

    account_a_id: str
    account_b_id: str
    privacy_mode: PrivacyMode
    link_type: LinkType
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_link(cls, link: IdentityLink) -> "LinkItem":
        return cls(
            account_a_id=str(link.account_a_id),
            account_b_id=str(link.account_b_id),
            privacy_mode=link.privacy_mode,
            link_type=link.link_type,
            created_at=link.created_at,
            updated_at=link.updated_at,
        )


class LinkAccountsRequest(BaseModel):
    """Link accounts request.

    The target identity is found or created, then linked to the caller.
    proof shows the caller controls the target.
    """

    account_id: str  # Caller account ID from the token
    target_type: AccountType
    target_identifier: str
    target_provider: str | None = None
    proof: IdentityProof | None = None
    privacy_mode: PrivacyMode = PrivacyMode.LINKED
    link_type: LinkType = LinkType.DIRECT


class LinkAccountsResponse(BaseModel):
    """Link accounts response."""

    target_account_id: str
    link: LinkItem


class LinkAccountsUseCase:
    """Use case for linking the caller's account to another identity."""

    def __init__(
        self,
        account_service: AccountService,
        identity_link_service: IdentityLinkService,
        identity_proof_service: IdentityProofService,
        audit_logger: AuditLogger,
    ) -> None:
        """Initialize link accounts use case.

        Args:
            account_service: Account domain service
            identity_link_service: Identity link graph service
            identity_proof_service: Proof-of-control checks
            audit_logger: Audit trail
        """
        self.account_service = account_service
        self.identity_link_service = identity_link_service
        self.identity_proof_service = identity_proof_service
        self.audit_logger = audit_logger

    async def execute(self, request: LinkAccountsRequest) -> LinkAccountsResponse:
        """Execute link flow.

        Raises:
            NotFoundError: If the caller account does not exist
            AuthorizationError: If the caller account is not verified
            ValidationError: If the target is a guest or the caller itself
            IdentityProofError: If the caller cannot prove control of the target
            ConflictError: If the target is already linked to another identity
                or the link would close a cycle
        """
        account_id = AccountId(UUID(request.account_id))
        with logfire.span(
            "link_accounts.execute",
            account_id=request.account_id,
            target_type=request.target_type.value,
        ):
            account = await self.account_service.get_account(account_id)
            if account.type != AccountType.GUEST and not account.verified:
                raise AuthorizationError(
                    "Please verify your account before linking other accounts"
                )

            if request.target_type == AccountType.GUEST:
                raise ValidationError("Guest accounts cannot be linked")
            await self.identity_proof_service.verify(
                request.target_type, request.target_identifier, request.proof
            )

            target, _ = await self.account_service.find_or_create_account(
                request.target_type,
                request.target_identifier,
                provider=request.target_provider,
            )
            if not target.verified:
                target = await self.account_service.verify_account(target.id)

            closure = await self.identity_link_service.get_linked_accounts(target.id)
            if len(closure) > 1 and account.id not in closure:
                raise ConflictError(
                    "Target account is already linked to another identity"
                )

            link = await self.identity_link_service.link_accounts(
                account.id,
                target.id,
                privacy_mode=request.privacy_mode,
                link_type=request.link_type,
            )

            await self.audit_logger.record(
                "account.linked",
                "identity_link",
                resource_id=str(target.id),
                account_id=account.id,
                target_type=request.target_type.value,
                privacy_mode=request.privacy_mode.value,
                link_type=request.link_type.value,
            )
            return LinkAccountsResponse(
                target_account_id=str(target.id), link=LinkItem.from_link(link)
            )
