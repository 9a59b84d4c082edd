"""Unlink accounts use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import AuditLogger, IdentityLinkService
from interspace.domain.value import AccountId


class UnlinkAccountsRequest(BaseModel):
    """Unlink accounts request."""

    account_id: str  # Caller account ID from the token
    target_account_id: str


class UnlinkAccountsResponse(BaseModel):
    """Unlink accounts response."""

    success: bool


class UnlinkAccountsUseCase:
    """Use case for removing a link between the caller and another account."""

    def __init__(
        self, identity_link_service: IdentityLinkService, audit_logger: AuditLogger
    ) -> None:
        self.identity_link_service = identity_link_service
        self.audit_logger = audit_logger

    async def execute(self, request: UnlinkAccountsRequest) -> UnlinkAccountsResponse:
        """Remove the edge between caller and target.

        Raises:
            NotFoundError: If the two accounts are not linked
        """
        account_id = AccountId(UUID(request.account_id))
        await self.identity_link_service.unlink_accounts(
            account_id, AccountId(UUID(request.target_account_id))
        )
        await self.audit_logger.record(
            "account.unlinked",
            "identity_link",
            resource_id=request.target_account_id,
            account_id=account_id,
        )
        return UnlinkAccountsResponse(success=True)
