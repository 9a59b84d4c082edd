"""Update link privacy use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import AuditLogger, IdentityLinkService
from interspace.domain.value import AccountId, PrivacyMode

from .link_accounts import LinkItem


class UpdateLinkPrivacyRequest(BaseModel):
    """Update link privacy request."""

    account_id: str  # Caller account ID from the token
    target_account_id: str
    privacy_mode: PrivacyMode


class UpdateLinkPrivacyUseCase:
    """Use case for changing the privacy mode of one of the caller's links."""

    def __init__(
        self, identity_link_service: IdentityLinkService, audit_logger: AuditLogger
    ) -> None:
        self.identity_link_service = identity_link_service
        self.audit_logger = audit_logger

    async def execute(self, request: UpdateLinkPrivacyRequest) -> LinkItem:
        """Update the mode of the edge between caller and target.

        Raises:
            NotFoundError: If the two accounts are not linked
        """
        account_id = AccountId(UUID(request.account_id))
        link = await self.identity_link_service.update_link_privacy(
            account_id,
            AccountId(UUID(request.target_account_id)),
            request.privacy_mode,
        )
        await self.audit_logger.record(
            "account.link_privacy_updated",
            "identity_link",
            resource_id=request.target_account_id,
            account_id=account_id,
            privacy_mode=request.privacy_mode.value,
        )
        return LinkItem.from_link(link)
