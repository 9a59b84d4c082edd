"""Unlink account use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import AuditLogger, LinkedAccountService
from interspace.domain.value import AccountId, LinkedAccountId

from .link_account import LinkedAccountItem


class UnlinkAccountRequest(BaseModel):
    """Unlink account request."""

    account_id: str  # Caller account ID from the token
    linked_account_id: str


class UnlinkAccountUseCase:
    """Use case for detaching an EOA from a profile."""

    def __init__(
        self, linked_account_service: LinkedAccountService, audit_logger: AuditLogger
    ) -> None:
        self.linked_account_service = linked_account_service
        self.audit_logger = audit_logger

    async def execute(self, request: UnlinkAccountRequest) -> LinkedAccountItem:
        """Deactivate the linked account.

        Delegations granted by the address stay on record but execution
        through them is refused while the account is inactive.

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ConflictError: If it is the last active linked account
        """
        account_id = AccountId(UUID(request.account_id))
        linked = await self.linked_account_service.unlink_account(
            account_id, LinkedAccountId(UUID(request.linked_account_id))
        )
        await self.audit_logger.record(
            "linked_account.removed",
            "linked_account",
            resource_id=str(linked.id),
            account_id=account_id,
            profile_id=linked.profile_id,
        )
        return LinkedAccountItem.from_linked_account(linked)
