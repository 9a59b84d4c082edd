"""Store delegation use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from interspace.domain.model.delegation import (
    DelegationPermissions,
    SignedAuthorization,
)
from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, LinkedAccountId

from .get_delegation import DelegationItem


class StoreDelegationRequest(BaseModel):
    """Store delegation request."""

    account_id: str  # Caller account ID from the token
    linked_account_id: str
    signed_authorization: SignedAuthorization
    permissions: DelegationPermissions | None = None
    expires_at: datetime | None = None


class StoreDelegationUseCase:
    """Use case for recording a delegation signed by a linked EOA."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(self, request: StoreDelegationRequest) -> DelegationItem:
        """Verify the signature and store the delegation.

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ValidationError: If the signature was not made by the linked EOA
            ConflictError: If an open delegation already covers the tuple
        """
        delegation = await self.delegation_service.store_delegation(
            AccountId(UUID(request.account_id)),
            LinkedAccountId(UUID(request.linked_account_id)),
            request.signed_authorization,
            permissions=request.permissions,
            expires_at=request.expires_at,
        )
        return DelegationItem.from_delegation(delegation)
