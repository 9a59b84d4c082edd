"""Revoke delegation use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, DelegationId

from .get_delegation import DelegationItem


class RevokeDelegationRequest(BaseModel):
    """Revoke delegation request."""

    account_id: str  # Caller account ID from the token
    delegation_id: str


class RevokeDelegationUseCase:
    """Use case for revoking a delegation."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(self, request: RevokeDelegationRequest) -> DelegationItem:
        """Revoke the delegation.

        Raises:
            NotFoundError: If it does not exist or is not owned by the caller
            ConflictError: If it is already revoked
        """
        delegation = await self.delegation_service.revoke_delegation(
            AccountId(UUID(request.account_id)),
            DelegationId(UUID(request.delegation_id)),
        )
        return DelegationItem.from_delegation(delegation)
