"""Activate delegation use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, DelegationId

from .get_delegation import DelegationItem


class ActivateDelegationRequest(BaseModel):
    """Activate delegation request."""

    account_id: str  # Caller account ID from the token
    delegation_id: str


class ActivateDelegationUseCase:
    """Use case for submitting a signed delegation on chain."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(self, request: ActivateDelegationRequest) -> DelegationItem:
        delegation = await self.delegation_service.activate_delegation(
            AccountId(UUID(request.account_id)),
            DelegationId(UUID(request.delegation_id)),
        )
        return DelegationItem.from_delegation(delegation)
