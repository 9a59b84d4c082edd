"""List profile delegations use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, ProfileId

from .get_delegation import DelegationItem


class ListProfileDelegationsRequest(BaseModel):
    """List profile delegations request."""

    account_id: str  # Caller account ID from the token
    profile_id: str


class ListProfileDelegationsResponse(BaseModel):
    """List profile delegations response."""

    delegations: list[DelegationItem]


class ListProfileDelegationsUseCase:
    """Use case for listing the usable delegations of a profile."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(
        self, request: ListProfileDelegationsRequest
    ) -> ListProfileDelegationsResponse:
        delegations = await self.delegation_service.get_profile_delegations(
            AccountId(UUID(request.account_id)), ProfileId(UUID(request.profile_id))
        )
        return ListProfileDelegationsResponse(
            delegations=[DelegationItem.from_delegation(d) for d in delegations]
        )
