"""Get accessible profiles use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.application.usecase.account import ProfileItem
from interspace.domain.service import IdentityLinkService
from interspace.domain.value import AccountId


class GetAccessibleProfilesRequest(BaseModel):
    """Get accessible profiles request."""

    account_id: str  # Caller account ID from the token


class GetAccessibleProfilesResponse(BaseModel):
    """Get accessible profiles response."""

    profiles: list[ProfileItem]


class GetAccessibleProfilesUseCase:
    """Use case for listing profiles reachable through the identity graph."""

    def __init__(self, identity_link_service: IdentityLinkService) -> None:
        self.identity_link_service = identity_link_service

    async def execute(
        self, request: GetAccessibleProfilesRequest
    ) -> GetAccessibleProfilesResponse:
        profiles = await self.identity_link_service.get_accessible_profiles(
            AccountId(UUID(request.account_id))
        )
        return GetAccessibleProfilesResponse(
            profiles=[ProfileItem.from_profile(profile) for profile in profiles]
        )
