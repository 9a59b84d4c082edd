"""List linked accounts use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import LinkedAccountService
from interspace.domain.value import AccountId, ProfileId

from .link_account import LinkedAccountItem


class ListLinkedAccountsRequest(BaseModel):
    """List linked accounts request."""

    account_id: str  # Caller account ID from the token
    profile_id: str
    include_inactive: bool = False


class ListLinkedAccountsResponse(BaseModel):
    """List linked accounts response."""

    linked_accounts: list[LinkedAccountItem]


class ListLinkedAccountsUseCase:
    """Use case for listing the EOAs attached to a profile."""

    def __init__(self, linked_account_service: LinkedAccountService) -> None:
        self.linked_account_service = linked_account_service

    async def execute(
        self, request: ListLinkedAccountsRequest
    ) -> ListLinkedAccountsResponse:
        linked_accounts = await self.linked_account_service.list_linked_accounts(
            AccountId(UUID(request.account_id)),
            ProfileId(UUID(request.profile_id)),
            active_only=not request.include_inactive,
        )
        return ListLinkedAccountsResponse(
            linked_accounts=[
                LinkedAccountItem.from_linked_account(linked)
                for linked in linked_accounts
            ]
        )
