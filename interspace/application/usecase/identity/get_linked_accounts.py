"""Get linked accounts use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import AccountService, IdentityLinkService
from interspace.domain.value import AccountId, AccountType

from .link_accounts import LinkItem


class LinkedIdentityItem(BaseModel):
    """Account in the caller's identity closure."""

    account_id: str
    account_type: AccountType
    provider: str | None
    identifier: str
    verified: bool


class GetLinkedAccountsRequest(BaseModel):
    """Get linked accounts request."""

    account_id: str  # Caller account ID from the token


class GetLinkedAccountsResponse(BaseModel):
    """Get linked accounts response."""

    accounts: list[LinkedIdentityItem]  # Closure, caller first
    links: list[LinkItem]  # Direct edges of the caller, isolated included


class GetLinkedAccountsUseCase:
    """Use case for listing the identities linked to the caller."""

    def __init__(
        self,
        account_service: AccountService,
        identity_link_service: IdentityLinkService,
    ) -> None:
        """Initialize get linked accounts use case.

        Args:
            account_service: Account domain service
            identity_link_service: Identity link graph service
        """
        self.account_service = account_service
        self.identity_link_service = identity_link_service

    async def execute(
        self, request: GetLinkedAccountsRequest
    ) -> GetLinkedAccountsResponse:
        """Resolve the caller's closure and direct links.

        Accounts reachable only through isolated edges are not part of the
        closure, but the isolated edges themselves are listed in `links`.
        """
        account_id = AccountId(UUID(request.account_id))
        closure = await self.identity_link_service.get_linked_accounts(account_id)
        ordered = [account_id] + sorted(
            (member for member in closure if member != account_id), key=str
        )

        accounts = []
        for member_id in ordered:
            account = await self.account_service.get_account(member_id)
            accounts.append(
                LinkedIdentityItem(
                    account_id=str(account.id),
                    account_type=account.type,
                    provider=account.provider,
                    identifier=account.identifier,
                    verified=account.verified,
                )
            )

        links = await self.identity_link_service.get_links(account_id)
        return GetLinkedAccountsResponse(
            accounts=accounts, links=[LinkItem.from_link(link) for link in links]
        )
