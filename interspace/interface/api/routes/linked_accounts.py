"""Linked account routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from interspace.application.usecase.account import GetCurrentAccountResponse
from interspace.application.usecase.linked_account import (
    LinkAccountRequest,
    LinkAccountUseCase,
    LinkedAccountItem,
    ListLinkedAccountsRequest,
    ListLinkedAccountsResponse,
    ListLinkedAccountsUseCase,
    UnlinkAccountRequest,
    UnlinkAccountUseCase,
)
from interspace.interface.api.auth import get_current_account

router = APIRouter(tags=["linked accounts"], route_class=DishkaRoute)


class LinkAccountAPIRequest(BaseModel):
    """API request for attaching an EOA to a profile."""

    address: str
    chain_id: int = Field(default=1, gt=0)
    auth_strategy: str = Field(default="wallet", max_length=50)
    wallet_type: str = Field(default="external", max_length=50)
    custom_name: str | None = Field(default=None, max_length=100)


@router.get(
    "/profiles/{profile_id}/linked-accounts",
    response_model=ListLinkedAccountsResponse,
)
async def list_linked_accounts(
    profile_id: str,
    list_linked_accounts_use_case: FromDishka[ListLinkedAccountsUseCase],
    include_inactive: bool = False,
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> ListLinkedAccountsResponse:
    """Linked accounts of one of the caller's profiles."""
    return await list_linked_accounts_use_case.execute(
        ListLinkedAccountsRequest(
            account_id=current.account_id,
            profile_id=profile_id,
            include_inactive=include_inactive,
        )
    )


@router.post(
    "/profiles/{profile_id}/linked-accounts",
    response_model=LinkedAccountItem,
    status_code=status.HTTP_201_CREATED,
)
async def link_account(
    profile_id: str,
    request: LinkAccountAPIRequest,
    link_account_use_case: FromDishka[LinkAccountUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> LinkedAccountItem:
    """Attach an EOA to one of the caller's profiles."""
    return await link_account_use_case.execute(
        LinkAccountRequest(
            account_id=current.account_id,
            profile_id=profile_id,
            address=request.address,
            chain_id=request.chain_id,
            auth_strategy=request.auth_strategy,
            wallet_type=request.wallet_type,
            custom_name=request.custom_name,
        )
    )


@router.delete("/linked-accounts/{linked_account_id}", response_model=LinkedAccountItem)
async def unlink_account(
    linked_account_id: str,
    unlink_account_use_case: FromDishka[UnlinkAccountUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> LinkedAccountItem:
    """Detach an EOA from its profile."""
    return await unlink_account_use_case.execute(
        UnlinkAccountRequest(
            account_id=current.account_id, linked_account_id=linked_account_id
        )
    )
