"""Identity graph routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Header, status
from pydantic import BaseModel, Field

from interspace.application.usecase.account import GetCurrentAccountResponse
from interspace.application.usecase.identity import (
    GetAccessibleProfilesRequest,
    GetAccessibleProfilesResponse,
    GetAccessibleProfilesUseCase,
    GetLinkedAccountsRequest,
    GetLinkedAccountsResponse,
    GetLinkedAccountsUseCase,
    LinkAccountsRequest,
    LinkAccountsResponse,
    LinkAccountsUseCase,
    LinkItem,
    UnlinkAccountsRequest,
    UnlinkAccountsResponse,
    UnlinkAccountsUseCase,
    UpdateLinkPrivacyRequest,
    UpdateLinkPrivacyUseCase,
)
from interspace.domain.value import AccountType, LinkType, PrivacyMode
from interspace.interface.api.auth import (
    ProofAPIModel,
    build_proof,
    get_current_account,
)

router = APIRouter(prefix="/identity", tags=["identity"], route_class=DishkaRoute)


class LinkAccountsAPIRequest(BaseModel):
    """API request for linking another identity to the caller."""

    target_type: AccountType
    target_identifier: str = Field(min_length=1, max_length=255)
    target_provider: str | None = Field(default=None, max_length=50)
    proof: ProofAPIModel | None = None
    privacy_mode: PrivacyMode = PrivacyMode.LINKED
    link_type: LinkType = LinkType.DIRECT


class UpdatePrivacyAPIRequest(BaseModel):
    """API request for changing a link's privacy mode."""

    target_account_id: str
    privacy_mode: PrivacyMode


class UnlinkAPIRequest(BaseModel):
    """API request for removing a link."""

    target_account_id: str


@router.post(
    "/links",
    response_model=LinkAccountsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def link_accounts(
    request: LinkAccountsAPIRequest,
    link_accounts_use_case: FromDishka[LinkAccountsUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
    x_upstream_key: str | None = Header(default=None),
) -> LinkAccountsResponse:
    """Link an identity to the caller's account.

    The target must be proven like a sign-in (401 otherwise). Returns 409
    when the target is already linked to another identity or the link
    would close a cycle of non-isolated links.
    """
    return await link_accounts_use_case.execute(
        LinkAccountsRequest(
            account_id=current.account_id,
            target_type=request.target_type,
            target_identifier=request.target_identifier,
            target_provider=request.target_provider,
            proof=build_proof(request.proof, x_upstream_key),
            privacy_mode=request.privacy_mode,
            link_type=request.link_type,
        )
    )


@router.patch("/links", response_model=LinkItem)
async def update_link_privacy(
    request: UpdatePrivacyAPIRequest,
    update_link_privacy_use_case: FromDishka[UpdateLinkPrivacyUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> LinkItem:
    """Change the privacy mode of a link of the caller."""
    return await update_link_privacy_use_case.execute(
        UpdateLinkPrivacyRequest(
            account_id=current.account_id,
            target_account_id=request.target_account_id,
            privacy_mode=request.privacy_mode,
        )
    )


@router.delete("/links", response_model=UnlinkAccountsResponse)
async def unlink_accounts(
    request: UnlinkAPIRequest,
    unlink_accounts_use_case: FromDishka[UnlinkAccountsUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> UnlinkAccountsResponse:
    """Remove a link of the caller."""
    return await unlink_accounts_use_case.execute(
        UnlinkAccountsRequest(
            account_id=current.account_id,
            target_account_id=request.target_account_id,
        )
    )


@router.get("/links", response_model=GetLinkedAccountsResponse)
async def get_linked_accounts(
    get_linked_accounts_use_case: FromDishka[GetLinkedAccountsUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> GetLinkedAccountsResponse:
    """Identity closure of the caller and its direct links."""
    return await get_linked_accounts_use_case.execute(
        GetLinkedAccountsRequest(account_id=current.account_id)
    )


@router.get("/profiles", response_model=GetAccessibleProfilesResponse)
async def get_accessible_profiles(
    get_accessible_profiles_use_case: FromDishka[GetAccessibleProfilesUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> GetAccessibleProfilesResponse:
    """Profiles reachable from the caller through the identity graph."""
    return await get_accessible_profiles_use_case.execute(
        GetAccessibleProfilesRequest(account_id=current.account_id)
    )
