"""Delegation routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from interspace.application.usecase.account import GetCurrentAccountResponse
from interspace.application.usecase.delegation import (
    ActivateDelegationRequest,
    ActivateDelegationUseCase,
    CreateAuthorizationRequest,
    CreateAuthorizationResponse,
    CreateAuthorizationUseCase,
    DelegationItem,
    GetDelegationRequest,
    GetDelegationUseCase,
    RevokeDelegationRequest,
    RevokeDelegationUseCase,
    StoreDelegationRequest,
    StoreDelegationUseCase,
)
from interspace.application.usecase.execution import (
    ExecuteWithDelegationRequest,
    ExecuteWithDelegationResponse,
    ExecuteWithDelegationUseCase,
)
from interspace.domain.model.delegation import (
    DelegationPermissions,
    SignedAuthorization,
)
from interspace.domain.model.transaction import TransactionRequest
from interspace.interface.api.auth import get_current_account

router = APIRouter(prefix="/delegations", tags=["delegations"], route_class=DishkaRoute)


class AuthorizeAPIRequest(BaseModel):
    """API request for a delegation signing challenge."""

    linked_account_id: str
    chain_id: int = Field(gt=0)
    session_wallet_address: str | None = None
    permissions: DelegationPermissions | None = None
    expires_at: datetime | None = None


class StoreAPIRequest(BaseModel):
    """API request carrying a signed authorization."""

    linked_account_id: str
    signed_authorization: SignedAuthorization
    permissions: DelegationPermissions | None = None
    expires_at: datetime | None = None


@router.post("/authorize", response_model=CreateAuthorizationResponse)
async def create_authorization(
    request: AuthorizeAPIRequest,
    create_authorization_use_case: FromDishka[CreateAuthorizationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> CreateAuthorizationResponse:
    """Issue the digest a linked EOA must sign to delegate.

    Example:
        POST /delegations/authorize
        {
            "linked_account_id": "...",
            "chain_id": 11155111,
            "permissions": {
                "can_transfer": true,
                "max_transaction_value": "10000000000000000"
            }
        }
    """
    return await create_authorization_use_case.execute(
        CreateAuthorizationRequest(
            account_id=current.account_id,
            linked_account_id=request.linked_account_id,
            chain_id=request.chain_id,
            session_wallet_address=request.session_wallet_address,
            permissions=request.permissions,
            expires_at=request.expires_at,
        )
    )


@router.post("", response_model=DelegationItem, status_code=status.HTTP_201_CREATED)
async def store_delegation(
    request: StoreAPIRequest,
    store_delegation_use_case: FromDishka[StoreDelegationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> DelegationItem:
    """Store a delegation once its signature checks out."""
    return await store_delegation_use_case.execute(
        StoreDelegationRequest(
            account_id=current.account_id,
            linked_account_id=request.linked_account_id,
            signed_authorization=request.signed_authorization,
            permissions=request.permissions,
            expires_at=request.expires_at,
        )
    )


@router.get("/{delegation_id}", response_model=DelegationItem)
async def get_delegation(
    delegation_id: str,
    get_delegation_use_case: FromDishka[GetDelegationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> DelegationItem:
    """Read one of the caller's delegations."""
    return await get_delegation_use_case.execute(
        GetDelegationRequest(account_id=current.account_id, delegation_id=delegation_id)
    )


@router.delete("/{delegation_id}", response_model=DelegationItem)
async def revoke_delegation(
    delegation_id: str,
    revoke_delegation_use_case: FromDishka[RevokeDelegationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> DelegationItem:
    """Revoke a delegation. Revocation cannot be undone."""
    return await revoke_delegation_use_case.execute(
        RevokeDelegationRequest(
            account_id=current.account_id, delegation_id=delegation_id
        )
    )


@router.post("/{delegation_id}/activate", response_model=DelegationItem)
async def activate_delegation(
    delegation_id: str,
    activate_delegation_use_case: FromDishka[ActivateDelegationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> DelegationItem:
    """Submit a signed delegation on chain."""
    return await activate_delegation_use_case.execute(
        ActivateDelegationRequest(
            account_id=current.account_id, delegation_id=delegation_id
        )
    )


@router.post("/{delegation_id}/execute", response_model=ExecuteWithDelegationResponse)
async def execute_with_delegation(
    delegation_id: str,
    transaction: TransactionRequest,
    execute_with_delegation_use_case: FromDishka[ExecuteWithDelegationUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> ExecuteWithDelegationResponse:
    """Send a transaction on behalf of the delegating EOA."""
    return await execute_with_delegation_use_case.execute(
        ExecuteWithDelegationRequest(
            account_id=current.account_id,
            delegation_id=delegation_id,
            transaction=transaction,
        )
    )
