"""Profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from interspace.application.usecase.account import GetCurrentAccountResponse
from interspace.application.usecase.delegation import (
    ListProfileDelegationsRequest,
    ListProfileDelegationsResponse,
    ListProfileDelegationsUseCase,
)
from interspace.application.usecase.execution import (
    DetermineExecutionPathRequest,
    DetermineExecutionPathResponse,
    DetermineExecutionPathUseCase,
)
from interspace.domain.model.transaction import TransactionRequest
from interspace.interface.api.auth import get_current_account

router = APIRouter(prefix="/profiles", tags=["profiles"], route_class=DishkaRoute)


@router.get("/{profile_id}/delegations", response_model=ListProfileDelegationsResponse)
async def list_profile_delegations(
    profile_id: str,
    list_profile_delegations_use_case: FromDishka[ListProfileDelegationsUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> ListProfileDelegationsResponse:
    """Usable delegations granted to the profile's session wallet."""
    return await list_profile_delegations_use_case.execute(
        ListProfileDelegationsRequest(
            account_id=current.account_id, profile_id=profile_id
        )
    )


@router.post(
    "/{profile_id}/execution-path", response_model=DetermineExecutionPathResponse
)
async def determine_execution_path(
    profile_id: str,
    transaction: TransactionRequest,
    determine_execution_path_use_case: FromDishka[DetermineExecutionPathUseCase],
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> DetermineExecutionPathResponse:
    """Whether a transaction goes out directly or through a delegation."""
    return await determine_execution_path_use_case.execute(
        DetermineExecutionPathRequest(
            account_id=current.account_id,
            profile_id=profile_id,
            transaction=transaction,
        )
    )
