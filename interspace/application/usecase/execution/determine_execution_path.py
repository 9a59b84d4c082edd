"""Determine execution path use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.service import ExecutionRouter, ProfileService
from interspace.domain.value import AccountId, ExecutionPath, ProfileId


class DetermineExecutionPathRequest(BaseModel):
    """Determine execution path request."""

    account_id: str  # Caller account ID from the token
    profile_id: str
    transaction: TransactionRequest


class DetermineExecutionPathResponse(BaseModel):
    """Route chosen for the transaction."""

    path: ExecutionPath
    delegation_id: str | None = None
    linked_account_id: str | None = None


class DetermineExecutionPathUseCase:
    """Use case for choosing between direct and delegated execution."""

    def __init__(
        self, profile_service: ProfileService, execution_router: ExecutionRouter
    ) -> None:
        """Initialize determine execution path use case.

        Args:
            profile_service: Profile domain service
            execution_router: Execution router
        """
        self.profile_service = profile_service
        self.execution_router = execution_router

    async def execute(
        self, request: DetermineExecutionPathRequest
    ) -> DetermineExecutionPathResponse:
        """Pick the route for a transaction of one of the caller's profiles.

        Raises:
            NotFoundError: If the profile is not owned by the caller
        """
        profile = await self.profile_service.get_owned_profile(
            AccountId(UUID(request.account_id)), ProfileId(UUID(request.profile_id))
        )
        plan = await self.execution_router.plan_execution(
            profile.id, request.transaction
        )
        logfire.info(
            "Execution path determined",
            profile_id=str(profile.id),
            path=plan.path.value,
        )
        return DetermineExecutionPathResponse(
            path=plan.path,
            delegation_id=str(plan.delegation_id) if plan.delegation_id else None,
            linked_account_id=(
                str(plan.linked_account_id) if plan.linked_account_id else None
            ),
        )
