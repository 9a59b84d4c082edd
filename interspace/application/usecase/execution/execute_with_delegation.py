"""Execute with delegation use case."""

from uuid import UUID

from pydantic import BaseModel

from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.service import ExecutionRouter
from interspace.domain.value import AccountId, DelegationId


class ExecuteWithDelegationRequest(BaseModel):
    """Execute with delegation request."""

    account_id: str  # Caller account ID from the token
    delegation_id: str
    transaction: TransactionRequest


class ExecuteWithDelegationResponse(BaseModel):
    """Execute with delegation response."""

    hash: str


class ExecuteWithDelegationUseCase:
    """Use case for sending a transaction on behalf of a delegating EOA."""

    def __init__(self, execution_router: ExecutionRouter) -> None:
        self.execution_router = execution_router

    async def execute(
        self, request: ExecuteWithDelegationRequest
    ) -> ExecuteWithDelegationResponse:
        """Check the delegation and send the transaction.

        Raises:
            NotFoundError: If the delegation is not owned by the caller
            ValidationError: If the delegation does not cover the transaction
        """
        transaction_hash = await self.execution_router.execute_with_delegation(
            AccountId(UUID(request.account_id)),
            DelegationId(UUID(request.delegation_id)),
            request.transaction,
        )
        return ExecuteWithDelegationResponse(hash=transaction_hash)
