"""Get current account use case."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from interspace.domain.service import AccountService, JWTService
from interspace.domain.value import AccountId, AccountType


class GetCurrentAccountRequest(BaseModel):
    """Get current account request."""

    token: str  # JWT token


class GetCurrentAccountResponse(BaseModel):
    """Get current account response."""

    account_id: str
    account_type: AccountType
    provider: str | None
    identifier: str
    verified: bool
    metadata: dict[str, Any]
    created_at: datetime


class GetCurrentAccountUseCase:
    """Use case for resolving the caller identity context."""

    def __init__(
        self, jwt_service: JWTService, account_service: AccountService
    ) -> None:
        """Initialize get current account use case.

        Args:
            jwt_service: JWT token domain service
            account_service: Account domain service
        """
        self.jwt_service = jwt_service
        self.account_service = account_service

    async def execute(
        self, request: GetCurrentAccountRequest
    ) -> GetCurrentAccountResponse:
        """Verify the token and load its account.

        Raises:
            JWTError: If token is invalid or expired
            NotFoundError: If the account no longer exists
        """
        payload = self.jwt_service.verify_token(request.token)
        account = await self.account_service.get_account(
            AccountId(UUID(payload.account_id))
        )
        return GetCurrentAccountResponse(
            account_id=str(account.id),
            account_type=account.type,
            provider=account.provider,
            identifier=account.identifier,
            verified=account.verified,
            metadata=account.metadata,
            created_at=account.created_at,
        )
