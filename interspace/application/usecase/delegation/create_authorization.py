"""Create delegation authorization use case."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from interspace.domain.model.delegation import DelegationPermissions
from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, EthAddress, LinkedAccountId


class CreateAuthorizationRequest(BaseModel):
    """Create delegation authorization request."""

    account_id: str  # Caller account ID from the token
    linked_account_id: str
    chain_id: int = Field(gt=0)
    session_wallet_address: str | None = None  # Defaults to the profile's
    permissions: DelegationPermissions | None = None
    expires_at: datetime | None = None


class CreateAuthorizationResponse(BaseModel):
    """Challenge for the linked EOA to sign."""

    delegation_id: str
    authorization_data: dict[str, Any]
    message: str  # 0x-prefixed digest to sign
    permissions: dict[str, Any]
    expires_at: datetime | None


class CreateAuthorizationUseCase:
    """Use case for starting a delegation from a linked EOA."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(
        self, request: CreateAuthorizationRequest
    ) -> CreateAuthorizationResponse:
        """Issue the signing challenge.

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ConflictError: If an open delegation already covers the tuple
            ValidationError: If the expiry is not in the future
        """
        session_wallet = (
            EthAddress(request.session_wallet_address)
            if request.session_wallet_address
            else None
        )
        challenge = await self.delegation_service.create_delegation_authorization(
            AccountId(UUID(request.account_id)),
            LinkedAccountId(UUID(request.linked_account_id)),
            request.chain_id,
            session_wallet_address=session_wallet,
            permissions=request.permissions,
            expires_at=request.expires_at,
        )
        return CreateAuthorizationResponse(
            delegation_id=str(challenge.delegation_id),
            authorization_data=challenge.authorization_data.to_json(),
            message=challenge.message,
            permissions=challenge.permissions.to_json(),
            expires_at=challenge.expires_at,
        )
