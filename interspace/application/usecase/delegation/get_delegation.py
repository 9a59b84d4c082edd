"""Get delegation use case."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.service import DelegationService
from interspace.domain.value import AccountId, DelegationId, DelegationStatus


class DelegationItem(BaseModel):
    """Delegation information for responses.

    Nonces and wei amounts are rendered as decimal strings.
    """

    delegation_id: str
    linked_account_id: str
    delegated_address: str
    chain_id: int
    authorization_data: dict[str, Any]
    permissions: dict[str, Any]
    nonce: str
    status: DelegationStatus
    is_expired: bool
    expires_at: datetime | None
    created_at: datetime
    activated_at: datetime | None
    revoked_at: datetime | None
    transaction_hash: str | None

    @classmethod
    def from_delegation(cls, delegation: AccountDelegation) -> "DelegationItem":
        return cls(
            delegation_id=str(delegation.id),
            linked_account_id=str(delegation.linked_account_id),
            delegated_address=delegation.delegated_address.root,
            chain_id=delegation.chain_id,
            authorization_data=delegation.authorization_data.to_json(),
            permissions=delegation.permissions.to_json(),
            nonce=str(delegation.nonce),
            status=delegation.status,
            is_expired=delegation.is_expired(),
            expires_at=delegation.expires_at,
            created_at=delegation.created_at,
            activated_at=delegation.activated_at,
            revoked_at=delegation.revoked_at,
            transaction_hash=delegation.transaction_hash,
        )


class GetDelegationRequest(BaseModel):
    """Get delegation request."""

    account_id: str  # Caller account ID from the token
    delegation_id: str


class GetDelegationUseCase:
    """Use case for reading one of the caller's delegations."""

    def __init__(self, delegation_service: DelegationService) -> None:
        self.delegation_service = delegation_service

    async def execute(self, request: GetDelegationRequest) -> DelegationItem:
        """Load the delegation.

        Raises:
            NotFoundError: If it does not exist or is not owned by the caller
        """
        delegation = await self.delegation_service.get_delegation(
            AccountId(UUID(request.account_id)),
            DelegationId(UUID(request.delegation_id)),
        )
        return DelegationItem.from_delegation(delegation)
