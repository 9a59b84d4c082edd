"""Link account use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.service import AuditLogger, LinkedAccountService
from interspace.domain.value import AccountId, EthAddress, ProfileId


class LinkedAccountItem(BaseModel):
    """Linked account information for responses."""

    linked_account_id: str
    profile_id: str
    address: str
    chain_id: int
    auth_strategy: str
    wallet_type: str
    custom_name: str | None
    is_primary: bool
    is_active: bool
    created_at: datetime

    @classmethod
    def from_linked_account(cls, linked: LinkedAccount) -> "LinkedAccountItem":
        return cls(
            linked_account_id=str(linked.id),
            profile_id=str(linked.profile_id),
            address=linked.address.root,
            chain_id=linked.chain_id,
            auth_strategy=linked.auth_strategy,
            wallet_type=linked.wallet_type,
            custom_name=linked.custom_name,
            is_primary=linked.is_primary,
            is_active=linked.is_active,
            created_at=linked.created_at,
        )


class LinkAccountRequest(BaseModel):
    """Link account request."""

    account_id: str  # Caller account ID from the token
    profile_id: str
    address: str
    chain_id: int = Field(default=1, gt=0)
    auth_strategy: str = "wallet"
    wallet_type: str = "external"
    custom_name: str | None = Field(default=None, max_length=100)


class LinkAccountUseCase:
    """Use case for attaching an EOA to one of the caller's profiles."""

    def __init__(
        self, linked_account_service: LinkedAccountService, audit_logger: AuditLogger
    ) -> None:
        """Initialize link account use case.

        Args:
            linked_account_service: Linked account domain service
            audit_logger: Audit trail
        """
        self.linked_account_service = linked_account_service
        self.audit_logger = audit_logger

    async def execute(self, request: LinkAccountRequest) -> LinkedAccountItem:
        """Attach the address to the profile.

        Raises:
            NotFoundError: If the profile is not owned by the caller
            ConflictError: If the address is already linked to the profile
        """
        account_id = AccountId(UUID(request.account_id))
        profile_id = ProfileId(UUID(request.profile_id))
        linked = await self.linked_account_service.link_account(
            account_id,
            profile_id,
            EthAddress(request.address),
            chain_id=request.chain_id,
            auth_strategy=request.auth_strategy,
            wallet_type=request.wallet_type,
            custom_name=request.custom_name,
        )
        await self.audit_logger.record(
            "linked_account.created",
            "linked_account",
            resource_id=str(linked.id),
            account_id=account_id,
            profile_id=profile_id,
            address=linked.address.root,
            chain_id=linked.chain_id,
        )
        return LinkedAccountItem.from_linked_account(linked)
