"""In-memory delegation repository for testing."""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.repository.delegation import DelegationRepository
from interspace.domain.value import DelegationId, EthAddress, LinkedAccountId

from .linked_account import InMemoryLinkedAccountRepository


class InMemoryDelegationRepository(DelegationRepository):
    """In-memory implementation of DelegationRepository for testing.

    Shares the linked account store to resolve delegations by EOA address.
    """

    def __init__(self, linked_accounts: InMemoryLinkedAccountRepository) -> None:
        self._delegations: dict[DelegationId, AccountDelegation] = {}
        self._linked_accounts = linked_accounts

    async def find_by_id(
        self, delegation_id: DelegationId
    ) -> Optional[AccountDelegation]:
        """Find a delegation by ID."""
        return self._delegations.get(delegation_id)

    async def find_open(
        self,
        linked_account_id: LinkedAccountId,
        delegated_address: EthAddress,
        chain_id: int,
    ) -> Optional[AccountDelegation]:
        """Find the open delegation for a tuple."""
        for delegation in self._delegations.values():
            if (
                delegation.status.is_open
                and delegation.linked_account_id == linked_account_id
                and delegation.delegated_address == delegated_address
                and delegation.chain_id == chain_id
            ):
                return delegation
        return None

    async def find_usable_for_address(
        self,
        linked_address: EthAddress,
        delegated_address: EthAddress,
        chain_id: int,
        now: datetime,
    ) -> Optional[AccountDelegation]:
        """Find a usable delegation by linked EOA address, newest first."""
        linked_ids = {
            linked.id
            for linked in self._linked_accounts.all()
            if linked.address == linked_address and linked.is_active
        }
        candidates = [
            delegation
            for delegation in self._delegations.values()
            if delegation.linked_account_id in linked_ids
            and delegation.delegated_address == delegated_address
            and delegation.chain_id == chain_id
            and delegation.is_usable(now)
        ]
        candidates.sort(key=lambda d: d.created_at, reverse=True)
        return candidates[0] if candidates else None

    async def find_by_linked_accounts(
        self, linked_account_ids: Iterable[LinkedAccountId]
    ) -> list[AccountDelegation]:
        """Find every delegation of the given linked accounts, newest first."""
        ids = set(linked_account_ids)
        delegations = [
            d for d in self._delegations.values() if d.linked_account_id in ids
        ]
        delegations.sort(key=lambda d: d.created_at, reverse=True)
        return delegations

    async def save(self, delegation: AccountDelegation) -> AccountDelegation:
        """Save a delegation.

        Raises:
            IntegrityError: If another open delegation exists for the tuple
        """
        if delegation.status.is_open:
            existing = await self.find_open(
                delegation.linked_account_id,
                delegation.delegated_address,
                delegation.chain_id,
            )
            if existing and existing.id != delegation.id:
                raise IntegrityError("Duplicate open delegation", None, Exception())

        self._delegations[delegation.id] = delegation
        return delegation
