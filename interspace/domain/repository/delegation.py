"""Account delegation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.value import DelegationId, EthAddress, LinkedAccountId


class DelegationRepository(ABC):
    """Repository for AccountDelegation records.

    At most one open (pending, signed or active) delegation may exist per
    (linked_account_id, delegated_address, chain_id) tuple.
    """

    @abstractmethod
    async def find_by_id(
        self, delegation_id: DelegationId
    ) -> Optional[AccountDelegation]:
        """Find a delegation by ID.

        Args:
            delegation_id: The delegation's unique identifier

        Returns:
            The delegation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_open(
        self,
        linked_account_id: LinkedAccountId,
        delegated_address: EthAddress,
        chain_id: int,
    ) -> Optional[AccountDelegation]:
        """Find the open delegation for a tuple, expired or not."""
        pass

    @abstractmethod
    async def find_usable_for_address(
        self,
        linked_address: EthAddress,
        delegated_address: EthAddress,
        chain_id: int,
        now: datetime,
    ) -> Optional[AccountDelegation]:
        """Find a signed/active, unexpired delegation by linked EOA address.

        Args:
            linked_address: Address of the delegating linked account
            delegated_address: Session wallet address
            chain_id: Chain the delegation is scoped to
            now: Reference time for the expiry check

        Returns:
            A usable delegation if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_linked_accounts(
        self, linked_account_ids: Iterable[LinkedAccountId]
    ) -> list[AccountDelegation]:
        """Get every delegation of the given linked accounts, newest first."""
        pass

    @abstractmethod
    async def save(self, delegation: AccountDelegation) -> AccountDelegation:
        """Save a delegation (create or update).

        Raises:
            IntegrityError: If saving would leave two open delegations for
                the same tuple
        """
        pass
