"""Linked account domain service."""

from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from interspace.domain.error import ConflictError, NotFoundError
from interspace.domain.model.account import Account
from interspace.domain.model.common import utcnow
from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.model.profile import Profile
from interspace.domain.repository import LinkedAccountRepository
from interspace.domain.value import (
    AccountId,
    AccountType,
    EthAddress,
    LinkedAccountId,
    ProfileId,
)

from .base import Service
from .profile_service import ProfileService

DEFAULT_CHAIN_ID = 1


class LinkedAccountService(Service):
    """Domain service for EOAs attached to profiles."""

    def __init__(
        self,
        linked_account_repository: LinkedAccountRepository,
        profile_service: ProfileService,
    ) -> None:
        """Initialize linked account service.

        Args:
            linked_account_repository: Linked account repository
            profile_service: Profile domain service
        """
        self.linked_account_repository = linked_account_repository
        self.profile_service = profile_service

    async def link_account(
        self,
        account_id: AccountId,
        profile_id: ProfileId,
        address: EthAddress,
        chain_id: int = DEFAULT_CHAIN_ID,
        auth_strategy: str = "wallet",
        wallet_type: str = "external",
        custom_name: Optional[str] = None,
    ) -> LinkedAccount:
        """Attach an EOA to a profile the caller owns.

        The first linked account of a profile becomes its primary one. A
        previously unlinked address is reactivated rather than duplicated.

        Args:
            account_id: Calling account
            profile_id: Target profile
            address: EOA address
            chain_id: Chain the EOA is used on
            auth_strategy: 'wallet' or the social provider name
            wallet_type: Wallet kind, e.g. 'metamask'
            custom_name: Optional display name

        Returns:
            The linked account

        Raises:
            NotFoundError: If the profile does not exist or is not owned
            ConflictError: If the address is already linked to the profile
        """
        with logfire.span(
            "linked_account_service.link_account",
            account_id=str(account_id),
            profile_id=str(profile_id),
            address=address.root,
        ):
            await self.profile_service.get_owned_profile(account_id, profile_id)
            return await self._attach(
                profile_id, address, chain_id, auth_strategy, wallet_type, custom_name
            )

    async def auto_link_account(
        self, account: Account, profile: Profile
    ) -> Optional[LinkedAccount]:
        """Attach the wallet an account controls to a profile, if it has one.

        Wallet accounts always qualify; social accounts qualify when their
        metadata carries a walletAddress. Already-linked addresses are
        returned as is.

        Args:
            account: Authenticated account
            profile: Profile to attach to

        Returns:
            The linked account, or None if the account controls no wallet
        """
        with logfire.span(
            "linked_account_service.auto_link_account",
            account_id=str(account.id),
            profile_id=str(profile.id),
        ):
            if account.type not in (AccountType.WALLET, AccountType.SOCIAL):
                return None
            wallet_address = account.wallet_address
            if not wallet_address:
                return None

            address = EthAddress(wallet_address)
            existing = await self.linked_account_repository.find_by_profile_and_address(
                profile.id, address
            )
            if existing and existing.is_active:
                return existing

            chain_id = account.metadata.get("chainId", DEFAULT_CHAIN_ID)
            if account.type == AccountType.WALLET:
                auth_strategy = "wallet"
                wallet_type = account.metadata.get("walletType", "external")
            else:
                auth_strategy = account.provider or "social"
                wallet_type = "social"

            linked = await self._attach(
                profile.id, address, int(chain_id), auth_strategy, wallet_type, None
            )
            logfire.info(
                "Account auto-linked",
                account_id=str(account.id),
                linked_account_id=str(linked.id),
            )
            return linked

    async def list_linked_accounts(
        self, account_id: AccountId, profile_id: ProfileId, active_only: bool = True
    ) -> list[LinkedAccount]:
        """Linked accounts of a profile the caller owns.

        Raises:
            NotFoundError: If the profile does not exist or is not owned
        """
        with logfire.span(
            "linked_account_service.list_linked_accounts",
            account_id=str(account_id),
            profile_id=str(profile_id),
        ):
            await self.profile_service.get_owned_profile(account_id, profile_id)
            return await self.linked_account_repository.find_by_profile(
                profile_id, active_only=active_only
            )

    async def get_owned_linked_account(
        self,
        account_id: AccountId,
        linked_account_id: LinkedAccountId,
        include_inactive: bool = False,
    ) -> tuple[LinkedAccount, Profile]:
        """Resolve a linked account through the caller's profile membership.

        Args:
            account_id: Calling account
            linked_account_id: Linked account ID
            include_inactive: Also resolve unlinked (deactivated) accounts

        Returns:
            Tuple of (linked account, owning profile)

        Raises:
            NotFoundError: If the linked account does not exist, is
                inactive, or its profile is not owned by the caller
        """
        with logfire.span(
            "linked_account_service.get_owned_linked_account",
            account_id=str(account_id),
            linked_account_id=str(linked_account_id),
        ):
            linked = await self.linked_account_repository.find_by_id(linked_account_id)
            if linked is None or not (linked.is_active or include_inactive):
                logfire.warn(
                    "Linked account not found",
                    linked_account_id=str(linked_account_id),
                )
                raise NotFoundError("Linked account", str(linked_account_id))

            try:
                profile = await self.profile_service.get_owned_profile(
                    account_id, linked.profile_id
                )
            except NotFoundError:
                raise NotFoundError("Linked account", str(linked_account_id))
            return linked, profile

    async def get_active_linked_accounts(
        self, profile_id: ProfileId
    ) -> list[LinkedAccount]:
        """Active linked accounts of a profile, without an ownership check."""
        return await self.linked_account_repository.find_by_profile(profile_id)

    async def unlink_account(
        self, account_id: AccountId, linked_account_id: LinkedAccountId
    ) -> LinkedAccount:
        """Deactivate a linked account.

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ConflictError: If it is the profile's last active linked account
        """
        with logfire.span(
            "linked_account_service.unlink_account",
            account_id=str(account_id),
            linked_account_id=str(linked_account_id),
        ):
            linked, profile = await self.get_owned_linked_account(
                account_id, linked_account_id
            )
            active = await self.linked_account_repository.find_by_profile(profile.id)
            if len(active) <= 1:
                raise ConflictError("Cannot remove the last linked account")

            updated = linked.model_copy(
                update={"is_active": False, "is_primary": False, "updated_at": utcnow()}
            )
            saved = await self.linked_account_repository.save(updated)

            if linked.is_primary:
                # Promote the oldest remaining account
                successor = next(acc for acc in active if acc.id != linked.id)
                await self.linked_account_repository.save(
                    successor.model_copy(
                        update={"is_primary": True, "updated_at": utcnow()}
                    )
                )

            logfire.info(
                "Linked account removed",
                linked_account_id=str(linked_account_id),
                profile_id=str(profile.id),
            )
            return saved

    async def _attach(
        self,
        profile_id: ProfileId,
        address: EthAddress,
        chain_id: int,
        auth_strategy: str,
        wallet_type: str,
        custom_name: Optional[str],
    ) -> LinkedAccount:
        existing = await self.linked_account_repository.find_by_profile_and_address(
            profile_id, address
        )
        if existing and existing.is_active:
            raise ConflictError("Account is already linked to this profile")

        active = await self.linked_account_repository.find_by_profile(profile_id)
        is_primary = not active

        if existing:
            linked = existing.model_copy(
                update={
                    "is_active": True,
                    "is_primary": is_primary,
                    "chain_id": chain_id,
                    "auth_strategy": auth_strategy,
                    "wallet_type": wallet_type,
                    "custom_name": custom_name or existing.custom_name,
                    "updated_at": utcnow(),
                }
            )
        else:
            linked = LinkedAccount(
                id=LinkedAccountId(uuid4()),
                profile_id=profile_id,
                address=address,
                chain_id=chain_id,
                auth_strategy=auth_strategy,
                wallet_type=wallet_type,
                custom_name=custom_name,
                is_primary=is_primary,
            )

        try:
            saved = await self.linked_account_repository.save(linked)
        except IntegrityError:
            raise ConflictError("Account is already linked to this profile")

        logfire.info(
            "Linked account attached",
            linked_account_id=str(saved.id),
            profile_id=str(profile_id),
            is_primary=is_primary,
        )
        return saved
