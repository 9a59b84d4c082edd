"""Profile domain service."""

from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from interspace.domain.error import NotFoundError
from interspace.domain.model.account import Account
from interspace.domain.model.common import utcnow
from interspace.domain.model.profile import (
    DEFAULT_PROFILE_NAME,
    Profile,
    ProfileAccount,
)
from interspace.domain.repository import ProfileAccountRepository, ProfileRepository
from interspace.domain.value import AccountId, EthAddress, ProfileAccountId, ProfileId

from .base import Service

OWNER_PERMISSIONS = {"role": "owner"}


class ProfileService(Service):
    """Domain service for profiles and their account memberships."""

    def __init__(
        self,
        profile_repository: ProfileRepository,
        profile_account_repository: ProfileAccountRepository,
    ) -> None:
        """Initialize profile service.

        Args:
            profile_repository: Profile repository
            profile_account_repository: Profile membership repository
        """
        self.profile_repository = profile_repository
        self.profile_account_repository = profile_account_repository

    async def create_profile(
        self,
        account: Account,
        session_wallet_address: EthAddress,
        name: Optional[str] = None,
    ) -> Profile:
        """Create a profile owned by an account.

        The account becomes the profile's primary member.

        Args:
            account: Owning account
            session_wallet_address: Address of the profile's session wallet
            name: Display name, defaults to DEFAULT_PROFILE_NAME

        Returns:
            Created profile
        """
        with logfire.span(
            "profile_service.create_profile", account_id=str(account.id)
        ):
            profile = Profile(
                id=ProfileId(uuid4()),
                name=name or DEFAULT_PROFILE_NAME,
                session_wallet_address=session_wallet_address,
            )
            saved = await self.profile_repository.save(profile)
            await self.profile_account_repository.save(
                ProfileAccount(
                    id=ProfileAccountId(uuid4()),
                    profile_id=saved.id,
                    account_id=account.id,
                    is_primary=True,
                    permissions=dict(OWNER_PERMISSIONS),
                )
            )
            logfire.info(
                "Profile created",
                profile_id=str(saved.id),
                account_id=str(account.id),
            )
            return saved

    async def link_profile_to_account(
        self, profile_id: ProfileId, account_id: AccountId
    ) -> ProfileAccount:
        """Add an account to a profile.

        Idempotent: an existing membership is returned unchanged.

        Args:
            profile_id: Profile ID
            account_id: Account ID

        Returns:
            The membership row

        Raises:
            NotFoundError: If the profile does not exist
        """
        with logfire.span(
            "profile_service.link_profile_to_account",
            profile_id=str(profile_id),
            account_id=str(account_id),
        ):
            await self.get_profile(profile_id)

            existing = await self.profile_account_repository.find(
                profile_id, account_id
            )
            if existing:
                return existing

            membership = ProfileAccount(
                id=ProfileAccountId(uuid4()),
                profile_id=profile_id,
                account_id=account_id,
                permissions=dict(OWNER_PERMISSIONS),
            )
            try:
                saved = await self.profile_account_repository.save(membership)
            except IntegrityError:
                existing = await self.profile_account_repository.find(
                    profile_id, account_id
                )
                if existing is None:
                    raise
                return existing

            logfire.info(
                "Account linked to profile",
                profile_id=str(profile_id),
                account_id=str(account_id),
            )
            return saved

    async def get_profile(self, profile_id: ProfileId) -> Profile:
        """Get profile by ID.

        Raises:
            NotFoundError: If the profile does not exist
        """
        with logfire.span("profile_service.get_profile", profile_id=str(profile_id)):
            profile = await self.profile_repository.find_by_id(profile_id)
            if profile is None:
                logfire.warn("Profile not found", profile_id=str(profile_id))
                raise NotFoundError("Profile", str(profile_id))
            return profile

    async def get_owned_profile(
        self, account_id: AccountId, profile_id: ProfileId
    ) -> Profile:
        """Get a profile the account is a member of.

        Args:
            account_id: Calling account
            profile_id: Profile ID

        Returns:
            The profile

        Raises:
            NotFoundError: If the profile does not exist or the account is
                not a member
        """
        with logfire.span(
            "profile_service.get_owned_profile",
            account_id=str(account_id),
            profile_id=str(profile_id),
        ):
            membership = await self.profile_account_repository.find(
                profile_id, account_id
            )
            if membership is None:
                logfire.warn(
                    "Profile not owned by account",
                    account_id=str(account_id),
                    profile_id=str(profile_id),
                )
                raise NotFoundError("Profile", str(profile_id))
            return await self.get_profile(profile_id)

    async def get_profiles_for_accounts(
        self, account_ids: list[AccountId]
    ) -> list[Profile]:
        """Profiles reachable through memberships of the given accounts.

        Deduplicated by id, in the order memberships are first seen.
        """
        memberships = await self.profile_account_repository.find_by_account_ids(
            account_ids
        )
        position = {account_id: i for i, account_id in enumerate(account_ids)}
        memberships.sort(
            key=lambda m: (position.get(m.account_id, len(position)), m.created_at)
        )

        ordered_ids: list[ProfileId] = []
        seen: set[ProfileId] = set()
        for membership in memberships:
            if membership.profile_id not in seen:
                seen.add(membership.profile_id)
                ordered_ids.append(membership.profile_id)

        profiles = {
            profile.id: profile
            for profile in await self.profile_repository.find_by_ids(ordered_ids)
        }
        return [profiles[pid] for pid in ordered_ids if pid in profiles]

    async def update_session_wallet(
        self, profile_id: ProfileId, address: EthAddress
    ) -> Profile:
        """Point a profile at a new session wallet address.

        Raises:
            NotFoundError: If the profile does not exist
        """
        with logfire.span(
            "profile_service.update_session_wallet",
            profile_id=str(profile_id),
            address=address.root,
        ):
            profile = await self.get_profile(profile_id)
            updated = profile.model_copy(
                update={"session_wallet_address": address, "updated_at": utcnow()}
            )
            saved = await self.profile_repository.save(updated)
            logfire.info("Session wallet updated", profile_id=str(profile_id))
            return saved
