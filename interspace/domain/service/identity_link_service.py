"""Identity link graph domain service.

Accounts form an undirected graph whose edges carry a privacy mode. The
identity closure of an account is everything reachable from it over
linked or partial edges; isolated edges are stored but never followed.
Closure edges are kept acyclic.
"""

import logfire
from sqlalchemy.exc import IntegrityError

from interspace.domain.error import ConflictError, NotFoundError, ValidationError
from interspace.domain.model.common import utcnow
from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.model.profile import Profile
from interspace.domain.repository import IdentityLinkRepository
from interspace.domain.value import AccountId, LinkType, PrivacyMode

from .account_service import AccountService
from .base import Service
from .profile_service import ProfileService


class IdentityLinkService(Service):
    """Domain service for linking accounts and resolving identity closures."""

    def __init__(
        self,
        identity_link_repository: IdentityLinkRepository,
        account_service: AccountService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize identity link service.

        Args:
            identity_link_repository: Identity link repository
            account_service: Account domain service
            profile_service: Profile domain service
        """
        self.identity_link_repository = identity_link_repository
        self.account_service = account_service
        self.profile_service = profile_service

    async def link_accounts(
        self,
        account_a_id: AccountId,
        account_b_id: AccountId,
        privacy_mode: PrivacyMode = PrivacyMode.LINKED,
        link_type: LinkType = LinkType.DIRECT,
    ) -> IdentityLink:
        """Link two accounts, or update the mode of an existing link.

        A new closure edge between accounts that are already connected
        would close a cycle and is rejected. Isolated edges never join the
        closure and are always accepted.

        Args:
            account_a_id: First account
            account_b_id: Second account
            privacy_mode: Visibility of the edge
            link_type: How the link was established

        Returns:
            The stored link

        Raises:
            ValidationError: If both ids are the same account
            NotFoundError: If either account does not exist
            ConflictError: If the link would create a cycle
        """
        with logfire.span(
            "identity_link_service.link_accounts",
            account_a_id=str(account_a_id),
            account_b_id=str(account_b_id),
            privacy_mode=privacy_mode.value,
        ):
            if account_a_id == account_b_id:
                raise ValidationError("An account cannot be linked to itself")

            await self.account_service.get_account(account_a_id)
            await self.account_service.get_account(account_b_id)

            await self.identity_link_repository.lock_graph()

            existing = await self.identity_link_repository.find(
                account_a_id, account_b_id
            )
            if existing:
                joins_closure = (
                    privacy_mode.joins_closure
                    and not existing.privacy_mode.joins_closure
                )
                if joins_closure:
                    await self._ensure_no_cycle(account_a_id, account_b_id)
                updated = existing.model_copy(
                    update={"privacy_mode": privacy_mode, "updated_at": utcnow()}
                )
                saved = await self.identity_link_repository.save(updated)
                logfire.info(
                    "Identity link updated",
                    account_a_id=str(saved.account_a_id),
                    account_b_id=str(saved.account_b_id),
                    privacy_mode=privacy_mode.value,
                )
                return saved

            if privacy_mode.joins_closure:
                await self._ensure_no_cycle(account_a_id, account_b_id)

            link = IdentityLink.between(
                account_a_id, account_b_id, privacy_mode, link_type
            )
            try:
                saved = await self.identity_link_repository.save(link)
            except IntegrityError:
                logfire.warn(
                    "Concurrent identity link insert",
                    account_a_id=str(account_a_id),
                    account_b_id=str(account_b_id),
                )
                raise ConflictError("Accounts are already linked")

            logfire.info(
                "Accounts linked",
                account_a_id=str(saved.account_a_id),
                account_b_id=str(saved.account_b_id),
                privacy_mode=privacy_mode.value,
                link_type=link_type.value,
            )
            return saved

    async def update_link_privacy(
        self,
        account_a_id: AccountId,
        account_b_id: AccountId,
        privacy_mode: PrivacyMode,
    ) -> IdentityLink:
        """Change the privacy mode of an existing link.

        Raises:
            NotFoundError: If the accounts are not linked
        """
        with logfire.span(
            "identity_link_service.update_link_privacy",
            account_a_id=str(account_a_id),
            account_b_id=str(account_b_id),
            privacy_mode=privacy_mode.value,
        ):
            existing = await self.identity_link_repository.find(
                account_a_id, account_b_id
            )
            if existing is None:
                raise NotFoundError(
                    "Identity link", f"{account_a_id}<->{account_b_id}"
                )

            updated = existing.model_copy(
                update={"privacy_mode": privacy_mode, "updated_at": utcnow()}
            )
            saved = await self.identity_link_repository.save(updated)
            logfire.info(
                "Identity link privacy updated",
                account_a_id=str(account_a_id),
                account_b_id=str(account_b_id),
                privacy_mode=privacy_mode.value,
            )
            return saved

    async def unlink_accounts(
        self, account_a_id: AccountId, account_b_id: AccountId
    ) -> None:
        """Remove the link between two accounts.

        Raises:
            NotFoundError: If the accounts are not linked
        """
        with logfire.span(
            "identity_link_service.unlink_accounts",
            account_a_id=str(account_a_id),
            account_b_id=str(account_b_id),
        ):
            deleted = await self.identity_link_repository.delete(
                account_a_id, account_b_id
            )
            if not deleted:
                raise NotFoundError(
                    "Identity link", f"{account_a_id}<->{account_b_id}"
                )
            logfire.info(
                "Accounts unlinked",
                account_a_id=str(account_a_id),
                account_b_id=str(account_b_id),
            )

    async def get_linked_accounts(self, account_id: AccountId) -> set[AccountId]:
        """Identity closure of an account, the account itself included.

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span(
            "identity_link_service.get_linked_accounts", account_id=str(account_id)
        ):
            await self.account_service.get_account(account_id)
            closure = await self._closure(account_id)
            logfire.info(
                "Identity closure resolved",
                account_id=str(account_id),
                size=len(closure),
            )
            return set(closure)

    async def get_accessible_profiles(self, account_id: AccountId) -> list[Profile]:
        """Profiles reachable from any account in the identity closure.

        Each profile appears once, in the order it is first encountered.
        """
        with logfire.span(
            "identity_link_service.get_accessible_profiles",
            account_id=str(account_id),
        ):
            await self.account_service.get_account(account_id)
            closure = await self._closure(account_id)
            profiles = await self.profile_service.get_profiles_for_accounts(closure)
            logfire.info(
                "Accessible profiles resolved",
                account_id=str(account_id),
                count=len(profiles),
            )
            return profiles

    async def get_links(self, account_id: AccountId) -> list[IdentityLink]:
        """Every edge touching an account, isolated ones included."""
        with logfire.span(
            "identity_link_service.get_links", account_id=str(account_id)
        ):
            return await self.identity_link_repository.find_by_account(account_id)

    async def _closure(self, account_id: AccountId) -> list[AccountId]:
        """Breadth-first closure over linked/partial edges, in visit order.

        Each round fetches the edges of the whole frontier at once.
        """
        visited: set[AccountId] = {account_id}
        order: list[AccountId] = [account_id]
        frontier: list[AccountId] = [account_id]

        while frontier:
            edges = await self.identity_link_repository.find_closure_edges(frontier)
            frontier_set = set(frontier)
            next_frontier: list[AccountId] = []
            for edge in edges:
                for node, neighbour in (
                    (edge.account_a_id, edge.account_b_id),
                    (edge.account_b_id, edge.account_a_id),
                ):
                    if node in frontier_set and neighbour not in visited:
                        visited.add(neighbour)
                        order.append(neighbour)
                        next_frontier.append(neighbour)
            frontier = next_frontier

        return order

    async def _ensure_no_cycle(
        self, account_a_id: AccountId, account_b_id: AccountId
    ) -> None:
        """Reject a closure edge between already-connected accounts."""
        closure = await self._closure(account_a_id)
        if account_b_id in closure:
            logfire.warn(
                "Circular link rejected",
                account_a_id=str(account_a_id),
                account_b_id=str(account_b_id),
            )
            raise ConflictError(
                f"Circular link detected: {account_b_id} is already reachable "
                f"from {account_a_id}"
            )
