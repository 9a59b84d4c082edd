"""Account domain service."""

from typing import Any, Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from interspace.domain.error import NotFoundError
from interspace.domain.model.account import Account
from interspace.domain.model.common import utcnow
from interspace.domain.repository import AccountRepository
from interspace.domain.value import AccountId, AccountType

from .base import Service


def normalize_identifier(account_type: AccountType, identifier: str) -> str:
    """Canonical form of an account identifier.

    Wallet addresses and emails are case-insensitive; provider user ids
    are kept as given apart from surrounding whitespace.
    """
    identifier = identifier.strip()
    if account_type in (AccountType.WALLET, AccountType.EMAIL):
        return identifier.lower()
    return identifier


class AccountService(Service):
    """Domain service for account operations."""

    def __init__(self, account_repository: AccountRepository) -> None:
        """Initialize account service.

        Args:
            account_repository: Account repository
        """
        self.account_repository = account_repository

    async def find_or_create_account(
        self,
        account_type: AccountType,
        identifier: str,
        provider: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> tuple[Account, bool]:
        """Find an account by identity or create it.

        Metadata of an existing account is merge-updated. Wallet accounts
        are created verified since authenticating proves control.

        Args:
            account_type: Kind of identity
            identifier: Address, email or provider user id
            provider: Social provider name, if any
            metadata: Extra attributes to attach

        Returns:
            Tuple of (account, created)
        """
        identifier = normalize_identifier(account_type, identifier)
        with logfire.span(
            "account_service.find_or_create_account",
            account_type=account_type.value,
            provider=provider,
        ):
            existing = await self.account_repository.find_by_identity(
                account_type, provider, identifier
            )
            if existing:
                if metadata:
                    existing = await self.account_repository.save(
                        existing.with_merged_metadata(metadata)
                    )
                logfire.info("Account found", account_id=str(existing.id))
                return existing, False

            account = Account(
                id=AccountId(uuid4()),
                type=account_type,
                provider=provider,
                identifier=identifier,
                verified=account_type == AccountType.WALLET,
                metadata=metadata or {},
            )
            try:
                saved = await self.account_repository.save(account)
            except IntegrityError:
                # Created concurrently by another request
                logfire.warn(
                    "Account created concurrently, reloading",
                    account_type=account_type.value,
                )
                existing = await self.account_repository.find_by_identity(
                    account_type, provider, identifier
                )
                if existing is None:
                    raise
                return existing, False

            logfire.info(
                "Account created",
                account_id=str(saved.id),
                account_type=account_type.value,
            )
            return saved, True

    async def get_account(self, account_id: AccountId) -> Account:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span("account_service.get_account", account_id=str(account_id)):
            account = await self.account_repository.find_by_id(account_id)
            if account is None:
                logfire.warn("Account not found", account_id=str(account_id))
                raise NotFoundError("Account", str(account_id))
            return account

    async def verify_account(self, account_id: AccountId) -> Account:
        """Mark an account as verified.

        Args:
            account_id: Account ID

        Returns:
            Updated account

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span("account_service.verify_account", account_id=str(account_id)):
            account = await self.get_account(account_id)
            if account.verified:
                return account
            updated = account.model_copy(
                update={"verified": True, "updated_at": utcnow()}
            )
            saved = await self.account_repository.save(updated)
            logfire.info("Account verified", account_id=str(account_id))
            return saved

    async def update_account_metadata(
        self, account_id: AccountId, metadata: dict[str, Any]
    ) -> Account:
        """Merge metadata into an account.

        Args:
            account_id: Account ID
            metadata: Keys to add or overwrite

        Returns:
            Updated account

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span(
            "account_service.update_account_metadata", account_id=str(account_id)
        ):
            account = await self.get_account(account_id)
            saved = await self.account_repository.save(
                account.with_merged_metadata(metadata)
            )
            logfire.info(
                "Account metadata updated",
                account_id=str(account_id),
                keys=sorted(metadata),
            )
            return saved
