"""Delegation authorization domain service.

Issues signing challenges for EOA -> session wallet delegations, verifies
the returned signatures and manages the delegation lifecycle
(pending -> signed -> active, revoked terminal).
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire
import pydantic
from sqlalchemy.exc import IntegrityError

from interspace.config import DelegationSettings
from interspace.domain.error import ConflictError, NotFoundError, ValidationError
from interspace.domain.model.common import ensure_utc, utcnow
from interspace.domain.model.delegation import (
    AccountDelegation,
    AuthorizationData,
    DelegationChallenge,
    DelegationPermissions,
    SignedAuthorization,
)
from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.model.profile import Profile
from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.repository import DelegationRepository
from interspace.domain.value import (
    AccountId,
    DelegationId,
    DelegationStatus,
    EthAddress,
    LinkedAccountId,
    ProfileId,
)

from .audit import AuditLogger
from .base import Service
from .linked_account_service import LinkedAccountService
from .nonce import NonceProvider
from .permission import PermissionDecision, evaluate_transaction
from .session_wallet import SessionWalletClient
from .signature import authorization_message, verify_authorization_signature


class DelegationService(Service):
    """Domain service for account delegations."""

    def __init__(
        self,
        delegation_repository: DelegationRepository,
        linked_account_service: LinkedAccountService,
        nonce_provider: NonceProvider,
        session_wallet_client: SessionWalletClient,
        audit_logger: AuditLogger,
        delegation_settings: DelegationSettings,
    ) -> None:
        """Initialize delegation service.

        Args:
            delegation_repository: Delegation repository
            linked_account_service: Linked account domain service
            nonce_provider: Source of authorization nonces
            session_wallet_client: Session wallet collaborator
            audit_logger: Audit trail
            delegation_settings: Delegation lifecycle settings
        """
        self.delegation_repository = delegation_repository
        self.linked_account_service = linked_account_service
        self.nonce_provider = nonce_provider
        self.session_wallet_client = session_wallet_client
        self.audit_logger = audit_logger
        self.settings = delegation_settings

    async def create_delegation_authorization(
        self,
        account_id: AccountId,
        linked_account_id: LinkedAccountId,
        chain_id: int,
        session_wallet_address: Optional[EthAddress] = None,
        permissions: Optional[DelegationPermissions] = None,
        expires_at: Optional[datetime] = None,
    ) -> DelegationChallenge:
        """Prepare a delegation for the linked EOA to sign.

        A pending record is stored so the signed authorization can be
        matched to it later. Expired delegations and stale pending
        challenges for the same tuple are revoked first.

        Args:
            account_id: Calling account
            linked_account_id: EOA that will delegate
            chain_id: Chain the delegation is scoped to
            session_wallet_address: Delegate, defaults to the profile's
                session wallet
            permissions: Permission set, defaults to full trust
            expires_at: Optional expiry

        Returns:
            Challenge with the digest to sign

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ConflictError: If an open delegation already exists
            ValidationError: If expires_at is not in the future
        """
        with logfire.span(
            "delegation_service.create_delegation_authorization",
            account_id=str(account_id),
            linked_account_id=str(linked_account_id),
            chain_id=chain_id,
        ):
            owned = await self.linked_account_service.get_owned_linked_account(
                account_id, linked_account_id
            )
            linked, profile = owned
            delegate = session_wallet_address or profile.session_wallet_address
            now = utcnow()
            expires_at = self._resolve_expiry(expires_at, now)
            permissions = permissions or DelegationPermissions.full_trust()

            await self._release_slot(linked.id, delegate, chain_id, now)

            nonce = await self.nonce_provider.next_nonce(linked.address, chain_id)
            authorization = AuthorizationData(
                chain_id=chain_id, address=delegate, nonce=nonce
            )
            delegation = AccountDelegation(
                id=DelegationId(uuid4()),
                linked_account_id=linked.id,
                delegated_address=delegate,
                chain_id=chain_id,
                authorization_data=authorization,
                permissions=permissions,
                nonce=nonce,
                expires_at=expires_at,
                status=DelegationStatus.PENDING,
            )
            saved = await self._insert(delegation)

            logfire.info(
                "Delegation authorization requested",
                delegation_id=str(saved.id),
                linked_account_id=str(linked.id),
                chain_id=chain_id,
            )
            await self.audit_logger.record(
                "delegation.authorization_requested",
                "delegation",
                resource_id=str(saved.id),
                account_id=account_id,
                profile_id=profile.id,
                chain_id=chain_id,
            )
            return DelegationChallenge(
                delegation_id=saved.id,
                authorization_data=authorization,
                message=authorization_message(authorization),
                permissions=permissions,
                expires_at=expires_at,
            )

    async def store_delegation(
        self,
        account_id: AccountId,
        linked_account_id: LinkedAccountId,
        signed_authorization: SignedAuthorization,
        permissions: Optional[DelegationPermissions] = None,
        expires_at: Optional[datetime] = None,
    ) -> AccountDelegation:
        """Verify a signed authorization and record it.

        A matching pending challenge (same tuple and nonce) is promoted to
        signed; otherwise a new signed record is created. Nothing is
        written when the signature does not recover to the linked EOA.

        Args:
            account_id: Calling account
            linked_account_id: Delegating EOA
            signed_authorization: Authorization tuple plus signature
            permissions: Permission set; a pending challenge's set is kept
                when omitted
            expires_at: Optional expiry; a pending challenge's is kept when
                omitted

        Returns:
            The signed delegation

        Raises:
            NotFoundError: If the linked account is not owned by the caller
            ValidationError: If the signature is invalid
            ConflictError: If another open delegation exists for the tuple
        """
        with logfire.span(
            "delegation_service.store_delegation",
            account_id=str(account_id),
            linked_account_id=str(linked_account_id),
            chain_id=signed_authorization.chain_id,
        ):
            owned = await self.linked_account_service.get_owned_linked_account(
                account_id, linked_account_id
            )
            linked, profile = owned
            self._verify_signature(linked, signed_authorization)

            data = signed_authorization.authorization_data
            now = utcnow()
            pending = await self.delegation_repository.find_open(
                linked.id, data.address, data.chain_id
            )

            if (
                pending
                and pending.status == DelegationStatus.PENDING
                and pending.nonce == data.nonce
            ):
                resolved_expiry = self._resolve_expiry(
                    expires_at or pending.expires_at, now
                )
                signed = pending.model_copy(
                    update={
                        "signature": signed_authorization.signature,
                        "permissions": permissions or pending.permissions,
                        "expires_at": resolved_expiry,
                        "status": DelegationStatus.SIGNED,
                        "updated_at": now,
                    }
                )
                saved = await self.delegation_repository.save(signed)
            else:
                resolved_expiry = self._resolve_expiry(expires_at, now)
                await self._release_slot(linked.id, data.address, data.chain_id, now)
                delegation = AccountDelegation(
                    id=DelegationId(uuid4()),
                    linked_account_id=linked.id,
                    delegated_address=data.address,
                    chain_id=data.chain_id,
                    authorization_data=data,
                    signature=signed_authorization.signature,
                    permissions=permissions or DelegationPermissions.full_trust(),
                    nonce=data.nonce,
                    expires_at=resolved_expiry,
                    status=DelegationStatus.SIGNED,
                )
                saved = await self._insert(delegation)

            logfire.info(
                "Delegation stored",
                delegation_id=str(saved.id),
                linked_account_id=str(linked.id),
                chain_id=saved.chain_id,
            )
            await self.audit_logger.record(
                "delegation.stored",
                "delegation",
                resource_id=str(saved.id),
                account_id=account_id,
                profile_id=profile.id,
                chain_id=saved.chain_id,
            )
            return saved

    async def activate_delegation(
        self, account_id: AccountId, delegation_id: DelegationId
    ) -> AccountDelegation:
        """Submit a signed delegation on chain and mark it active.

        Raises:
            NotFoundError: If the delegation is not owned by the caller
            ValidationError: If it is unsigned, revoked or expired
            ConflictError: If it is already active
        """
        with logfire.span(
            "delegation_service.activate_delegation",
            account_id=str(account_id),
            delegation_id=str(delegation_id),
        ):
            delegation, _, profile = await self._get_owned(account_id, delegation_id)

            if delegation.status == DelegationStatus.REVOKED:
                raise ValidationError("Delegation has been revoked")
            if delegation.status == DelegationStatus.ACTIVE:
                raise ConflictError("Delegation is already active")
            if delegation.status == DelegationStatus.PENDING:
                raise ValidationError("Delegation has not been signed")
            if delegation.is_expired():
                raise ValidationError("Delegation has expired")

            transaction_hash = await self.session_wallet_client.submit_authorization(
                profile.id, delegation
            )
            now = utcnow()
            saved = await self.delegation_repository.save(
                delegation.model_copy(
                    update={
                        "status": DelegationStatus.ACTIVE,
                        "transaction_hash": transaction_hash,
                        "activated_at": now,
                        "updated_at": now,
                    }
                )
            )

            logfire.info(
                "Delegation activated",
                delegation_id=str(delegation_id),
                transaction_hash=transaction_hash,
            )
            await self.audit_logger.record(
                "delegation.activated",
                "delegation",
                resource_id=str(delegation_id),
                account_id=account_id,
                profile_id=profile.id,
                transaction_hash=transaction_hash,
            )
            return saved

    async def has_active_delegation(
        self,
        linked_address: EthAddress,
        session_wallet_address: EthAddress,
        chain_id: int,
    ) -> bool:
        """Whether a usable delegation exists for the tuple right now."""
        delegation = await self.find_usable_delegation(
            linked_address, session_wallet_address, chain_id
        )
        return delegation is not None

    async def find_usable_delegation(
        self,
        linked_address: EthAddress,
        session_wallet_address: EthAddress,
        chain_id: int,
    ) -> Optional[AccountDelegation]:
        """Signed or active, unexpired delegation for the tuple, if any."""
        with logfire.span(
            "delegation_service.find_usable_delegation",
            linked_address=linked_address.root,
            chain_id=chain_id,
        ):
            return await self.delegation_repository.find_usable_for_address(
                linked_address, session_wallet_address, chain_id, utcnow()
            )

    async def revoke_delegation(
        self, account_id: AccountId, delegation_id: DelegationId
    ) -> AccountDelegation:
        """Revoke a delegation. Revocation is permanent.

        Raises:
            NotFoundError: If the delegation is not owned by the caller
            ConflictError: If the delegation is already revoked
        """
        with logfire.span(
            "delegation_service.revoke_delegation",
            account_id=str(account_id),
            delegation_id=str(delegation_id),
        ):
            delegation, _, profile = await self._get_owned(account_id, delegation_id)
            if delegation.status == DelegationStatus.REVOKED:
                raise ConflictError("Delegation already revoked")

            saved = await self.delegation_repository.save(
                self._revoked(delegation, utcnow())
            )

            logfire.info("Delegation revoked", delegation_id=str(delegation_id))
            await self.audit_logger.record(
                "delegation.revoked",
                "delegation",
                resource_id=str(delegation_id),
                account_id=account_id,
                profile_id=profile.id,
            )
            return saved

    async def is_delegation_expired(self, delegation_id: DelegationId) -> bool:
        """Whether the stored expiry of a delegation has passed.

        Raises:
            NotFoundError: If the delegation does not exist
        """
        delegation = await self.delegation_repository.find_by_id(delegation_id)
        if delegation is None:
            raise NotFoundError("Delegation", str(delegation_id))
        return delegation.is_expired()

    async def get_delegation(
        self, account_id: AccountId, delegation_id: DelegationId
    ) -> AccountDelegation:
        """Get a delegation owned by the caller.

        Raises:
            NotFoundError: If the delegation is not owned by the caller
        """
        with logfire.span(
            "delegation_service.get_delegation",
            account_id=str(account_id),
            delegation_id=str(delegation_id),
        ):
            delegation, _, _ = await self._get_owned(account_id, delegation_id)
            return delegation

    async def get_owned_delegation(
        self, account_id: AccountId, delegation_id: DelegationId
    ) -> tuple[AccountDelegation, LinkedAccount, Profile]:
        """Delegation with its linked account and profile, ownership checked.

        Raises:
            NotFoundError: If the delegation is not owned by the caller
        """
        return await self._get_owned(account_id, delegation_id)

    async def get_profile_delegations(
        self, account_id: AccountId, profile_id: ProfileId
    ) -> list[AccountDelegation]:
        """Usable delegations of a profile's active linked accounts, newest first.

        Raises:
            NotFoundError: If the profile is not owned by the caller
        """
        with logfire.span(
            "delegation_service.get_profile_delegations",
            account_id=str(account_id),
            profile_id=str(profile_id),
        ):
            linked_accounts = await self.linked_account_service.list_linked_accounts(
                account_id, profile_id
            )
            delegations = await self.delegation_repository.find_by_linked_accounts(
                [linked.id for linked in linked_accounts]
            )
            now = utcnow()
            usable = [d for d in delegations if d.is_usable(now)]
            logfire.info(
                "Profile delegations retrieved",
                profile_id=str(profile_id),
                count=len(usable),
            )
            return usable

    def has_permission_for_transaction(
        self, permissions: DelegationPermissions, transaction: TransactionRequest
    ) -> bool:
        """Whether permissions cover transaction."""
        return self.evaluate_transaction(permissions, transaction).allowed

    def evaluate_transaction(
        self, permissions: DelegationPermissions, transaction: TransactionRequest
    ) -> PermissionDecision:
        """Permission decision for transaction, with the denial reason."""
        decision = evaluate_transaction(permissions, transaction)
        if not decision.allowed:
            logfire.info(
                "Transaction denied by delegation permissions",
                to=transaction.to.root,
                chain_id=transaction.chain_id,
                reason=decision.reason,
            )
        return decision

    async def _get_owned(
        self, account_id: AccountId, delegation_id: DelegationId
    ) -> tuple[AccountDelegation, LinkedAccount, Profile]:
        delegation = await self.delegation_repository.find_by_id(delegation_id)
        if delegation is None:
            raise NotFoundError("Delegation", str(delegation_id))
        try:
            owned = await self.linked_account_service.get_owned_linked_account(
                account_id, delegation.linked_account_id, include_inactive=True
            )
            linked, profile = owned
        except NotFoundError:
            logfire.warn(
                "Delegation not owned by account",
                account_id=str(account_id),
                delegation_id=str(delegation_id),
            )
            raise NotFoundError("Delegation", str(delegation_id))
        return delegation, linked, profile

    def _verify_signature(
        self, linked: LinkedAccount, signed_authorization: SignedAuthorization
    ) -> None:
        try:
            signature = signed_authorization.signature
        except pydantic.ValidationError:
            logfire.warn(
                "Malformed delegation signature", linked_account_id=str(linked.id)
            )
            raise ValidationError("Invalid delegation signature")

        if not verify_authorization_signature(
            linked.address, signed_authorization.authorization_data, signature
        ):
            raise ValidationError("Invalid delegation signature")

    def _resolve_expiry(
        self, expires_at: Optional[datetime], now: datetime
    ) -> Optional[datetime]:
        expires_at = ensure_utc(expires_at)
        if expires_at is None and self.settings.default_expiry_days:
            return now + timedelta(days=self.settings.default_expiry_days)
        if expires_at is not None and expires_at <= now:
            raise ValidationError("Delegation expiry must be in the future")
        return expires_at

    async def _release_slot(
        self,
        linked_account_id: LinkedAccountId,
        delegated_address: EthAddress,
        chain_id: int,
        now: datetime,
    ) -> None:
        """Make room for a new open delegation on the tuple.

        Expired delegations and stale pending challenges are revoked; a
        usable delegation or a fresh challenge is a conflict.
        """
        existing = await self.delegation_repository.find_open(
            linked_account_id, delegated_address, chain_id
        )
        if existing is None:
            return

        if existing.is_usable(now):
            logfire.warn(
                "Active delegation already exists",
                delegation_id=str(existing.id),
            )
            raise ConflictError("Active delegation already exists for this account")

        stale = existing.is_stale_challenge(self.settings.pending_ttl_seconds, now)
        if existing.status == DelegationStatus.PENDING and not (
            stale or existing.is_expired(now)
        ):
            raise ConflictError(
                "A delegation request is already pending for this account"
            )

        await self.delegation_repository.save(self._revoked(existing, now))
        logfire.info("Superseded delegation revoked", delegation_id=str(existing.id))

    async def _insert(self, delegation: AccountDelegation) -> AccountDelegation:
        try:
            return await self.delegation_repository.save(delegation)
        except IntegrityError:
            logfire.warn(
                "Concurrent delegation insert",
                linked_account_id=str(delegation.linked_account_id),
                chain_id=delegation.chain_id,
            )
            raise ConflictError("Active delegation already exists for this account")

    @staticmethod
    def _revoked(delegation: AccountDelegation, now: datetime) -> AccountDelegation:
        return delegation.model_copy(
            update={
                "status": DelegationStatus.REVOKED,
                "revoked_at": now,
                "updated_at": now,
            }
        )
