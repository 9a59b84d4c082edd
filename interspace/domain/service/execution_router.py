"""Execution routing for profile transactions.

A transaction is either sent directly by the session wallet or executed
on behalf of a linked EOA that has delegated to it.
"""

from typing import Optional

import logfire

from interspace.domain.error import ValidationError
from interspace.domain.model.transaction import TransactionRequest
from interspace.domain.value import (
    AccountId,
    DelegationId,
    DelegationStatus,
    ExecutionPath,
    LinkedAccountId,
    ProfileId,
)
from interspace.domain.value.common import ValueObject

from .audit import AuditLogger
from .base import Service
from .delegation_service import DelegationService
from .linked_account_service import LinkedAccountService
from .profile_service import ProfileService
from .session_wallet import SessionWalletClient


class ExecutionPlan(ValueObject):
    """Chosen route for a transaction."""

    path: ExecutionPath
    delegation_id: Optional[DelegationId] = None
    linked_account_id: Optional[LinkedAccountId] = None


class ExecutionRouter(Service):
    """Chooses and carries out the execution path of profile transactions."""

    def __init__(
        self,
        profile_service: ProfileService,
        linked_account_service: LinkedAccountService,
        delegation_service: DelegationService,
        session_wallet_client: SessionWalletClient,
        audit_logger: AuditLogger,
    ) -> None:
        """Initialize execution router.

        Args:
            profile_service: Profile domain service
            linked_account_service: Linked account domain service
            delegation_service: Delegation domain service
            session_wallet_client: Session wallet collaborator
            audit_logger: Audit trail
        """
        self.profile_service = profile_service
        self.linked_account_service = linked_account_service
        self.delegation_service = delegation_service
        self.session_wallet_client = session_wallet_client
        self.audit_logger = audit_logger

    async def plan_execution(
        self, profile_id: ProfileId, transaction: TransactionRequest
    ) -> ExecutionPlan:
        """Pick the route for a transaction.

        The first active linked account holding a usable delegation to the
        profile's session wallet on the transaction's chain is used.
        Balances and gas are not checked.

        Args:
            profile_id: Profile sending the transaction
            transaction: Transaction to route

        Returns:
            Delegated plan naming the delegation, or a direct plan

        Raises:
            NotFoundError: If the profile does not exist
        """
        with logfire.span(
            "execution_router.plan_execution",
            profile_id=str(profile_id),
            chain_id=transaction.chain_id,
        ):
            profile = await self.profile_service.get_profile(profile_id)
            linked_accounts = (
                await self.linked_account_service.get_active_linked_accounts(profile_id)
            )
            for linked in linked_accounts:
                delegation = await self.delegation_service.find_usable_delegation(
                    linked.address, profile.session_wallet_address, transaction.chain_id
                )
                if delegation:
                    logfire.info(
                        "Delegated execution path selected",
                        profile_id=str(profile_id),
                        delegation_id=str(delegation.id),
                    )
                    return ExecutionPlan(
                        path=ExecutionPath.DELEGATED,
                        delegation_id=delegation.id,
                        linked_account_id=linked.id,
                    )

            logfire.info("Direct execution path selected", profile_id=str(profile_id))
            return ExecutionPlan(path=ExecutionPath.DIRECT)

    async def determine_best_execution_path(
        self, profile_id: ProfileId, transaction: TransactionRequest
    ) -> ExecutionPath:
        """Route for a transaction: delegated when any delegation covers it."""
        plan = await self.plan_execution(profile_id, transaction)
        return plan.path

    async def execute_with_delegation(
        self,
        account_id: AccountId,
        delegation_id: DelegationId,
        transaction: TransactionRequest,
    ) -> str:
        """Execute a transaction through a delegation.

        Args:
            account_id: Calling account
            delegation_id: Delegation to act under
            transaction: Transaction to send

        Returns:
            Transaction hash

        Raises:
            NotFoundError: If the delegation is not owned by the caller
            ValidationError: If the delegation is revoked, expired,
                unsigned, scoped to another chain, granted to another
                session wallet, or does not permit the transaction
        """
        with logfire.span(
            "execution_router.execute_with_delegation",
            account_id=str(account_id),
            delegation_id=str(delegation_id),
            chain_id=transaction.chain_id,
        ):
            delegation, linked, profile = (
                await self.delegation_service.get_owned_delegation(
                    account_id, delegation_id
                )
            )

            if delegation.status == DelegationStatus.REVOKED:
                raise ValidationError("Delegation has been revoked")
            if delegation.is_expired():
                raise ValidationError("Delegation has expired")
            if not delegation.status.is_usable:
                raise ValidationError("Delegation has not been signed")
            if not linked.is_active:
                raise ValidationError("Linked account is no longer active")
            if transaction.chain_id != delegation.chain_id:
                raise ValidationError(
                    f"Chain {transaction.chain_id} is not allowed by this delegation"
                )
            if delegation.delegated_address != profile.session_wallet_address:
                raise ValidationError(
                    "Delegation was not granted to this profile's session wallet"
                )

            decision = self.delegation_service.evaluate_transaction(
                delegation.permissions, transaction
            )
            if not decision.allowed:
                raise ValidationError(decision.reason)

            transaction_hash = (
                await self.session_wallet_client.execute_transaction_with_delegation(
                    profile.id,
                    linked.address,
                    transaction.to,
                    transaction.value,
                    transaction.data,
                    transaction.chain_id,
                )
            )

            logfire.info(
                "Transaction executed with delegation",
                delegation_id=str(delegation_id),
                transaction_hash=transaction_hash,
            )
            await self.audit_logger.record(
                "delegation.executed",
                "delegation",
                resource_id=str(delegation_id),
                account_id=account_id,
                profile_id=profile.id,
                to=transaction.to.root,
                value=str(transaction.value),
                chain_id=transaction.chain_id,
                transaction_hash=transaction_hash,
            )
            return transaction_hash
