"""Domain layer DI providers."""

from dishka import Scope, provide

from interspace.config import AuthSettings, DelegationSettings
from interspace.domain.repository import (
    AccountRepository,
    DelegationRepository,
    IdentityChallengeRepository,
    IdentityLinkRepository,
    LinkedAccountRepository,
    ProfileAccountRepository,
    ProfileRepository,
)
from interspace.domain.service import (
    AccountService,
    AuditLog,
    AuditLogger,
    DelegationService,
    EmailSender,
    ExecutionRouter,
    IdentityLinkService,
    IdentityProofService,
    JWTService,
    LinkedAccountService,
    NonceProvider,
    ProfileService,
    SessionWalletClient,
)
from interspace.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_audit_logger(self, audit_log: AuditLog) -> AuditLogger:
        """Provide fire-and-forget audit logger."""
        return AuditLogger(audit_log=audit_log)

    @provide
    def get_account_service(
        self, account_repository: AccountRepository
    ) -> AccountService:
        """Provide account domain service."""
        return AccountService(account_repository=account_repository)

    @provide
    def get_identity_proof_service(
        self,
        identity_challenge_repository: IdentityChallengeRepository,
        email_sender: EmailSender,
        auth_settings: AuthSettings,
    ) -> IdentityProofService:
        """Provide proof-of-control domain service."""
        return IdentityProofService(
            identity_challenge_repository=identity_challenge_repository,
            email_sender=email_sender,
            auth_settings=auth_settings,
        )

    @provide
    def get_profile_service(
        self,
        profile_repository: ProfileRepository,
        profile_account_repository: ProfileAccountRepository,
    ) -> ProfileService:
        """Provide profile domain service."""
        return ProfileService(
            profile_repository=profile_repository,
            profile_account_repository=profile_account_repository,
        )

    @provide
    def get_identity_link_service(
        self,
        identity_link_repository: IdentityLinkRepository,
        account_service: AccountService,
        profile_service: ProfileService,
    ) -> IdentityLinkService:
        """Provide identity link graph domain service."""
        return IdentityLinkService(
            identity_link_repository=identity_link_repository,
            account_service=account_service,
            profile_service=profile_service,
        )

    @provide
    def get_linked_account_service(
        self,
        linked_account_repository: LinkedAccountRepository,
        profile_service: ProfileService,
    ) -> LinkedAccountService:
        """Provide linked account domain service."""
        return LinkedAccountService(
            linked_account_repository=linked_account_repository,
            profile_service=profile_service,
        )

    @provide
    def get_delegation_service(
        self,
        delegation_repository: DelegationRepository,
        linked_account_service: LinkedAccountService,
        nonce_provider: NonceProvider,
        session_wallet_client: SessionWalletClient,
        audit_logger: AuditLogger,
        delegation_settings: DelegationSettings,
    ) -> DelegationService:
        """Provide delegation domain service."""
        return DelegationService(
            delegation_repository=delegation_repository,
            linked_account_service=linked_account_service,
            nonce_provider=nonce_provider,
            session_wallet_client=session_wallet_client,
            audit_logger=audit_logger,
            delegation_settings=delegation_settings,
        )

    @provide
    def get_execution_router(
        self,
        profile_service: ProfileService,
        linked_account_service: LinkedAccountService,
        delegation_service: DelegationService,
        session_wallet_client: SessionWalletClient,
        audit_logger: AuditLogger,
    ) -> ExecutionRouter:
        """Provide execution router."""
        return ExecutionRouter(
            profile_service=profile_service,
            linked_account_service=linked_account_service,
            delegation_service=delegation_service,
            session_wallet_client=session_wallet_client,
            audit_logger=audit_logger,
        )
