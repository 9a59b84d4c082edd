"""Application layer DI providers."""

from dishka import Scope, provide

from interspace.application.usecase.account import (
    GetCurrentAccountUseCase,
    ProvisionAccountUseCase,
    RequestChallengeUseCase,
)
from interspace.application.usecase.delegation import (
    ActivateDelegationUseCase,
    CreateAuthorizationUseCase,
    GetDelegationUseCase,
    ListProfileDelegationsUseCase,
    RevokeDelegationUseCase,
    StoreDelegationUseCase,
)
from interspace.application.usecase.execution import (
    DetermineExecutionPathUseCase,
    ExecuteWithDelegationUseCase,
)
from interspace.application.usecase.identity import (
    GetAccessibleProfilesUseCase,
    GetLinkedAccountsUseCase,
    LinkAccountsUseCase,
    UnlinkAccountsUseCase,
    UpdateLinkPrivacyUseCase,
)
from interspace.application.usecase.linked_account import (
    LinkAccountUseCase,
    ListLinkedAccountsUseCase,
    UnlinkAccountUseCase,
)
from interspace.domain.service import (
    AccountService,
    AuditLogger,
    DelegationService,
    ExecutionRouter,
    IdentityLinkService,
    IdentityProofService,
    JWTService,
    LinkedAccountService,
    ProfileService,
    SessionWalletClient,
)
from interspace.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Account use cases
    @provide(scope=Scope.REQUEST)
    def get_provision_account_use_case(
        self,
        account_service: AccountService,
        profile_service: ProfileService,
        identity_link_service: IdentityLinkService,
        identity_proof_service: IdentityProofService,
        linked_account_service: LinkedAccountService,
        session_wallet_client: SessionWalletClient,
        jwt_service: JWTService,
        audit_logger: AuditLogger,
    ) -> ProvisionAccountUseCase:
        """Provide provision account use case."""
        return ProvisionAccountUseCase(
            account_service=account_service,
            profile_service=profile_service,
            identity_link_service=identity_link_service,
            identity_proof_service=identity_proof_service,
            linked_account_service=linked_account_service,
            session_wallet_client=session_wallet_client,
            jwt_service=jwt_service,
            audit_logger=audit_logger,
        )

    @provide(scope=Scope.REQUEST)
    def get_request_challenge_use_case(
        self, identity_proof_service: IdentityProofService
    ) -> RequestChallengeUseCase:
        """Provide request identity challenge use case."""
        return RequestChallengeUseCase(identity_proof_service=identity_proof_service)

    @provide(scope=Scope.REQUEST)
    def get_current_account_use_case(
        self, jwt_service: JWTService, account_service: AccountService
    ) -> GetCurrentAccountUseCase:
        """Provide get current account use case."""
        return GetCurrentAccountUseCase(
            jwt_service=jwt_service, account_service=account_service
        )

    # Identity graph use cases
    @provide(scope=Scope.REQUEST)
    def get_link_accounts_use_case(
        self,
        account_service: AccountService,
        identity_link_service: IdentityLinkService,
        identity_proof_service: IdentityProofService,
        audit_logger: AuditLogger,
    ) -> LinkAccountsUseCase:
        """Provide link accounts use case."""
        return LinkAccountsUseCase(
            account_service=account_service,
            identity_link_service=identity_link_service,
            identity_proof_service=identity_proof_service,
            audit_logger=audit_logger,
        )

    @provide(scope=Scope.REQUEST)
    def get_update_link_privacy_use_case(
        self, identity_link_service: IdentityLinkService, audit_logger: AuditLogger
    ) -> UpdateLinkPrivacyUseCase:
        """Provide update link privacy use case."""
        return UpdateLinkPrivacyUseCase(
            identity_link_service=identity_link_service, audit_logger=audit_logger
        )

    @provide(scope=Scope.REQUEST)
    def get_unlink_accounts_use_case(
        self, identity_link_service: IdentityLinkService, audit_logger: AuditLogger
    ) -> UnlinkAccountsUseCase:
        """Provide unlink accounts use case."""
        return UnlinkAccountsUseCase(
            identity_link_service=identity_link_service, audit_logger=audit_logger
        )

    @provide(scope=Scope.REQUEST)
    def get_linked_accounts_use_case(
        self,
        account_service: AccountService,
        identity_link_service: IdentityLinkService,
    ) -> GetLinkedAccountsUseCase:
        """Provide get linked accounts use case."""
        return GetLinkedAccountsUseCase(
            account_service=account_service,
            identity_link_service=identity_link_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_accessible_profiles_use_case(
        self, identity_link_service: IdentityLinkService
    ) -> GetAccessibleProfilesUseCase:
        """Provide get accessible profiles use case."""
        return GetAccessibleProfilesUseCase(
            identity_link_service=identity_link_service
        )

    # Linked account use cases
    @provide(scope=Scope.REQUEST)
    def get_link_account_use_case(
        self, linked_account_service: LinkedAccountService, audit_logger: AuditLogger
    ) -> LinkAccountUseCase:
        """Provide link account use case."""
        return LinkAccountUseCase(
            linked_account_service=linked_account_service, audit_logger=audit_logger
        )

    @provide(scope=Scope.REQUEST)
    def get_list_linked_accounts_use_case(
        self, linked_account_service: LinkedAccountService
    ) -> ListLinkedAccountsUseCase:
        """Provide list linked accounts use case."""
        return ListLinkedAccountsUseCase(linked_account_service=linked_account_service)

    @provide(scope=Scope.REQUEST)
    def get_unlink_account_use_case(
        self, linked_account_service: LinkedAccountService, audit_logger: AuditLogger
    ) -> UnlinkAccountUseCase:
        """Provide unlink account use case."""
        return UnlinkAccountUseCase(
            linked_account_service=linked_account_service, audit_logger=audit_logger
        )

    # Delegation use cases
    @provide(scope=Scope.REQUEST)
    def get_create_authorization_use_case(
        self, delegation_service: DelegationService
    ) -> CreateAuthorizationUseCase:
        """Provide create delegation authorization use case."""
        return CreateAuthorizationUseCase(delegation_service=delegation_service)

    @provide(scope=Scope.REQUEST)
    def get_store_delegation_use_case(
        self, delegation_service: DelegationService
    ) -> StoreDelegationUseCase:
        """Provide store delegation use case."""
        return StoreDelegationUseCase(delegation_service=delegation_service)

    @provide(scope=Scope.REQUEST)
    def get_activate_delegation_use_case(
        self, delegation_service: DelegationService
    ) -> ActivateDelegationUseCase:
        """Provide activate delegation use case."""
        return ActivateDelegationUseCase(delegation_service=delegation_service)

    @provide(scope=Scope.REQUEST)
    def get_revoke_delegation_use_case(
        self, delegation_service: DelegationService
    ) -> RevokeDelegationUseCase:
        """Provide revoke delegation use case."""
        return RevokeDelegationUseCase(delegation_service=delegation_service)

    @provide(scope=Scope.REQUEST)
    def get_delegation_use_case(
        self, delegation_service: DelegationService
    ) -> GetDelegationUseCase:
        """Provide get delegation use case."""
        return GetDelegationUseCase(delegation_service=delegation_service)

    @provide(scope=Scope.REQUEST)
    def get_list_profile_delegations_use_case(
        self, delegation_service: DelegationService
    ) -> ListProfileDelegationsUseCase:
        """Provide list profile delegations use case."""
        return ListProfileDelegationsUseCase(delegation_service=delegation_service)

    # Execution use cases
    @provide(scope=Scope.REQUEST)
    def get_determine_execution_path_use_case(
        self, profile_service: ProfileService, execution_router: ExecutionRouter
    ) -> DetermineExecutionPathUseCase:
        """Provide determine execution path use case."""
        return DetermineExecutionPathUseCase(
            profile_service=profile_service, execution_router=execution_router
        )

    @provide(scope=Scope.REQUEST)
    def get_execute_with_delegation_use_case(
        self, execution_router: ExecutionRouter
    ) -> ExecuteWithDelegationUseCase:
        """Provide execute with delegation use case."""
        return ExecuteWithDelegationUseCase(execution_router=execution_router)
