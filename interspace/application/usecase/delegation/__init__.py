"""Delegation use cases."""

from .activate_delegation import ActivateDelegationRequest, ActivateDelegationUseCase
from .create_authorization import (
    CreateAuthorizationRequest,
    CreateAuthorizationResponse,
    CreateAuthorizationUseCase,
)
from .get_delegation import DelegationItem, GetDelegationRequest, GetDelegationUseCase
from .list_profile_delegations import (
    ListProfileDelegationsRequest,
    ListProfileDelegationsResponse,
    ListProfileDelegationsUseCase,
)
from .revoke_delegation import RevokeDelegationRequest, RevokeDelegationUseCase
from .store_delegation import StoreDelegationRequest, StoreDelegationUseCase

__all__ = [
    "ActivateDelegationRequest",
    "ActivateDelegationUseCase",
    "CreateAuthorizationRequest",
    "CreateAuthorizationResponse",
    "CreateAuthorizationUseCase",
    "DelegationItem",
    "GetDelegationRequest",
    "GetDelegationUseCase",
    "ListProfileDelegationsRequest",
    "ListProfileDelegationsResponse",
    "ListProfileDelegationsUseCase",
    "RevokeDelegationRequest",
    "RevokeDelegationUseCase",
    "StoreDelegationRequest",
    "StoreDelegationUseCase",
]
