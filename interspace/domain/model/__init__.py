"""Domain model entities for Interspace."""

from interspace.domain.model.account import Account
from interspace.domain.model.delegation import (
    AccountDelegation,
    AuthorizationData,
    DelegationChallenge,
    DelegationPermissions,
    DelegationSignature,
    SignedAuthorization,
)
from interspace.domain.model.identity_challenge import IdentityChallenge, IdentityProof
from interspace.domain.model.identity_link import IdentityLink
from interspace.domain.model.linked_account import LinkedAccount
from interspace.domain.model.profile import Profile, ProfileAccount
from interspace.domain.model.transaction import TransactionRequest

__all__ = [
    "Account",
    "IdentityChallenge",
    "IdentityProof",
    "IdentityLink",
    "Profile",
    "ProfileAccount",
    "LinkedAccount",
    "AccountDelegation",
    "AuthorizationData",
    "DelegationChallenge",
    "DelegationPermissions",
    "DelegationSignature",
    "SignedAuthorization",
    "TransactionRequest",
]
