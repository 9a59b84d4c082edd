"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from interspace.domain.model import (
    Account,
    AccountDelegation,
    AuthorizationData,
    DelegationPermissions,
    DelegationSignature,
    IdentityChallenge,
    IdentityLink,
    LinkedAccount,
    Profile,
    ProfileAccount,
)
from interspace.domain.value import (
    AccountId,
    AccountType,
    ChallengeId,
    DelegationId,
    DelegationStatus,
    EthAddress,
    LinkedAccountId,
    LinkType,
    PrivacyMode,
    ProfileAccountId,
    ProfileId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row["id"])),
        type=AccountType(row["type"]),
        provider=row.get("provider"),
        identifier=row["identifier"],
        verified=row["verified"],
        metadata=row.get("metadata") or {},
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict."""
    data = account.model_dump()
    data["type"] = account.type.value
    return data


def row_to_identity_link(row: Dict[str, Any]) -> IdentityLink:
    """Convert database row to IdentityLink domain model."""
    return IdentityLink(
        account_a_id=AccountId(_uuid(row["account_a_id"])),
        account_b_id=AccountId(_uuid(row["account_b_id"])),
        privacy_mode=PrivacyMode(row["privacy_mode"]),
        link_type=LinkType(row["link_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def identity_link_to_dict(link: IdentityLink) -> Dict[str, Any]:
    """Convert IdentityLink domain model to database dict."""
    data = link.model_dump()
    data["privacy_mode"] = link.privacy_mode.value
    data["link_type"] = link.link_type.value
    return data


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model."""
    return Profile(
        id=ProfileId(_uuid(row["id"])),
        name=row["name"],
        session_wallet_address=EthAddress(row["session_wallet_address"]),
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    data = profile.model_dump()
    data["session_wallet_address"] = profile.session_wallet_address.root
    return data


def row_to_profile_account(row: Dict[str, Any]) -> ProfileAccount:
    """Convert database row to ProfileAccount domain model."""
    return ProfileAccount(
        id=ProfileAccountId(_uuid(row["id"])),
        profile_id=ProfileId(_uuid(row["profile_id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        is_primary=row["is_primary"],
        permissions=row.get("permissions") or {},
        created_at=row["created_at"],
    )


def profile_account_to_dict(profile_account: ProfileAccount) -> Dict[str, Any]:
    """Convert ProfileAccount domain model to database dict."""
    return profile_account.model_dump()


def row_to_linked_account(row: Dict[str, Any]) -> LinkedAccount:
    """Convert database row to LinkedAccount domain model."""
    return LinkedAccount(
        id=LinkedAccountId(_uuid(row["id"])),
        profile_id=ProfileId(_uuid(row["profile_id"])),
        address=EthAddress(row["address"]),
        chain_id=row["chain_id"],
        auth_strategy=row["auth_strategy"],
        wallet_type=row["wallet_type"],
        custom_name=row.get("custom_name"),
        is_primary=row["is_primary"],
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def linked_account_to_dict(linked_account: LinkedAccount) -> Dict[str, Any]:
    """Convert LinkedAccount domain model to database dict."""
    data = linked_account.model_dump()
    data["address"] = linked_account.address.root
    return data


def row_to_delegation(row: Dict[str, Any]) -> AccountDelegation:
    """Convert database row to AccountDelegation domain model.

    JSONB columns hold the authorization tuple, signature and permission
    set; the nonce column is NUMERIC and comes back as a Decimal.
    """
    signature = row.get("signature")
    return AccountDelegation(
        id=DelegationId(_uuid(row["id"])),
        linked_account_id=LinkedAccountId(_uuid(row["linked_account_id"])),
        delegated_address=EthAddress(row["delegated_address"]),
        chain_id=row["chain_id"],
        authorization_data=AuthorizationData.model_validate(row["authorization_data"]),
        signature=DelegationSignature.model_validate(signature) if signature else None,
        permissions=DelegationPermissions.model_validate(row.get("permissions") or {}),
        nonce=int(row["nonce"]),
        expires_at=row.get("expires_at"),
        status=DelegationStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        activated_at=row.get("activated_at"),
        revoked_at=row.get("revoked_at"),
        transaction_hash=row.get("transaction_hash"),
    )


def delegation_to_dict(delegation: AccountDelegation) -> Dict[str, Any]:
    """Convert AccountDelegation domain model to database dict."""
    return {
        "id": delegation.id,
        "linked_account_id": delegation.linked_account_id,
        "delegated_address": delegation.delegated_address.root,
        "chain_id": delegation.chain_id,
        "authorization_data": delegation.authorization_data.to_json(),
        "signature": (
            delegation.signature.model_dump() if delegation.signature else None
        ),
        "permissions": delegation.permissions.to_json(),
        "nonce": delegation.nonce,
        "expires_at": delegation.expires_at,
        "status": delegation.status.value,
        "created_at": delegation.created_at,
        "updated_at": delegation.updated_at,
        "activated_at": delegation.activated_at,
        "revoked_at": delegation.revoked_at,
        "transaction_hash": delegation.transaction_hash,
    }


def row_to_identity_challenge(row: Dict[str, Any]) -> IdentityChallenge:
    """Convert database row to IdentityChallenge domain model."""
    return IdentityChallenge(
        id=ChallengeId(_uuid(row["id"])),
        account_type=AccountType(row["account_type"]),
        identifier=row["identifier"],
        message=row.get("message"),
        code_hash=row.get("code_hash"),
        attempts=row["attempts"],
        expires_at=row["expires_at"],
        consumed_at=row.get("consumed_at"),
        created_at=row["created_at"],
    )


def identity_challenge_to_dict(challenge: IdentityChallenge) -> Dict[str, Any]:
    """Convert IdentityChallenge domain model to database dict."""
    return {
        "id": challenge.id,
        "account_type": challenge.account_type.value,
        "identifier": challenge.identifier,
        "message": challenge.message,
        "code_hash": challenge.code_hash,
        "attempts": challenge.attempts,
        "expires_at": challenge.expires_at,
        "consumed_at": challenge.consumed_at,
        "created_at": challenge.created_at,
    }
