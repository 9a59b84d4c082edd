"""Identity graph use cases."""

from .get_accessible_profiles import (
    GetAccessibleProfilesRequest,
    GetAccessibleProfilesResponse,
    GetAccessibleProfilesUseCase,
)
from .get_linked_accounts import (
    GetLinkedAccountsRequest,
    GetLinkedAccountsResponse,
    GetLinkedAccountsUseCase,
    LinkedIdentityItem,
)
from .link_accounts import (
    LinkAccountsRequest,
    LinkAccountsResponse,
    LinkAccountsUseCase,
    LinkItem,
)
from .unlink_accounts import (
    UnlinkAccountsRequest,
    UnlinkAccountsResponse,
    UnlinkAccountsUseCase,
)
from .update_link_privacy import UpdateLinkPrivacyRequest, UpdateLinkPrivacyUseCase

__all__ = [
    "GetAccessibleProfilesRequest",
    "GetAccessibleProfilesResponse",
    "GetAccessibleProfilesUseCase",
    "GetLinkedAccountsRequest",
    "GetLinkedAccountsResponse",
    "GetLinkedAccountsUseCase",
    "LinkAccountsRequest",
    "LinkAccountsResponse",
    "LinkAccountsUseCase",
    "LinkItem",
    "LinkedIdentityItem",
    "UnlinkAccountsRequest",
    "UnlinkAccountsResponse",
    "UnlinkAccountsUseCase",
    "UpdateLinkPrivacyRequest",
    "UpdateLinkPrivacyUseCase",
]
