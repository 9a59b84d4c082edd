"""Account use cases."""

from .get_current_account import (
    GetCurrentAccountRequest,
    GetCurrentAccountResponse,
    GetCurrentAccountUseCase,
)
from .provision_account import (
    ProfileItem,
    ProvisionAccountRequest,
    ProvisionAccountResponse,
    ProvisionAccountUseCase,
)
from .request_challenge import (
    RequestChallengeRequest,
    RequestChallengeResponse,
    RequestChallengeUseCase,
)

__all__ = [
    "GetCurrentAccountRequest",
    "GetCurrentAccountResponse",
    "GetCurrentAccountUseCase",
    "ProfileItem",
    "ProvisionAccountRequest",
    "ProvisionAccountResponse",
    "ProvisionAccountUseCase",
    "RequestChallengeRequest",
    "RequestChallengeResponse",
    "RequestChallengeUseCase",
]
