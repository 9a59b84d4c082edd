"""Authentication routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Header, Response
from pydantic import BaseModel, Field

from interspace.application.usecase.account import (
    GetCurrentAccountResponse,
    ProvisionAccountRequest,
    ProvisionAccountResponse,
    ProvisionAccountUseCase,
    RequestChallengeRequest,
    RequestChallengeResponse,
    RequestChallengeUseCase,
)
from interspace.config import Settings
from interspace.domain.value import AccountType
from interspace.interface.api.auth import (
    ProofAPIModel,
    build_proof,
    get_current_account,
)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class ChallengeAPIRequest(BaseModel):
    """API request for a wallet or email challenge."""

    account_type: AccountType
    identifier: str = Field(min_length=1, max_length=255)


class ProvisionAPIRequest(BaseModel):
    """API request for provisioning an identity.

    identifier is omitted for guests.
    """

    account_type: AccountType
    identifier: str | None = Field(default=None, min_length=1, max_length=255)
    proof: ProofAPIModel | None = None
    provider: str | None = Field(default=None, max_length=50)
    metadata: dict[str, Any] = Field(default_factory=dict)
    profile_name: str | None = Field(default=None, min_length=1, max_length=100)


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool


@router.post("/challenge", response_model=RequestChallengeResponse)
async def challenge(
    request: ChallengeAPIRequest,
    request_challenge_use_case: FromDishka[RequestChallengeUseCase],
) -> RequestChallengeResponse:
    """Start a wallet or email sign-in.

    Wallets sign the returned message; emails receive a six digit code.
    Either answer is sent back as the proof of /auth/provision or
    POST /identity/links.
    """
    return await request_challenge_use_case.execute(
        RequestChallengeRequest(
            account_type=request.account_type, identifier=request.identifier
        )
    )


@router.post("/provision", response_model=ProvisionAccountResponse)
async def provision(
    request: ProvisionAPIRequest,
    response: Response,
    provision_account_use_case: FromDishka[ProvisionAccountUseCase],
    settings: FromDishka[Settings],
    x_upstream_key: str | None = Header(default=None),
) -> ProvisionAccountResponse:
    """Sign an identity in, creating its account and profile on first use.

    Wallets and emails answer a challenge from /auth/challenge. Social
    and passkey identities are vouched for by the upstream service in the
    X-Upstream-Key header. Guests need no proof. Returns 401 when the proof
    does not hold. The JWT is returned in the body and set as the
    auth_token cookie.

    Example:
        POST /auth/provision
        {"account_type": "wallet", "identifier": "0xAbC...",
         "proof": {"challenge_id": "...", "signature": "0x..."}}
    """
    result = await provision_account_use_case.execute(
        ProvisionAccountRequest(
            account_type=request.account_type,
            identifier=request.identifier,
            provider=request.provider,
            metadata=request.metadata,
            profile_name=request.profile_name,
            proof=build_proof(request.proof, x_upstream_key),
        )
    )

    response.set_cookie(
        key="auth_token",
        value=result.token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
    )
    return result


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Clear the auth_token cookie."""
    response.delete_cookie(key="auth_token", path="/")
    return LogoutResponse(success=True)


@router.get("/me", response_model=GetCurrentAccountResponse)
async def me(
    current: GetCurrentAccountResponse = Depends(get_current_account),
) -> GetCurrentAccountResponse:
    """Account behind the caller's token."""
    return current
