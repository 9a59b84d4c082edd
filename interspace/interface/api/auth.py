"""Caller identity resolution for routes."""

from uuid import UUID

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import Cookie, Header
from pydantic import BaseModel, Field

from interspace.application.usecase.account import (
    GetCurrentAccountRequest,
    GetCurrentAccountResponse,
    GetCurrentAccountUseCase,
)
from interspace.domain.error import NotFoundError
from interspace.domain.model.identity_challenge import IdentityProof
from interspace.domain.value import ChallengeId
from interspace.interface.error import AuthenticationError
from interspace.util.jwt import JWTError


def extract_token(authorization: str | None, auth_token: str | None) -> str | None:
    """Bearer token from the Authorization header, else the auth_token cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
    return auth_token


@inject
async def get_current_account(
    get_current_account_use_case: FromDishka[GetCurrentAccountUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetCurrentAccountResponse:
    """Resolve the calling account from its JWT.

    Raises:
        AuthenticationError: If no token is sent, it does not verify, or
            its account no longer exists
    """
    token = extract_token(authorization, auth_token)
    if not token:
        raise AuthenticationError("Authentication required")
    try:
        return await get_current_account_use_case.execute(
            GetCurrentAccountRequest(token=token)
        )
    except JWTError as e:
        raise AuthenticationError(str(e))
    except NotFoundError:
        raise AuthenticationError("Account not found for token")


class ProofAPIModel(BaseModel):
    """Answer to a challenge from POST /auth/challenge."""

    challenge_id: UUID
    signature: str | None = Field(default=None, max_length=200)  # Wallets
    code: str | None = Field(default=None, max_length=12)  # Emails


def build_proof(
    proof: ProofAPIModel | None, upstream_key: str | None
) -> IdentityProof | None:
    """Combine a challenge answer and the X-Upstream-Key header."""
    if proof is None and upstream_key is None:
        return None
    return IdentityProof(
        challenge_id=ChallengeId(proof.challenge_id) if proof else None,
        signature=proof.signature if proof else None,
        code=proof.code if proof else None,
        upstream_key=upstream_key,
    )
