"""JWT helpers for the caller identity token (PyJWT)."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, ConfigDict, Field

from interspace.config import AuthSettings


class TokenPayload(BaseModel):
    """Claims of a caller identity token."""

    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(alias="sub")
    account_type: str
    issued_at: datetime = Field(alias="iat")
    exp: datetime


class JWTError(Exception):
    """Token missing required claims, badly signed or expired."""

    pass


def create_token(account_id: str, account_type: str, settings: AuthSettings) -> str:
    """Issue a token for an account.

    Args:
        account_id: Account ID, stored as the subject claim
        account_type: Kind of identity the account authenticated with
        settings: Authentication settings

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": account_id,
        "account_type": account_type,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify a token and return its claims.

    Raises:
        JWTError: If token is invalid, expired or lacks a required claim
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "account_type", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
    return TokenPayload.model_validate(payload)
