"""JWT token domain service."""

import logfire

from interspace.config import AuthSettings
from interspace.domain.value import AccountId, AccountType
from interspace.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for the caller identity token."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, account_id: AccountId, account_type: AccountType) -> str:
        """Create JWT token for an account.

        Args:
            account_id: Account ID
            account_type: Kind of identity used to authenticate

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", account_id=str(account_id)):
            token = create_token(
                str(account_id), account_type.value, self.auth_settings
            )
            logfire.info("JWT token created", account_id=str(account_id))
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("JWT token rejected", error=str(e))
                raise
            logfire.debug("JWT token verified", account_id=payload.account_id)
            return payload
