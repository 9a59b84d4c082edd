"""Session wallet service client.

The session wallet service holds the custodial signer of every profile.
This client creates wallets, relays delegated transactions and submits
signed authorizations over its HTTP API.
"""

import hashlib
from typing import Any

import httpx
import logfire

from interspace.adapter.error import SessionWalletError
from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.service.session_wallet import SessionWalletClient
from interspace.domain.value import AccountId, EthAddress, ProfileId


class HttpSessionWalletClient(SessionWalletClient):
    """Session wallet client talking to the signer service over HTTP."""

    def __init__(
        self, base_url: str, api_key: str | None = None, timeout: float = 30.0
    ) -> None:
        """Initialize session wallet client.

        Args:
            base_url: Session wallet service base URL
            api_key: Service API key, sent as X-API-Key
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def create_session_wallet(self, owner_account_id: AccountId) -> EthAddress:
        """Create a session wallet for a new profile.

        Args:
            owner_account_id: Account the profile is created for

        Returns:
            Address of the new session wallet

        Raises:
            SessionWalletError: If the service call fails
        """
        result = await self._post(
            "/session-wallets", {"owner_account_id": str(owner_account_id)}
        )
        return EthAddress(result["address"])

    async def execute_transaction_with_delegation(
        self,
        profile_id: ProfileId,
        delegator_address: EthAddress,
        to: EthAddress,
        value: int,
        data: str,
        chain_id: int,
    ) -> str:
        """Relay a delegated transaction through the profile's session wallet.

        Raises:
            SessionWalletError: If the service call fails
        """
        result = await self._post(
            "/transactions/delegated",
            {
                "profile_id": str(profile_id),
                "delegator_address": delegator_address.root,
                "to": to.root,
                "value": str(value),
                "data": data,
                "chain_id": chain_id,
            },
        )
        return result["hash"]

    async def submit_authorization(
        self, profile_id: ProfileId, delegation: AccountDelegation
    ) -> str:
        """Submit a signed authorization for on-chain activation.

        Raises:
            SessionWalletError: If the service call fails or the delegation
                is unsigned
        """
        if delegation.signature is None:
            raise SessionWalletError("Cannot submit an unsigned authorization")

        result = await self._post(
            "/authorizations",
            {
                "profile_id": str(profile_id),
                "authorization": {
                    **delegation.authorization_data.to_json(),
                    **delegation.signature.model_dump(),
                },
            },
        )
        return result["hash"]

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST JSON to the service and return the decoded body.

        Raises:
            SessionWalletError: On transport errors or non-2xx responses
        """
        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logfire.error("Session wallet HTTP error", path=path, error=str(e))
            raise SessionWalletError(f"HTTP error calling session wallet: {e}")

        if response.status_code >= 300:
            logfire.error(
                "Session wallet request failed",
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise SessionWalletError(
                f"Session wallet request failed: {response.status_code}"
            )

        return response.json()


class MockSessionWalletClient(SessionWalletClient):
    """Mock session wallet client for testing.

    Returns deterministic addresses and hashes and records every call.
    """

    def __init__(self) -> None:
        """Initialize mock client without a service connection."""
        self.executed: list[dict[str, Any]] = []
        self.submitted: list[AccountDelegation] = []

    async def create_session_wallet(self, owner_account_id: AccountId) -> EthAddress:
        """Derive a stable fake wallet address from the owner."""
        digest = hashlib.sha256(f"session:{owner_account_id}".encode()).digest()
        return EthAddress("0x" + digest[:20].hex())

    async def execute_transaction_with_delegation(
        self,
        profile_id: ProfileId,
        delegator_address: EthAddress,
        to: EthAddress,
        value: int,
        data: str,
        chain_id: int,
    ) -> str:
        """Record the call and return a fake transaction hash."""
        self.executed.append(
            {
                "profile_id": profile_id,
                "delegator_address": delegator_address,
                "to": to,
                "value": value,
                "data": data,
                "chain_id": chain_id,
            }
        )
        return self._fake_hash(f"tx:{len(self.executed)}:{profile_id}")

    async def submit_authorization(
        self, profile_id: ProfileId, delegation: AccountDelegation
    ) -> str:
        """Record the delegation and return a fake transaction hash."""
        self.submitted.append(delegation)
        return self._fake_hash(f"auth:{delegation.id}")

    @staticmethod
    def _fake_hash(seed: str) -> str:
        return "0x" + hashlib.sha256(seed.encode()).hexdigest()
