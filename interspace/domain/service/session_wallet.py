"""Session wallet collaborator interface.

The session wallet is a custodial signer owned by the profile. Key
handling and MPC signing happen on the other side of this interface.
"""

from interspace.domain.model.delegation import AccountDelegation
from interspace.domain.value import AccountId, EthAddress, ProfileId


class SessionWalletClient:
    """Client for the service that signs and relays session wallet transactions."""

    async def create_session_wallet(self, owner_account_id: AccountId) -> EthAddress:
        """Create the custodial wallet of a new profile.

        Args:
            owner_account_id: Account the profile is created for

        Returns:
            Address of the new session wallet
        """
        raise NotImplementedError

    async def execute_transaction_with_delegation(
        self,
        profile_id: ProfileId,
        delegator_address: EthAddress,
        to: EthAddress,
        value: int,
        data: str,
        chain_id: int,
    ) -> str:
        """Send a transaction on behalf of a delegating EOA.

        Args:
            profile_id: Profile owning the session wallet
            delegator_address: Linked EOA the transaction acts for
            to: Destination address
            value: Amount in wei
            data: Hex-encoded call data ("0x" for plain transfers)
            chain_id: Chain to send on

        Returns:
            Transaction hash
        """
        raise NotImplementedError

    async def submit_authorization(
        self, profile_id: ProfileId, delegation: AccountDelegation
    ) -> str:
        """Submit a signed authorization on chain.

        Args:
            profile_id: Profile owning the session wallet
            delegation: Signed delegation to activate

        Returns:
            Transaction hash of the authorization submission
        """
        raise NotImplementedError
