"""Authorization nonce source interface."""

from interspace.domain.value import EthAddress


class NonceProvider:
    """Supplies the nonce a delegating EOA signs over."""

    async def next_nonce(self, address: EthAddress, chain_id: int) -> int:
        """Get the next authorization nonce for an address.

        Args:
            address: Delegating EOA
            chain_id: Chain the authorization targets

        Returns:
            Nonce, strictly greater than any previously issued for the address
            unless the chain itself reports otherwise
        """
        raise NotImplementedError
