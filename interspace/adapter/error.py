"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class SessionWalletError(AdapterError):
    """Session wallet service call failed."""

    pass


class NonceSourceError(AdapterError):
    """Chain nonce could not be fetched."""

    pass


class EmailDeliveryError(AdapterError):
    """Verification email could not be sent."""

    pass
