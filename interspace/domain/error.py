"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found.

    Ownership failures raise this error too, so callers cannot tell
    "does not exist" apart from "not yours".
    """

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state.

    Duplicate open delegations, circular identity links and double
    revocations all end up here.
    """

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Bad signatures, expired delegations and permission denials.
    """

    pass


class AuthorizationError(DomainError):
    """Coarse access-control failure (e.g. missing caller session)."""

    pass


class IdentityProofError(DomainError):
    """Caller failed to prove control of a wallet, email or upstream identity."""

    pass
