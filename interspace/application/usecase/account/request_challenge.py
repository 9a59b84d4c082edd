"""Request identity challenge use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from interspace.domain.service import IdentityProofService
from interspace.domain.value import AccountType


class RequestChallengeRequest(BaseModel):
    """Request a proof-of-control challenge for a wallet or email."""

    account_type: AccountType
    identifier: str


class RequestChallengeResponse(BaseModel):
    """Issued challenge.

    message is the text a wallet signs; it is None for email challenges,
    whose code is only ever sent to the mailbox.
    """

    challenge_id: str
    account_type: AccountType
    message: str | None
    expires_at: datetime


class RequestChallengeUseCase:
    """Use case for starting a wallet or email sign-in."""

    def __init__(self, identity_proof_service: IdentityProofService) -> None:
        self.identity_proof_service = identity_proof_service

    async def execute(
        self, request: RequestChallengeRequest
    ) -> RequestChallengeResponse:
        with logfire.span(
            "request_challenge.execute", account_type=request.account_type.value
        ):
            challenge = await self.identity_proof_service.issue_challenge(
                request.account_type, request.identifier
            )
            return RequestChallengeResponse(
                challenge_id=str(challenge.id),
                account_type=challenge.account_type,
                message=challenge.message,
                expires_at=challenge.expires_at,
            )
