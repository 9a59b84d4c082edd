"""Verification email delivery.

HttpEmailSender posts to a SendGrid-style v3 mail endpoint.
"""

import httpx
import logfire

from interspace.adapter.error import EmailDeliveryError
from interspace.domain.service.email import EmailSender


class HttpEmailSender(EmailSender):
    """Email sender backed by a transactional mail HTTP API."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        from_address: str,
        timeout: float = 10.0,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout

    async def send_verification_code(self, email: str, code: str) -> None:
        """Send the code in a plain-text message.

        Raises:
            EmailDeliveryError: If no API key is configured or the call fails
        """
        if not self.api_key:
            raise EmailDeliveryError("Email delivery is not configured")

        payload = {
            "personalizations": [{"to": [{"email": email}]}],
            "from": {"email": self.from_address},
            "subject": "Your Interspace verification code",
            "content": [
                {
                    "type": "text/plain",
                    "value": f"Your verification code is {code}. "
                    "It expires in 10 minutes.",
                }
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url, json=payload, headers=headers
                )
        except httpx.HTTPError as e:
            logfire.error("Email HTTP error", error=str(e))
            raise EmailDeliveryError(f"HTTP error sending email: {e}")

        if response.status_code >= 300:
            logfire.error(
                "Email delivery failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise EmailDeliveryError(
                f"Email delivery failed: {response.status_code}"
            )

        logfire.info("Verification email sent")


class MockEmailSender(EmailSender):
    """Mock sender keeping every code it was asked to deliver."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send_verification_code(self, email: str, code: str) -> None:
        self.sent.append((email, code))

    def last_code(self, email: str) -> str | None:
        """Most recent code sent to email, if any."""
        for recipient, code in reversed(self.sent):
            if recipient == email:
                return code
        return None
