"""Outbound email interface for verification codes."""


class EmailSender:
    """Delivers verification codes to email addresses."""

    async def send_verification_code(self, email: str, code: str) -> None:
        """Mail a sign-in or link verification code.

        Args:
            email: Recipient address
            code: Plaintext code the recipient echoes back
        """
        raise NotImplementedError
