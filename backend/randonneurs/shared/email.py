"""
Transactional email sender.

Sends mail through the SendGrid v3 HTTP API. Callers that loop over
recipients catch `EmailDeliveryError` per recipient.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from randonneurs.config import settings
from .errors import EmailDeliveryError

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    subject: str
    text: str
    html: Optional[str] = None


class EmailSender:
    """
    Async email sender.

    Disabled (every send skipped) when SENDGRID_API_KEY is not set.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        from_email: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key if api_key is not None else settings.sendgrid_api_key
        self.api_url = api_url or settings.sendgrid_api_url
        self.from_email = from_email or settings.email_from
        self.timeout = timeout
        self._enabled = bool(self.api_key)

        if not self._enabled:
            logger.info("EmailSender disabled: SENDGRID_API_KEY not set")

    @property
    def enabled(self) -> bool:
        """Check if sender is configured."""
        return self._enabled

    async def send(
        self,
        to: str,
        message: EmailMessage,
        from_email: Optional[str] = None,
    ) -> bool:
        """
        Send one email.

        Args:
            to: Recipient address
            message: Subject and bodies
            from_email: Overrides the configured sender

        Returns:
            True if sent, False if sending is disabled

        Raises:
            EmailDeliveryError: API rejected the message or was unreachable
        """
        if not self._enabled:
            logger.warning(f"Email not configured, skipping email to {to}")
            return False

        content = [{"type": "text/plain", "value": message.text}]
        if message.html:
            content.append({"type": "text/html", "value": message.html})

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": from_email or self.from_email},
            "subject": message.subject,
            "content": content,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.TimeoutException:
            raise EmailDeliveryError(f"Timeout sending email to {to}")
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Failed to send email to {to}: {e}")

        if response.status_code >= 300:
            logger.warning(
                f"Email API error: {response.status_code} - {response.text}"
            )
            raise EmailDeliveryError(
                f"Failed to send email to {to}: HTTP {response.status_code}"
            )

        logger.debug(f"Email sent to {to}")
        return True


# Global instance (lazy initialization)
_sender: Optional[EmailSender] = None


def get_email_sender() -> EmailSender:
    """Get or create global EmailSender instance."""
    global _sender
    if _sender is None:
        _sender = EmailSender()
    return _sender
