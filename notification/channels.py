#!/usr/bin/env python3
"""
Email Delivery Channels

One delivery interface with two implementations, selected once at startup:
- ResendEmailChannel: sends through the Resend HTTP API
- SimulatedEmailChannel: logs the email and reports success without any
  network call (local/dev, when no API key is configured)

Usage:
    from notification.channels import build_email_channel

    channel = build_email_channel(config.email)
    result = channel.send('donor@example.com', rendered_email)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

import requests

from notification.exceptions import DeliveryError
from notification.models import RenderedEmail

logger = logging.getLogger(__name__)

RESEND_API_URL = 'https://api.resend.com/emails'
DEFAULT_FROM_ADDRESS = 'ClearCause <noreply@clearcause.org>'

MODE_RESEND = 'resend'
MODE_SIMULATED = 'simulated'


def _mask_email(email: str) -> str:
    """
    Mask email address for safe logging (PII protection).

    Shows only domain, e.g., "***@example.com"
    """
    if '@' not in email:
        return "***"
    local, domain = email.rsplit('@', 1)
    return f"***@{domain}"


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single delivery attempt."""
    success: bool
    simulated: bool = False
    message_id: Optional[str] = None
    error: Optional[DeliveryError] = None


class EmailChannel(ABC):
    """
    Abstract base class for email delivery.

    Implementations must not raise on gateway failures; they report them
    through DeliveryResult so the pipeline can record "not sent".
    """

    @property
    @abstractmethod
    def mode(self) -> str:
        """Return the delivery mode identifier (for logs and health checks)."""
        pass

    @abstractmethod
    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        """
        Deliver a rendered email to one recipient.

        Args:
            recipient: Destination email address
            email: Rendered subject, HTML body and text body

        Returns:
            DeliveryResult describing the attempt
        """
        pass


class ResendEmailChannel(EmailChannel):
    """Email delivery via the Resend REST API."""

    def __init__(
        self,
        api_key: str,
        from_address: str = DEFAULT_FROM_ADDRESS,
        api_url: str = RESEND_API_URL,
        timeout: float = 30
    ):
        if not api_key:
            raise ValueError("Resend API key is required")
        self.api_key = api_key
        self.from_address = from_address
        self.api_url = api_url
        self.timeout = timeout

    @property
    def mode(self) -> str:
        return MODE_RESEND

    def build_payload(self, recipient: str, email: RenderedEmail) -> Dict[str, Any]:
        return {
            'from': self.from_address,
            'to': [recipient],
            'subject': email.subject,
            'html': email.html_body,
            'text': email.text_body,
        }

    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
        }

        logger.info(f"Sending email to {_mask_email(recipient)}: {email.subject}")

        try:
            response = requests.post(
                self.api_url,
                json=self.build_payload(recipient, email),
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Failed to reach Resend API for {_mask_email(recipient)}: {e}")
            return DeliveryResult(success=False, error=DeliveryError(f"Transport error: {e}"))

        body = self._parse_body(response)

        if 200 <= response.status_code < 300:
            message_id = body.get('id') if isinstance(body, dict) else None
            logger.info(f"Email sent via Resend to {_mask_email(recipient)} (id={message_id})")
            return DeliveryResult(success=True, message_id=message_id)

        logger.error(f"Resend API error: {response.status_code} - {body}")
        return DeliveryResult(
            success=False,
            error=DeliveryError(
                f"Resend API returned {response.status_code}",
                status_code=response.status_code,
                details=body
            )
        )

    @staticmethod
    def _parse_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text


class SimulatedEmailChannel(EmailChannel):
    """Logs emails instead of sending them. Always succeeds."""

    def __init__(self, from_address: str = DEFAULT_FROM_ADDRESS):
        self.from_address = from_address

    @property
    def mode(self) -> str:
        return MODE_SIMULATED

    def send(self, recipient: str, email: RenderedEmail) -> DeliveryResult:
        logger.info("[SIMULATED] RESEND_API_KEY not set, simulating email send")
        logger.info(f"[SIMULATED] To: {_mask_email(recipient)} Subject: {email.subject}")
        logger.info(f"[SIMULATED] --- EMAIL CONTENT ---\n{email.text_body}\n---------------------")
        return DeliveryResult(success=True, simulated=True)


def build_email_channel(email_config) -> EmailChannel:
    """
    Select the delivery channel for this process.

    Args:
        email_config: EmailConfig with resend_api_key, from_address, api_url
            and timeout_seconds
    """
    if email_config.resend_api_key:
        logger.info("Email delivery mode: resend")
        return ResendEmailChannel(
            api_key=email_config.resend_api_key,
            from_address=email_config.from_address,
            api_url=email_config.api_url,
            timeout=email_config.timeout_seconds
        )

    logger.warning("RESEND_API_KEY not configured - email delivery runs in simulation mode")
    return SimulatedEmailChannel(from_address=email_config.from_address)
