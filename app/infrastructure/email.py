"""Resend e-mail client: delivers password recovery codes.

Single attempt per message: a failure is logged and raised so the
request ends with a 500, no retry.
"""

import logging
from typing import Dict

import resend

from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The e-mail provider rejected or failed to accept a message."""


class ResendEmailClient:
    """Thin wrapper around the Resend SDK."""

    def __init__(self, api_key: str | None = None, sender: str | None = None):
        self.api_key = (api_key if api_key is not None else settings.RESEND_API_KEY).strip()
        self.sender = sender or settings.EMAIL_FROM

    def send(self, to: str, subject: str, html: str, text: str | None = None) -> str:
        """Send one message and return the provider id."""
        if not self.api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")

        payload: Dict[str, object] = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        resend.api_key = self.api_key
        try:
            response = resend.Emails.send(payload)
        except Exception as e:
            logger.error(f"Resend failed to send '{subject}' to {to}: {e}")
            raise EmailDeliveryError(str(e)) from e

        message_id = response.get("id") if isinstance(response, dict) else None
        if not message_id:
            logger.error(f"Resend returned an unexpected response for {to}: {response}")
            raise EmailDeliveryError(f"Unexpected response: {response}")

        logger.info(f"E-mail '{subject}' sent to {to} (id={message_id})")
        return message_id

    def send_recovery_code(self, to: str, name: str, code: str, expires_minutes: int) -> str:
        html = (
            f"<p>Olá {name},</p>"
            f"<p>Seu código de recuperação é: <strong>{code}</strong></p>"
            f"<p>Este código é válido por {expires_minutes} minutos.</p>"
        )
        text = f"Seu código de recuperação é {code}. Válido por {expires_minutes} minutos."
        return self.send(to, "Código de Recuperação de Senha", html, text)
