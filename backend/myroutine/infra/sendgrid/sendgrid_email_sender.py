# myroutine/infra/sendgrid/sendgrid_email_sender.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import requests

from myroutine.services._shared.errors import ExternalServiceError
from myroutine.services._shared.ports.email_sender import EmailMessage, EmailSender

SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridEmailSender(EmailSender):
    """Deliver transactional mail through SendGrid's v3 ``mail/send`` endpoint."""

    def __init__(self, *, api_key: str, sender: str, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SendGridEmailSender:
        return cls(
            api_key=config.get("SENDGRID_API_KEY", ""),
            sender=config.get("EMAIL_FROM", ""),
            timeout=float(config.get("HTTP_TIMEOUT", 10)),
        )

    def send(self, message: EmailMessage) -> None:
        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": self.sender},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            r = requests.post(SEND_URL, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ExternalServiceError("email", "request failed") from exc
        # SendGrid answers 202 Accepted on success.
        if r.status_code < 200 or r.status_code >= 300:
            raise ExternalServiceError("email", f"HTTP {r.status_code}")
