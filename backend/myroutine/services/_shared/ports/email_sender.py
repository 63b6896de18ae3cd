from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from myroutine.services._shared.errors import ExternalServiceError


@dataclass(frozen=True, slots=True)
class EmailMessage:
    to: str
    subject: str
    html: str


class EmailSender(Protocol):
    """Port for transactional mail. Raises ``ExternalServiceError`` on failure."""

    def send(self, message: EmailMessage) -> None: ...


class InMemoryEmailSender(EmailSender):
    """Collects sent messages in ``outbox`` instead of delivering them."""

    def __init__(self, *, fail: bool = False) -> None:
        self.outbox: list[EmailMessage] = []
        self.fail = fail

    def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise ExternalServiceError("email", "delivery rejected")
        self.outbox.append(message)
