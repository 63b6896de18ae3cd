"""
Ports (hexagonal interfaces) for the collaborators the services depend on.

Concrete adapters live under ``myroutine.infra``; in-memory doubles used by
the testing configuration live next to each port.
"""

from __future__ import annotations

from .email_sender import EmailMessage, EmailSender, InMemoryEmailSender
from .image_store import ImageStore, InMemoryImageStore, StoredImage
from .oauth_provider import OAuthProfile, OAuthProvider
from .token_provider import ResetToken, TokenPair, TokenProvider

__all__ = [
    "EmailMessage",
    "EmailSender",
    "ImageStore",
    "InMemoryEmailSender",
    "InMemoryImageStore",
    "OAuthProfile",
    "OAuthProvider",
    "ResetToken",
    "StoredImage",
    "TokenPair",
    "TokenProvider",
]
