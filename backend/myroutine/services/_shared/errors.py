"""
Domain-level exceptions used within the service layer.

These exceptions are framework-agnostic and never depend on Flask or HTTP.
The translation to HTTP responses is handled by
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found for the acting user.

    :param entity: Entity name (e.g., "Exercise").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthenticationError(ServiceError):
    """
    Raised when a request cannot be associated with a user.

    The message is internal (logged, never sent to clients); the HTTP layer
    always answers with a generic "Invalid authorization".
    """

    def __init__(self, reason: str = "invalid authorization") -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidCredentialsError(AuthenticationError):
    """Login attempt with an unknown email or a wrong password."""

    def __init__(self) -> None:
        super().__init__("Email or password are incorrect")


class TokenError(ServiceError):
    """Base class for token verification failures."""


class InvalidSignatureError(TokenError):
    """Malformed token, bad signature, wrong secret or wrong token type."""


class TokenExpiredError(TokenError):
    """Well-formed token whose ``exp`` lies in the past."""


@dataclass(slots=True, eq=False)
class PersistenceError(ServiceError):
    """
    Raised when a store operation inside a multi-step operation fails.

    :param step: Name of the step that failed.
    :param completed: Steps that had completed before the failure; all of
        them were rolled back.
    """

    step: str
    completed: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Persistence failure at step '{self.step}'"


@dataclass(slots=True, eq=False)
class ExternalServiceError(ServiceError):
    """
    Raised when an external collaborator (image store, mail, OAuth) fails.

    :param service: Collaborator name, e.g. ``"image_store"``.
    :param detail: Short explanation.
    """

    service: str
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.service} failed: {self.detail}" if self.detail else f"{self.service} failed"
