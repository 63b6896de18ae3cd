# myroutine/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from myroutine.services._shared.ports.token_provider import TokenPair
from myroutine.services.users.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for local registration.

    :param email: User email (normalized by the model).
    :param password: Raw password, hashed before storage.
    """

    email: str
    password: str
    name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :param password: Raw password (to be verified).
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class PasswordResetIn:
    token: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Result of a successful authorization.

    :param user: Profile of the authorized user.
    :param tokens: Fresh token pair to set as cookies.
    :param created: ``True`` when the credential record was created by this
        call (HTTP 201), ``False`` when an existing one was overwritten (200).
    """

    user: UserOut
    tokens: TokenPair
    created: bool
