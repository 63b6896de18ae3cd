# myroutine/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from myroutine.models.user import User
from myroutine.services._shared.base import BaseService, ServiceContext
from myroutine.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    TokenError,
)
from myroutine.services._shared.ports.email_sender import EmailMessage, EmailSender
from myroutine.services._shared.ports.image_store import ImageStore
from myroutine.services._shared.ports.oauth_provider import OAuthProvider
from myroutine.services._shared.ports.token_provider import TokenPair, TokenProvider
from myroutine.services.auth.dto import AuthOut, LoginIn, PasswordResetIn, RegisterIn
from myroutine.services.users.dto import UserOut
from myroutine.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Credential lifecycle: registration, login, Google sign-in and password reset.

    Every successful sign-in goes through :meth:`_authorize`, which mints a
    new token pair and overwrites (or creates) the user's credential record,
    so at most one refresh token per user is ever live.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        email_sender: EmailSender | None = None,
        oauth_provider: OAuthProvider | None = None,
        image_store: ImageStore | None = None,
        frontend_url: str = "",
        default_profile_photo: tuple[str, str] | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param default_profile_photo: ``(external_id, url)`` assigned to new
            accounts that bring no picture of their own.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.mailer = email_sender
        self.oauth = oauth_provider
        self.images = image_store
        self.frontend_url = frontend_url.rstrip("/")
        self.default_profile_photo = default_profile_photo

    # ------------------------------------------------------------------ #
    # Register / login
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthOut:
        """
        Create a local account and sign it in.

        :raises ConflictError: When the email is already registered.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise ConflictError("User", "email already registered")
                user = User(email=dto.email, name=dto.name, last_name=dto.last_name)
                user.password = dto.password
                self._apply_default_photo(user)
                uow.users.add(user)
                user_id = user.id
                tokens, created = self._authorize(uow, user.id)
                out = AuthOut(user=UserOut.from_model(user), tokens=tokens, created=created)
        except IntegrityError as ie:
            raise ConflictError("User", "email already registered") from ie

        log.info("User registered", extra={"user_id": user_id})
        return out

    def login(self, dto: LoginIn) -> AuthOut:
        """
        :raises InvalidCredentialsError: On unknown email or wrong password.
        """
        with self.rw_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                raise InvalidCredentialsError()
            tokens, created = self._authorize(uow, user.id)
            return AuthOut(user=UserOut.from_model(user), tokens=tokens, created=created)

    # ------------------------------------------------------------------ #
    # Google
    # ------------------------------------------------------------------ #

    def google_authorization_url(self, state: str) -> str:
        return self._require_oauth().authorization_url(state)

    def google_login(self, code: str) -> AuthOut:
        """
        Exchange an OAuth code, creating the account on first sign-in.

        :raises ExternalServiceError: When Google rejects the exchange.
        """
        profile = self._require_oauth().exchange_code(code)

        with self.rw_uow() as uow:
            user = uow.users.get_by_email(profile.email)
            if user is None:
                user = User(
                    email=profile.email,
                    name=profile.given_name,
                    last_name=profile.family_name,
                )
                self._apply_google_photo(user, profile.picture)
                uow.users.add(user)
                log.info("User created from Google profile", extra={"user_id": user.id})
            tokens, created = self._authorize(uow, user.id)
            return AuthOut(user=UserOut.from_model(user), tokens=tokens, created=created)

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def forgot_password(self, email: str) -> None:
        """
        Store a reset token for ``email`` and mail the reset link.

        The refresh token in the credential record is preserved.

        :raises NotFoundError: When no account uses ``email``.
        :raises ExternalServiceError: When the mail cannot be sent; nothing
            is stored in that case.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                raise NotFoundError("User", email)
            user_id = user.id
            reset = self.tokens.issue_password_reset_token(user.id)
            credential = uow.credentials.find_by_user(user.id)
            if credential is None:
                uow.credentials.create(
                    user.id,
                    reset_password_token=reset.token,
                    reset_password_token_expires_at=reset.expires_at,
                )
            else:
                uow.credentials.update(
                    user.id,
                    refresh_token=credential.refresh_token,
                    reset_password_token=reset.token,
                    reset_password_token_expires_at=reset.expires_at,
                )
            self._require_mailer().send(
                EmailMessage(
                    to=user.email,
                    subject="Reset your password",
                    html=(
                        "<p>Use the link below to choose a new password. "
                        "It is valid for 10 minutes.</p>"
                        f'<p><a href="{self.frontend_url}/reset_password/{reset.token}">'
                        "Reset password</a></p>"
                    ),
                )
            )
        log.info("Password reset requested", extra={"user_id": user_id})

    def reset_password(self, dto: PasswordResetIn) -> None:
        """
        Set a new password using a stored, unexpired reset token.

        :raises AuthenticationError: When the token does not verify or does
            not match the stored one.
        :raises ServiceError: When the stored expiry has passed.
        """
        try:
            claims = self.tokens.verify_password_reset(dto.token)
        except TokenError as exc:
            raise AuthenticationError(f"reset token rejected: {exc}") from exc
        user_id = int(claims["id_user"])

        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            credential = uow.credentials.find_by_user(user_id)
            if user is None or credential is None or credential.reset_password_token != dto.token:
                raise AuthenticationError("reset token does not match stored credential")

            expires_at = credential.reset_password_token_expires_at
            if expires_at is not None and expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=UTC)
            if expires_at is None or expires_at <= datetime.now(UTC):
                raise ServiceError("Reset password token expired")

            uow.users.update_password(user, dto.password)
            uow.credentials.update(
                user_id,
                refresh_token=credential.refresh_token,
                reset_password_token=None,
                reset_password_token_expires_at=None,
            )
        log.info("Password reset", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _authorize(self, uow: SQLAlchemyUnitOfWork, user_id: int) -> tuple[TokenPair, bool]:
        tokens = self.tokens.issue_tokens(user_id)
        credential = uow.credentials.find_by_user(user_id)
        if credential is None:
            uow.credentials.create(user_id, refresh_token=tokens.refresh_token)
            return tokens, True
        uow.credentials.update(
            user_id,
            refresh_token=tokens.refresh_token,
            reset_password_token=credential.reset_password_token,
            reset_password_token_expires_at=credential.reset_password_token_expires_at,
        )
        return tokens, False

    def _apply_default_photo(self, user: User) -> None:
        if self.default_profile_photo is not None:
            user.profile_photo_public_id, user.profile_photo_url = self.default_profile_photo

    def _apply_google_photo(self, user: User, picture: str | None) -> None:
        if picture and self.images is not None:
            try:
                stored = self.images.upload(picture)
            except ExternalServiceError as exc:
                log.warning("Google picture not imported", extra={"reason": str(exc)})
            else:
                user.profile_photo_public_id = stored.external_id
                user.profile_photo_url = stored.url
                return
        self._apply_default_photo(user)

    def _require_oauth(self) -> OAuthProvider:
        if self.oauth is None:
            raise RuntimeError("AuthService requires an OAuth provider for Google sign-in.")
        return self.oauth

    def _require_mailer(self) -> EmailSender:
        if self.mailer is None:
            raise RuntimeError("AuthService requires an email sender for password reset.")
        return self.mailer
