"""User account, authentication and session endpoints."""

from __future__ import annotations

import secrets

from flask import Blueprint, current_app, g, redirect, request, session

from myroutine.api.deps import (
    clear_auth_cookies,
    require_session,
    service_context,
    set_auth_cookies,
    success,
    timing,
)
from myroutine.core.errors import APIError, Unauthorized
from myroutine.core.extensions import (
    get_email_sender,
    get_image_store,
    get_oauth_provider,
    get_token_provider,
)
from myroutine.schemas import (
    FeedbackCreateSchema,
    FeedbackSchema,
    ForgotPasswordSchema,
    LoginSchema,
    MessageSchema,
    RegisterSchema,
    ResetPasswordSchema,
    UserSchema,
    UserUpdateSchema,
)
from myroutine.services.auth.dto import AuthOut, LoginIn, PasswordResetIn, RegisterIn
from myroutine.services.auth.service import AuthService
from myroutine.services.cascade.service import AggregateDeletionService
from myroutine.services.session.dto import LogoutIn
from myroutine.services.session.service import SessionService
from myroutine.services.users.dto import PhotoUpload
from myroutine.services.users.service import UserService

bp = Blueprint("users", __name__)

OAUTH_STATE_KEY = "google_oauth_state"

register_schema = RegisterSchema()
login_schema = LoginSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
user_schema = UserSchema()
user_update_schema = UserUpdateSchema()
feedback_create_schema = FeedbackCreateSchema()
feedback_schema = FeedbackSchema()
message_schema = MessageSchema()


def _auth_service() -> AuthService:
    cfg = current_app.config
    return AuthService(
        token_provider=get_token_provider(),
        email_sender=get_email_sender(),
        oauth_provider=get_oauth_provider(),
        image_store=get_image_store(),
        frontend_url=cfg["FRONTEND_URL"],
        default_profile_photo=(cfg["DEFAULT_PROFILE_PHOTO_ID"], cfg["DEFAULT_PROFILE_PHOTO_URL"]),
        ctx=service_context(),
    )


def _user_service() -> UserService:
    return UserService(
        image_store=get_image_store(),
        default_profile_photo_id=current_app.config["DEFAULT_PROFILE_PHOTO_ID"],
        ctx=service_context(),
    )


def _authorized_response(out: AuthOut):
    response = success(user_schema.dump(out.user), status=201 if out.created else 200)
    return set_auth_cookies(response, out.tokens)


# --------------------------------------------------------------------------- #
# Registration and login
# --------------------------------------------------------------------------- #


@bp.post("")
@timing
def register():
    """Create an account and start its session."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    out = _auth_service().register(RegisterIn(**payload))
    return _authorized_response(out)


@bp.post("/credentials")
@timing
def login():
    """Check email and password and start a session."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    out = _auth_service().login(LoginIn(**payload))
    return _authorized_response(out)


@bp.get("/google")
@timing
def google_login():
    """Redirect to Google's consent screen."""

    state = secrets.token_urlsafe(24)
    session[OAUTH_STATE_KEY] = state
    return redirect(_auth_service().google_authorization_url(state))


@bp.get("/google/redirect")
@timing
def google_callback():
    """Complete the Google sign-in and send the browser to the dashboard."""

    expected = session.pop(OAUTH_STATE_KEY, None)
    if not expected or not secrets.compare_digest(expected, request.args.get("state", "")):
        raise Unauthorized()
    code = request.args.get("code")
    if not code:
        raise APIError("Missing authorization code")

    out = _auth_service().google_login(code)
    frontend = current_app.config["FRONTEND_URL"].rstrip("/")
    return set_auth_cookies(redirect(f"{frontend}/dashboard"), out.tokens)


# --------------------------------------------------------------------------- #
# Password reset
# --------------------------------------------------------------------------- #


@bp.post("/forgot_password")
@timing
def forgot_password():
    payload = forgot_schema.load(request.get_json(silent=True) or {})
    _auth_service().forgot_password(payload["email"])
    return success(message_schema.dump({"message": "Reset password email sent"}))


@bp.put("/reset_password/<string:token>")
@timing
def reset_password(token: str):
    payload = reset_schema.load(request.get_json(silent=True) or {})
    _auth_service().reset_password(PasswordResetIn(token=token, password=payload["password"]))
    return success(message_schema.dump({"message": "Password updated"}))


# --------------------------------------------------------------------------- #
# Authenticated profile
# --------------------------------------------------------------------------- #


@bp.get("")
@require_session
@timing
def get_user():
    return success(user_schema.dump(_user_service().get_profile()))


@bp.get("/is_logged_in")
@require_session
@timing
def is_logged_in():
    return success(message_schema.dump({"message": "is_logged_in"}))


@bp.put("")
@require_session
@timing
def update_user():
    """
    Update profile fields. Accepts JSON, or multipart form data with an
    optional ``photo`` file replacing the profile photo.
    """

    if request.mimetype == "multipart/form-data":
        raw = request.form.to_dict()
        upload = request.files.get("photo")
        photo = PhotoUpload(content=upload.read(), filename=upload.filename) if upload else None
    else:
        raw = request.get_json(silent=True) or {}
        photo = None
    fields = user_update_schema.load(raw)
    out = _user_service().update_profile(fields, photo=photo)
    return success(user_schema.dump(out))


@bp.post("/feedback")
@require_session
@timing
def add_feedback():
    payload = feedback_create_schema.load(request.get_json(silent=True) or {})
    out = _user_service().add_feedback(payload["comment"])
    return success(feedback_schema.dump(out), status=201)


@bp.delete("/credentials")
@require_session
@timing
def logout():
    """Invalidate the session tokens and clear the cookies."""

    tokens = g.live_tokens
    SessionService(token_provider=get_token_provider(), ctx=service_context()).logout(
        LogoutIn(
            user_id=g.user_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )
    )
    g.session_closed = True
    return clear_auth_cookies(success(message_schema.dump({"message": "Logged out"})))


@bp.delete("")
@require_session
@timing
def delete_user():
    """Delete the account and everything it owns."""

    report = AggregateDeletionService(
        image_store=get_image_store(),
        default_profile_photo_id=current_app.config["DEFAULT_PROFILE_PHOTO_ID"],
        ctx=service_context(),
    ).delete_user(g.user_id)
    g.session_closed = True
    return clear_auth_cookies(success({"message": "User deleted", "deleted": report.deleted}))
