# tests/unit/services/test_session_service.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from myroutine.infra.jwt.jwt_token_provider import JWTTokenProvider
from myroutine.models.credential import Credential, InvalidToken
from myroutine.services._shared.errors import AuthenticationError
from myroutine.services.session.dto import LogoutIn, SessionIn
from myroutine.services.session.service import SessionService
from tests.factories.user import CredentialFactory, InvalidTokenFactory, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def tokens() -> JWTTokenProvider:
    return JWTTokenProvider(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        access_expires=timedelta(seconds=120),
    )


@pytest.fixture()
def service(tokens) -> SessionService:
    return SessionService(token_provider=tokens)


def _signed_in(tokens, session):
    """Persist a user whose credential holds a freshly issued refresh token."""
    user = UserFactory()
    pair = tokens.issue_tokens(user.id)
    CredentialFactory(user_id=user.id, refresh_token=pair.refresh_token)
    session.commit()
    return user, pair


def _ledger(session) -> set[str]:
    return {row.token for row in session.query(InvalidToken).all()}


def _stored_refresh(session, user_id: int) -> str | None:
    session.expire_all()
    return session.query(Credential).filter_by(user_id=user_id).one().refresh_token


# -------------------------------- Tests ----------------------------------- #
def test_missing_refresh_token_rejected_before_any_store_access(service, tokens, monkeypatch):
    def _no_store():
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(service, "ro_uow", _no_store)
    monkeypatch.setattr(service, "rw_uow", _no_store)
    pair = tokens.issue_tokens(1)

    with pytest.raises(AuthenticationError, match="missing refresh token"):
        service.authenticate(SessionIn(access_token=pair.access_token))
    with pytest.raises(AuthenticationError):
        service.authenticate(SessionIn())


def test_valid_access_token_accepted_without_renewal(service, tokens, session):
    user, pair = _signed_in(tokens, session)

    out = service.authenticate(SessionIn(pair.access_token, pair.refresh_token))

    assert out.user_id == user.id
    assert out.renewed is None
    assert _ledger(session) == set()


def test_repeated_authentication_on_one_session(service, tokens, session):
    user, pair = _signed_in(tokens, session)
    presented = SessionIn(pair.access_token, pair.refresh_token)

    first = service.authenticate(presented)
    second = service.authenticate(presented)

    assert first.user_id == second.user_id == user.id
    assert second.renewed is None


@pytest.mark.parametrize("burned", ["access", "refresh"])
def test_ledgered_token_rejected(service, tokens, session, burned):
    user, pair = _signed_in(tokens, session)
    token = pair.access_token if burned == "access" else pair.refresh_token
    InvalidTokenFactory(user_id=user.id, token=token)
    session.commit()

    with pytest.raises(AuthenticationError, match="invalid ledger"):
        service.authenticate(SessionIn(pair.access_token, pair.refresh_token))


def test_tampered_access_token_rejected_without_renewal(service, tokens, session):
    user, pair = _signed_in(tokens, session)

    with pytest.raises(AuthenticationError, match="access token rejected"):
        service.authenticate(SessionIn("garbage.token.value", pair.refresh_token))
    assert _stored_refresh(session, user.id) == pair.refresh_token


def test_access_token_of_deleted_user_rejected(service, tokens, session):
    _, pair = _signed_in(tokens, session)
    ghost = tokens.issue_tokens(987654)

    with pytest.raises(AuthenticationError, match="unknown user"):
        service.authenticate(SessionIn(ghost.access_token, pair.refresh_token))


def test_expired_access_token_renews_session(service, tokens, session):
    with freeze_time("2026-05-01 10:00:00") as frozen:
        user, pair = _signed_in(tokens, session)
        frozen.tick(timedelta(seconds=121))

        out = service.authenticate(SessionIn(pair.access_token, pair.refresh_token))

    assert out.user_id == user.id
    assert out.renewed is not None
    assert out.renewed.refresh_token != pair.refresh_token
    assert pair.refresh_token in _ledger(session)
    assert _stored_refresh(session, user.id) == out.renewed.refresh_token


def test_refresh_token_alone_renews(service, tokens, session):
    user, pair = _signed_in(tokens, session)

    out = service.authenticate(SessionIn(refresh_token=pair.refresh_token))

    assert out.renewed is not None
    assert tokens.verify_access(out.renewed.access_token)["id_user"] == user.id


def test_refresh_token_is_single_use(service, tokens, session):
    _, pair = _signed_in(tokens, session)
    service.authenticate(SessionIn(refresh_token=pair.refresh_token))

    with pytest.raises(AuthenticationError):
        service.authenticate(SessionIn(refresh_token=pair.refresh_token))


def test_refresh_token_not_matching_credential_is_burned(service, tokens, session):
    user, _ = _signed_in(tokens, session)
    stale = tokens.issue_tokens(user.id)

    with pytest.raises(AuthenticationError, match="does not match"):
        service.authenticate(SessionIn(refresh_token=stale.refresh_token))
    assert stale.refresh_token in _ledger(session)


def test_refresh_token_of_unknown_user_rejected(service, tokens):
    ghost = tokens.issue_tokens(987654)

    with pytest.raises(AuthenticationError, match="unknown user"):
        service.authenticate(SessionIn(refresh_token=ghost.refresh_token))


def test_lost_swap_rejects_renewal(service, tokens, session, monkeypatch):
    from myroutine.repositories.credential import CredentialRepository

    _, pair = _signed_in(tokens, session)
    monkeypatch.setattr(CredentialRepository, "swap_refresh_token", lambda *a, **k: False)

    with pytest.raises(AuthenticationError, match="concurrent renewal"):
        service.authenticate(SessionIn(refresh_token=pair.refresh_token))


def test_logout_invalidates_both_tokens_and_keeps_reset_state(service, tokens, session):
    user, pair = _signed_in(tokens, session)
    cred = session.query(Credential).filter_by(user_id=user.id).one()
    cred.reset_password_token = "pending-reset"
    session.commit()

    service.logout(LogoutIn(user.id, pair.access_token, pair.refresh_token))

    assert {pair.access_token, pair.refresh_token} <= _ledger(session)
    session.expire_all()
    cred = session.query(Credential).filter_by(user_id=user.id).one()
    assert cred.refresh_token is None
    assert cred.reset_password_token == "pending-reset"
    with pytest.raises(AuthenticationError):
        service.authenticate(SessionIn(pair.access_token, pair.refresh_token))


def test_purge_ledger_keeps_recent_entries(service, session):
    now = datetime(2026, 5, 1, tzinfo=UTC)
    InvalidTokenFactory(token="old", recorded_at=now - timedelta(days=10))
    InvalidTokenFactory(token="new", recorded_at=now - timedelta(hours=1))
    session.commit()

    assert service.purge_ledger(timedelta(days=7), now=now) == 1
    assert _ledger(session) == {"new"}
