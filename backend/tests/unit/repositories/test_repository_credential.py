"""Unit tests for the credential store and invalid-token ledger."""

from datetime import UTC, datetime, timedelta

import pytest

from myroutine.models.credential import InvalidToken
from myroutine.repositories.credential import CredentialRepository, InvalidTokenRepository
from tests.factories.user import CredentialFactory, InvalidTokenFactory, UserFactory


class TestCredentialRepository:
    @pytest.fixture()
    def repo(self):
        return CredentialRepository()

    def test_find_by_user(self, repo):
        cred = CredentialFactory(refresh_token="rt-1")

        found = repo.find_by_user(cred.user_id)
        assert found is not None
        assert found.refresh_token == "rt-1"
        assert repo.find_by_user(cred.user_id + 1000) is None

    def test_update_overwrites_every_field(self, repo, session):
        cred = CredentialFactory(refresh_token="rt-1", reset_password_token="reset-1")

        written = repo.update(
            cred.user_id,
            refresh_token="rt-2",
            reset_password_token=None,
            reset_password_token_expires_at=None,
        )
        session.expire_all()

        assert written == 1
        fresh = repo.find_by_user(cred.user_id)
        assert fresh.refresh_token == "rt-2"
        assert fresh.reset_password_token is None

    def test_update_missing_record_writes_nothing(self, repo):
        user = UserFactory()
        assert (
            repo.update(
                user.id,
                refresh_token="x",
                reset_password_token=None,
                reset_password_token_expires_at=None,
            )
            == 0
        )

    def test_swap_refresh_token_is_conditional(self, repo, session):
        cred = CredentialFactory(refresh_token="rt-1")

        assert repo.swap_refresh_token(cred.user_id, expected="rt-1", new="rt-2") is True
        # A second caller still holding rt-1 loses.
        assert repo.swap_refresh_token(cred.user_id, expected="rt-1", new="rt-3") is False

        session.expire_all()
        assert repo.find_by_user(cred.user_id).refresh_token == "rt-2"


class TestInvalidTokenRepository:
    @pytest.fixture()
    def repo(self):
        return InvalidTokenRepository()

    def test_record_and_contains(self, repo):
        user = UserFactory()
        repo.record(user.id, "burned")

        assert repo.contains("burned")
        assert not repo.contains("fresh")

    def test_contains_any_ignores_empty_values(self, repo):
        InvalidTokenFactory(token="burned")

        assert repo.contains_any(["fresh", "burned"])
        assert not repo.contains_any(["fresh", None, ""])
        assert not repo.contains_any([])

    def test_purge_older_than_cutoff(self, repo, session):
        now = datetime(2026, 3, 1, tzinfo=UTC)
        old = InvalidTokenFactory(recorded_at=now - timedelta(days=8))
        recent = InvalidTokenFactory(recorded_at=now - timedelta(days=1))

        assert repo.purge_older_than(now - timedelta(days=7)) == 1
        remaining = {row.token for row in session.query(InvalidToken).all()}
        assert old.token not in remaining
        assert recent.token in remaining

    def test_delete_by_user_is_scoped(self, repo):
        a = InvalidTokenFactory()
        b = InvalidTokenFactory()

        assert repo.delete_by_user(a.user_id) == 1
        assert repo.contains(b.token)
