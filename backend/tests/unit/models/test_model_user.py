"""Unit tests for the User model."""

import pytest

from myroutine.models.user import User
from tests.factories.user import UserFactory


class TestUserModel:
    def test_email_is_normalized(self, session):
        user = UserFactory(email="  Ana.Perez@Example.COM ")
        assert user.email == "ana.perez@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "ana@localhost"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email)

    def test_password_is_hashed_and_write_only(self, session):
        user = UserFactory(password="s3cret-pass")

        assert user.password_hash and user.password_hash != "s3cret-pass"
        assert user.verify_password("s3cret-pass")
        assert not user.verify_password("wrong")
        with pytest.raises(AttributeError):
            _ = user.password

    def test_account_without_password_never_verifies(self):
        user = User(email="google@example.com")
        assert user.password_hash is None
        assert user.verify_password("") is False

    def test_empty_password_rejected(self):
        user = User(email="x@example.com")
        with pytest.raises(ValueError):
            user.password = ""

    def test_blank_username_becomes_none(self, session):
        user = UserFactory(username="   ")
        assert user.username is None
