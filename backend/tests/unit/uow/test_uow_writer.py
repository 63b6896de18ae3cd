import pytest

from myroutine.models.user import User
from myroutine.uow import SQLAlchemyUnitOfWork as RWuow


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_clean_exit(self, session):
        with RWuow() as uow:
            uow.users.add(User(email="committed@example.com"))

        assert session.query(User).filter_by(email="committed@example.com").count() == 1

    def test_rolls_back_on_error(self, session):
        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.users.add(User(email="doomed@example.com"))
            raise RuntimeError("boom")

        assert session.query(User).filter_by(email="doomed@example.com").count() == 0

    def test_repositories_share_the_session(self):
        with RWuow() as uow:
            assert uow.users.session is uow.session
            assert uow.credentials.session is uow.session
            assert uow.photos.session is uow.session
