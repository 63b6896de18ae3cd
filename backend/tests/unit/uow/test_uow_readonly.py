import pytest
from sqlalchemy import text

from myroutine.models.user import User
from myroutine.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from myroutine.uow import SQLAlchemyUnitOfWork as RWuow


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self):
        """Flushing ORM changes inside the RO UoW raises."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="flush with pending changes blocked"):
            uow.session.add(User(email="ro@example.com"))
            uow.session.flush()

    def test_blocks_core_dml(self):
        """Raw DML is blocked inside the RO UoW."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked: INSERT"):
            uow.session.execute(text("INSERT INTO days (name) VALUES ('Blocked')"))

    def test_allows_reads(self):
        with RWuow() as uow:
            uow.users.add(User(email="reader@example.com"))

        with ROuow() as uow:
            assert uow.users.get_by_email("reader@example.com") is not None

    def test_disallows_commit(self):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_removed_after_exit(self, session):
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(User(email="after@example.com"))
        assert session.query(User).filter_by(email="after@example.com").count() == 1

    def test_consecutive_scopes_on_one_session(self, session):
        """Each scope closes the transaction it opened."""
        session.commit()
        for _ in range(3):
            with ROuow() as uow:
                assert uow.users.get_by_email("nobody@example.com") is None
