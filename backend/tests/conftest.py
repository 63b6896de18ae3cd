"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Units of work
that commit release their own SAVEPOINT and units of work that roll back
undo only theirs, so commit/rollback behaviour is observable inside a test.
"""

from __future__ import annotations

import os

import pytest
from flask import g
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from myroutine.core.config import TestingConfig
from myroutine.core.extensions import EMAIL_SENDER_KEY, IMAGE_STORE_KEY
from myroutine.core.extensions import db as _db  # Flask-SQLAlchemy instance
from myroutine.factory import create_app  # application factory under test
from myroutine.services._shared.base import ServiceContext
from myroutine.services._shared.ports.email_sender import InMemoryEmailSender
from myroutine.services._shared.ports.image_store import InMemoryImageStore


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    pysqlite does not emit ``BEGIN`` itself, which breaks SAVEPOINT; the two
    listeners hand transaction control to SQLAlchemy.
    """
    with app.app_context():
        engine = _db.engine

        @event.listens_for(engine, "connect")
        def _do_connect(dbapi_connection, connection_record):  # pragma: no cover
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _do_begin(conn):  # pragma: no cover
            conn.exec_driver_sql("BEGIN")

        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The connection is inside a SAVEPOINT when the session binds to it, so the
    session joins with its own SAVEPOINT per transaction.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) SAVEPOINT per test
    connection.begin_nested()

    # 3) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 4) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def image_store(app):
    """Fresh in-memory image store installed on the app for one test."""
    store = InMemoryImageStore()
    previous = app.extensions[IMAGE_STORE_KEY]
    app.extensions[IMAGE_STORE_KEY] = store
    yield store
    app.extensions[IMAGE_STORE_KEY] = previous


@pytest.fixture()
def email_sender(app):
    """Fresh in-memory email outbox installed on the app for one test."""
    sender = InMemoryEmailSender()
    previous = app.extensions[EMAIL_SENDER_KEY]
    app.extensions[EMAIL_SENDER_KEY] = sender
    yield sender
    app.extensions[EMAIL_SENDER_KEY] = previous


@pytest.fixture()
def client(app, session, image_store, email_sender):
    """Test client sharing the transactional session and the in-memory doubles."""
    with app.test_client() as c:
        yield c


@pytest.fixture()
def ctx_for():
    """Build a :class:`ServiceContext` acting as the given user id."""

    def _build(user_id: int | None) -> ServiceContext:
        return ServiceContext(actor_id=user_id, request_id="test")

    return _build


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


@pytest.fixture(autouse=True)
def _app_context(app):
    """Run every test inside an application context with a clean ``g``."""
    with app.app_context():
        g.pop("user_id", None)
        yield
