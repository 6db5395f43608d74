"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Token fixtures
share a :class:`~tests.helpers.clock.FrozenClock` so temporal checks are
deterministic.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from tests.helpers.clock import FrozenClock
from tokenauth.core.config import TokenSettings
from tokenauth.core.extensions import db as _db  # Flask-SQLAlchemy instance
from tokenauth.factory import create_app  # application factory under test
from tokenauth.services._shared.ports import InMemoryInvalidatedTokenStore, InMemoryUserDirectory
from tokenauth.services.tokens.issuer import TokenIssuer
from tokenauth.services.tokens.refresher import TokenRefresher
from tokenauth.services.tokens.verifier import TokenVerifier

SECRET = "unit-test-signing-secret-0123456789abcdef"


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Fixed token settings; the revocation store is the database.
    - Avoids hitting external services (no Redis).
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = SECRET
    JWT_ACCESS_TTL_SECONDS = 900
    JWT_REFRESH_TTL_SECONDS = 86400
    TOKEN_STORE_BACKEND = "sqlalchemy"
    REDIS_URL = None
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
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

    Notes
    -----
    Begins a top-level transaction, starts a SAVEPOINT per test, and
    reinstalls the SAVEPOINT whenever SQLAlchemy ends one. ``commit()`` from
    a Unit of Work only releases the inner savepoint, so everything is still
    rolled back at the end of the test.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


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


@pytest.fixture()
def client(app):
    return app.test_client()


# -- Token core wired to in-memory doubles -------------------------------------
@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def settings():
    return TokenSettings(
        signing_secret=SECRET,
        access_ttl=timedelta(seconds=900),
        refresh_ttl=timedelta(seconds=86400),
    )


@pytest.fixture()
def store():
    return InMemoryInvalidatedTokenStore()


@pytest.fixture()
def directory():
    return InMemoryUserDirectory()


@pytest.fixture()
def issuer(settings, clock):
    return TokenIssuer(settings, clock=clock)


@pytest.fixture()
def verifier(settings, store, clock):
    return TokenVerifier(settings, store, clock=clock)


@pytest.fixture()
def refresher(verifier, issuer, store, directory, clock):
    return TokenRefresher(
        verifier=verifier, issuer=issuer, store=store, directory=directory, clock=clock
    )
