"""Factory Boy base bound to the per-test transactional session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder the autouse ``_factories_session`` fixture fills for every test."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No test session bound; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush on create so ids exist; tests commit when an adapter must see the rows."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
