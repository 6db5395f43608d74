"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork.
"""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tokenauth.models import User
from tokenauth.uow import SQLAlchemyReadOnlyUnitOfWork


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_reads_committed_rows(self, session):
        UserFactory(username="reader")
        session.commit()

        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            assert uow.users.get_by_username("reader") is not None

    def test_commit_is_refused(self, session):
        with pytest.raises(RuntimeError), SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.commit()

    def test_flush_with_pending_objects_is_blocked(self, session):
        """
        GIVEN a read-only UoW
        WHEN a new object is added and flushed
        THEN the guard raises and nothing is persisted.
        """
        with pytest.raises(RuntimeError), SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.session.add(User(username="sneaky"))
            uow.session.flush()

        assert session.query(User).filter_by(username="sneaky").count() == 0

    def test_guard_removed_after_exit(self, session):
        with SQLAlchemyReadOnlyUnitOfWork():
            pass

        session.add(User(username="writer"))
        session.flush()
        assert session.query(User).filter_by(username="writer").count() == 1
