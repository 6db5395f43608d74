"""Thin SQLAlchemy 2.x repository base.

Repositories only read and stage rows. Transactions belong to the Unit of
Work, so nothing here commits or rolls back.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select
from sqlalchemy.orm import Session

from tokenauth.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Persistence for one mapped class.

    :param session: Session shared with the surrounding Unit of Work. When
        omitted the Flask-scoped ``db.session`` is used.
    :type session: sqlalchemy.orm.Session | None
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Hook for lookups that must preload relationships; identity by default."""
        return stmt

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush immediately.

        Flushing here makes primary-key and unique violations raise
        :class:`sqlalchemy.exc.IntegrityError` at the call site instead of at
        commit.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()
