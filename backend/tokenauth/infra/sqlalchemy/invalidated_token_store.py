"""Database-backed revocation store."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError

from tokenauth.models.invalidated_token import InvalidatedToken
from tokenauth.services._shared.ports import InsertResult
from tokenauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyInvalidatedTokenStore:
    """
    Revoked token ids in the ``invalidated_tokens`` table.

    The ``id`` primary key makes :meth:`insert` an insert-if-absent: the
    losing side of a concurrent insert hits the constraint on flush and
    reports ``ALREADY_EXISTS``.

    :param retention: Extra time a record is kept past its ``expiry_time``
        before :meth:`purge_expired` may drop it. Set it to the refresh TTL.
    :type retention: timedelta
    """

    def __init__(self, *, retention: timedelta = timedelta(0)) -> None:
        self.retention = retention

    def exists(self, jti: str) -> bool:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.invalidated_tokens.exists(jti)

    def insert(self, jti: str, expiry_time: datetime) -> InsertResult:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                uow.invalidated_tokens.add(InvalidatedToken(id=jti, expiry_time=expiry_time))
        except IntegrityError:
            # UoW already rolled back
            return InsertResult.ALREADY_EXISTS
        return InsertResult.INSERTED

    def purge_expired(self, now: datetime) -> int:
        """Delete records past ``expiry_time + retention``; return the count."""
        with SQLAlchemyUnitOfWork() as uow:
            deleted = uow.invalidated_tokens.delete_expired(now - self.retention)
        log.info("invalidated_tokens.purged", extra={"deleted": deleted})
        return deleted
