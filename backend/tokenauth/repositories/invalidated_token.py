"""Repository for revoked token ids."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select

from tokenauth.models.invalidated_token import InvalidatedToken
from tokenauth.repositories.base import BaseRepository


class InvalidatedTokenRepository(BaseRepository[InvalidatedToken]):
    """Persistence-only repository for :class:`InvalidatedToken`.

    ``add`` (inherited) flushes immediately, so inserting a jti that is
    already recorded raises :class:`sqlalchemy.exc.IntegrityError` inside
    the caller's Unit of Work.
    """

    def exists(self, jti: str) -> bool:
        """Return ``True`` when ``jti`` has been recorded."""
        stmt = select(InvalidatedToken.id).where(InvalidatedToken.id == jti)
        return self.session.execute(stmt).first() is not None

    def delete_expired(self, now: datetime) -> int:
        """Bulk-delete records whose ``expiry_time`` is strictly before ``now``.

        :param now: Reference instant (tz-aware UTC).
        :type now: datetime
        :returns: Number of deleted rows.
        :rtype: int
        """
        stmt = delete(InvalidatedToken).where(InvalidatedToken.expiry_time < now)
        result = self.session.execute(stmt, execution_options={"synchronize_session": False})
        return int(result.rowcount or 0)
