"""Revocation record keyed by token id (jti)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from tokenauth.core.extensions import db


class InvalidatedToken(db.Model):
    """
    A token id that must never verify again.

    Fields
    ------
    id : str
        The token's ``jti``. Primary key, so a second insert of the same id
        violates the constraint; the store adapter relies on that.
    expiry_time : datetime
        Copied from the token's ``exp``; rows past it can be purged.
    invalidated_at : datetime
        Insert timestamp filled by the database.
    """

    __tablename__ = "invalidated_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    expiry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    invalidated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("ix_invalidated_tokens_expiry_time", "expiry_time"),)

    def __repr__(self) -> str:
        return f"<InvalidatedToken id={self.id}>"
