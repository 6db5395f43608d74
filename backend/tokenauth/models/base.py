"""Column and ``__repr__`` mixins for the directory tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class PKMixin:
    """Integer surrogate key ``id``; names stay unique via their own constraints."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class TimestampMixin:
    """
    Database-managed audit columns.

    ``updated_at`` moves whenever the row changes, which for a user means a
    rename; role grants live in association rows and do not touch it.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class ReprMixin:
    """``<Class id=.. attr=..>`` built from ``__repr_attrs__``."""

    __repr_attrs__ = ()

    def __repr__(self) -> str:
        parts = [f"id={getattr(self, 'id', None)}"]
        parts.extend(f"{attr}={getattr(self, attr, None)!r}" for attr in self.__repr_attrs__)
        return f"<{type(self).__name__} {' '.join(parts)}>"
