"""Transaction boundaries for the persistence adapters.

``SQLAlchemyUnitOfWork`` commits revocation records;
``SQLAlchemyReadOnlyUnitOfWork`` serves directory lookups and refuses writes.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "SQLAlchemyReadOnlyUnitOfWork",
    "SQLAlchemyUnitOfWork",
    "UnitOfWork",
]
