"""
tokenauth.services._shared.ports
================================

Hexagonal interfaces the token core depends on.

Modules
-------
- :mod:`invalidated_token_store`:
    Defines :class:`~.InvalidatedTokenStore` and :class:`~.InsertResult`,
    the revocation store contract with an atomic insert-if-absent.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory`, the source of a subject's current
    roles and permissions.

Concrete adapters (SQLAlchemy, Redis) live under ``tokenauth.infra``; the
in-memory doubles here back the unit tests and the ``memory`` backend.
"""

from __future__ import annotations

from .invalidated_token_store import (
    InMemoryInvalidatedTokenStore,
    InsertResult,
    InvalidatedTokenStore,
)
from .user_directory import InMemoryUserDirectory, UserDirectory

__all__ = [
    "InsertResult",
    "InvalidatedTokenStore",
    "InMemoryInvalidatedTokenStore",
    "UserDirectory",
    "InMemoryUserDirectory",
]
