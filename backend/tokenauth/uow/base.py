"""
Abstract Unit of Work contract shared by the store and directory adapters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokenauth.repositories import (
        InvalidatedTokenRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transaction spanning the user and revocation repositories.

    A revocation insert either commits whole or not at all; directory reads
    never write.
    """

    users: UserRepository
    invalidated_tokens: InvalidatedTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
