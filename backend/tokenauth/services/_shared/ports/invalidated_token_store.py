from __future__ import annotations

import threading
from datetime import datetime
from enum import Enum
from typing import Protocol


class InsertResult(str, Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


class InvalidatedTokenStore(Protocol):
    """
    Persistent set of revoked token ids.

    ``insert`` must be an atomic insert-if-absent: when two callers race on
    the same ``jti`` exactly one of them observes ``INSERTED``.
    """

    def exists(self, jti: str) -> bool: ...
    def insert(self, jti: str, expiry_time: datetime) -> InsertResult: ...


class InMemoryInvalidatedTokenStore(InvalidatedTokenStore):
    """Process-local store for tests and the ``memory`` backend."""

    def __init__(self) -> None:
        self._records: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def exists(self, jti: str) -> bool:
        return jti in self._records

    def insert(self, jti: str, expiry_time: datetime) -> InsertResult:
        with self._lock:
            if jti in self._records:
                return InsertResult.ALREADY_EXISTS
            self._records[jti] = expiry_time
            return InsertResult.INSERTED
