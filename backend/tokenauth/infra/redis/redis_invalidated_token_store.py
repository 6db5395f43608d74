from datetime import UTC, datetime, timedelta

import redis  # type: ignore[import-untyped]

from tokenauth.services._shared.ports import InsertResult


class RedisInvalidatedTokenStore:
    """
    Revoked token ids as Redis keys that expire on their own.

    ``SET NX`` gives the insert-if-absent contract. Each key lives until the
    token's ``expiry_time`` plus ``retention``; with ``retention`` set to the
    refresh TTL a revoked token can never re-enter its refresh window.
    """

    def __init__(self, r: redis.Redis, *, retention: timedelta = timedelta(0), clock=None):
        self.r = r
        self.retention = retention
        self._clock = clock or (lambda: datetime.now(UTC))

    @staticmethod
    def _k(jti: str) -> str:
        return f"inv:jti:{jti}"

    def _ttl(self, expiry_time: datetime) -> int:
        keep_until = expiry_time + self.retention
        # Already-expired tokens still get a short-lived marker
        return max(1, int(keep_until.timestamp() - self._clock().timestamp()))

    def exists(self, jti: str) -> bool:
        return int(self.r.exists(self._k(jti))) == 1

    def insert(self, jti: str, expiry_time: datetime) -> InsertResult:
        created = self.r.set(self._k(jti), "1", nx=True, ex=self._ttl(expiry_time))
        return InsertResult.INSERTED if created else InsertResult.ALREADY_EXISTS
