"""
Unit tests for RedisInvalidatedTokenStore using fakeredis.

These tests exercise:
- insert-if-absent (first insert wins, second reports ALREADY_EXISTS)
- exists
- key expiry including the retention grace
"""

from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest

from tests.helpers.clock import FrozenClock
from tokenauth.infra.redis.redis_invalidated_token_store import RedisInvalidatedTokenStore
from tokenauth.services._shared.ports import InsertResult


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def redis_clock():
    return FrozenClock()


@pytest.fixture
def redis_store(fake_redis, redis_clock):
    return RedisInvalidatedTokenStore(fake_redis, clock=redis_clock)


def test_insert_then_exists(redis_store, redis_clock):
    assert redis_store.exists("jti-1") is False

    result = redis_store.insert("jti-1", redis_clock() + timedelta(minutes=5))

    assert result is InsertResult.INSERTED
    assert redis_store.exists("jti-1") is True
    assert redis_store.exists("jti-2") is False


def test_second_insert_reports_already_exists(redis_store, redis_clock):
    exp = redis_clock() + timedelta(minutes=5)
    assert redis_store.insert("jti-1", exp) is InsertResult.INSERTED
    assert redis_store.insert("jti-1", exp) is InsertResult.ALREADY_EXISTS


def test_key_expires_with_token(redis_store, fake_redis, redis_clock):
    redis_store.insert("jti-1", redis_clock() + timedelta(seconds=300))
    assert 298 <= fake_redis.ttl("inv:jti:jti-1") <= 300


def test_past_expiry_still_gets_a_marker(redis_store, fake_redis, redis_clock):
    """
    GIVEN a token whose expiry already passed
    WHEN it is recorded
    THEN the key is still written with a TTL of at least one second.
    """
    assert redis_store.insert("jti-old", redis_clock() - timedelta(hours=1)) is InsertResult.INSERTED
    assert redis_store.exists("jti-old") is True
    assert 0 <= fake_redis.ttl("inv:jti:jti-old") <= 1


def test_retention_extends_key_lifetime(fake_redis, redis_clock):
    store = RedisInvalidatedTokenStore(
        fake_redis, retention=timedelta(days=1), clock=redis_clock
    )
    store.insert("jti-1", redis_clock() + timedelta(minutes=15))
    assert 86400 + 898 <= fake_redis.ttl("inv:jti:jti-1") <= 86400 + 900
