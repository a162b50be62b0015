"""Unit tests for the Redis client mixin and the Redis error decorator.

Test coverage includes:
    1. Initialization and configuration
       - Creates a Redis client with socket timeouts and no retries when none is provided.
       - Skips the PING when asked to.
       - Uses a pre-initialized client as-is.
    2. Healthcheck behavior
       - An unreachable Redis is logged, never raised.
    3. handle_redis_error()
       - Redis errors become the requested CacheError subclass.
       - Function metadata is preserved.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import redis
from redis.backoff import NoBackoff

from urlshortener.dao.cache.helpers import handle_redis_error
from urlshortener.dao.cache.mixins import RedisClientMixin
from urlshortener.dao.exceptions import CacheError, CachePutError


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    with (
        patch('urlshortener.dao.cache.mixins.redis.Redis', autospec=True) as redis_mock,
        patch('urlshortener.dao.cache.mixins.Retry', autospec=True) as retry_mock,
    ):
        mixin = RedisClientMixin(redis_host='redis', redis_port=6380, redis_db=1, redis_password='password', timeout=2.0)

    redis_mock.assert_called_once_with(
        host='redis',
        port=6380,
        db=1,
        decode_responses=True,
        username=None,
        password='password',
        socket_timeout=2.0,
        socket_connect_timeout=2.0,
        retry_on_timeout=False,
        retry=retry_mock.return_value,
    )
    backoff, retries = retry_mock.call_args.args
    assert isinstance(backoff, NoBackoff)
    assert retries == 0
    assert mixin.redis is redis_mock.return_value
    redis_mock.return_value.ping.assert_called_once()


def test_initialize_without_healthcheck(redis_client):
    RedisClientMixin(redis_client=redis_client, healthcheck=False)

    redis_client.ping.assert_not_called()


def test_initialize_with_redis_client(redis_client, app_prefix):
    mixin = RedisClientMixin(redis_client=redis_client, prefix=app_prefix)

    assert mixin.redis is redis_client
    assert mixin.keys.prefix == app_prefix


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_unreachable_redis_does_not_fail(redis_client, caplog):
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection refused')

    with caplog.at_level(logging.WARNING):
        mixin = RedisClientMixin(redis_client=redis_client)

    assert mixin._healthcheck() is False
    assert "Can't connect to Redis at redis.test:6379/0" in caplog.text


def test_healthcheck(redis_client):
    assert RedisClientMixin(redis_client=redis_client)._healthcheck() is True


# -------------------------------
# 3. handle_redis_error()
# -------------------------------


class _DummyDAO:
    def __init__(self, redis_client):
        self.redis = redis_client

    @handle_redis_error(CachePutError)
    def store(self):
        """Store something."""
        return self.redis.set('k', 'v')

    @handle_redis_error()
    def fetch(self):
        return self.redis.get('k')


def test_decorator_allows_normal_execution(redis_client):
    redis_client.set.return_value = True
    assert _DummyDAO(redis_client).store() is True


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('down'), redis.exceptions.TimeoutError('slow')])
def test_decorator_transforms_redis_errors(redis_client, error):
    redis_client.set.side_effect = error

    with pytest.raises(CachePutError, match='Redis at redis.test:6379/0 failed') as exc_info:
        _DummyDAO(redis_client).store()
    assert exc_info.value.__cause__ is error


def test_decorator_defaults_to_cache_error(redis_client):
    redis_client.get.side_effect = redis.exceptions.ResponseError('WRONGTYPE')

    with pytest.raises(CacheError):
        _DummyDAO(redis_client).fetch()


def test_decorator_preserves_metadata():
    assert _DummyDAO.store.__name__ == 'store'
    assert _DummyDAO.store.__doc__ == 'Store something.'


def test_decorator_ignores_other_errors():
    client = MagicMock()
    client.set.side_effect = KeyError('k')

    with pytest.raises(KeyError):
        _DummyDAO(client).store()
