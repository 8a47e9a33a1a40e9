from unittest.mock import Mock

import pytest
import redis
from fastapi import HTTPException

from gigconnect import config, rate_limiter


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch):
    monkeypatch.setattr(rate_limiter, "memory_cache", {})
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", 0)
    monkeypatch.setattr(rate_limiter, "redis_client", None)
    monkeypatch.setattr(rate_limiter, "redis_retry_after", 0.0)


@pytest.fixture
def redis_mock():
    client = Mock()
    client.get.return_value = None
    client.ttl.return_value = -2
    return client


def make_request(ip="203.0.113.7"):
    request = Mock()
    request.headers = {}
    request.client.host = ip
    return request


def test_requests_over_limit_are_denied(redis_mock):
    results = [rate_limiter.check_rate_limit("catalog:1.2.3.4", 2, 60, redis_mock, now=1000)[0] for _ in range(3)]
    assert results == [True, True, False]


def test_window_resets_after_expiry(redis_mock):
    for _ in range(2):
        rate_limiter.check_rate_limit("catalog:1.2.3.4", 2, 60, redis_mock, now=1000)

    allowed, count, _ = rate_limiter.check_rate_limit("catalog:1.2.3.4", 2, 60, redis_mock, now=1061)
    assert allowed is True
    assert count == 1


def test_existing_redis_count_is_respected(redis_mock):
    redis_mock.get.return_value = "5"
    redis_mock.ttl.return_value = 30

    allowed, count, ttl = rate_limiter.check_rate_limit("catalog:1.2.3.4", 5, 60, redis_mock, now=1000)

    assert allowed is False
    assert count == 5
    assert ttl == 30


def test_redis_errors_fall_back_to_memory(redis_mock):
    redis_mock.get.side_effect = redis.ConnectionError("down")
    redis_mock.set.side_effect = redis.ConnectionError("down")

    allowed, count, _ = rate_limiter.check_rate_limit("catalog:1.2.3.4", 2, 60, redis_mock, now=1000)
    assert (allowed, count) == (True, 1)


def test_forwarded_ip_is_used():
    request = make_request()
    request.headers = {"X-Forwarded-For": "198.51.100.1, 10.0.0.1"}
    assert rate_limiter.client_ip(request) == "198.51.100.1"


def test_disabled_limiter_allows_everything(monkeypatch):
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", False)
    assert rate_limiter.rate_limit_dependency(make_request(), 1, 60) is None


class TestRedisUnavailable:
    @pytest.fixture(autouse=True)
    def broken_redis(self, monkeypatch):
        monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
        monkeypatch.setattr(rate_limiter, "get_redis_client", Mock(side_effect=redis.ConnectionError("down")))

    def test_fail_open(self):
        result = rate_limiter.rate_limit_dependency(make_request(), 1, 60, "catalog", fail_open=True)
        assert result is None

    def test_fail_closed(self):
        with pytest.raises(HTTPException) as exc_info:
            rate_limiter.rate_limit_dependency(make_request(), 1, 60, "catalog")
        assert exc_info.value.status_code == 503


def test_limit_exceeded_returns_429(monkeypatch, redis_mock):
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: redis_mock)
    request = make_request()

    rate_limiter.rate_limit_dependency(request, 1, 60, "catalog")
    with pytest.raises(HTTPException) as exc_info:
        rate_limiter.rate_limit_dependency(request, 1, 60, "catalog")

    assert exc_info.value.status_code == 429
    assert "Retry-After" in exc_info.value.headers


def test_failed_connection_is_not_retried_during_backoff(monkeypatch):
    monkeypatch.setattr(config, "REDIS_URL", None)
    unreachable = Mock()
    unreachable.ping.side_effect = redis.ConnectionError("connection refused")
    client_factory = Mock(return_value=unreachable)
    monkeypatch.setattr(rate_limiter.redis, "Redis", client_factory)

    with pytest.raises(redis.ConnectionError):
        rate_limiter.get_redis_client()
    with pytest.raises(redis.ConnectionError):
        rate_limiter.get_redis_client()

    assert client_factory.call_count == 1


def test_reconnects_once_backoff_expires(monkeypatch):
    monkeypatch.setattr(config, "REDIS_URL", None)
    healthy = Mock()
    unreachable = Mock()
    unreachable.ping.side_effect = redis.ConnectionError("connection refused")
    client_factory = Mock(side_effect=[unreachable, healthy])
    monkeypatch.setattr(rate_limiter.redis, "Redis", client_factory)

    with pytest.raises(redis.ConnectionError):
        rate_limiter.get_redis_client()

    monkeypatch.setattr(rate_limiter, "redis_retry_after", 0.0)
    assert rate_limiter.get_redis_client() is healthy
    assert rate_limiter.get_redis_client() is healthy
    assert client_factory.call_count == 2


def test_degraded_requests_skip_redis_while_backing_off(monkeypatch):
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(config, "REDIS_URL", None)
    unreachable = Mock()
    unreachable.ping.side_effect = redis.ConnectionError("connection refused")
    client_factory = Mock(return_value=unreachable)
    monkeypatch.setattr(rate_limiter.redis, "Redis", client_factory)

    for _ in range(3):
        assert rate_limiter.rate_limit_dependency(make_request(), 10, 60, "catalog", fail_open=True) is None

    assert client_factory.call_count == 1
