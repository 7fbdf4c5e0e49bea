"""Rate limit key + middleware behavior (Redis mocked)."""
from unittest.mock import AsyncMock, patch

import pytest
from starlette.requests import Request

from app.config import get_settings
from app.middleware.rate_limit import _check_sliding_window, _rate_limit_key


def _request(headers=None, client=("10.0.0.1", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/companies",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_key_uses_client_host() -> None:
    assert _rate_limit_key(_request()) == "ip:10.0.0.1"


def test_key_ignores_forwarded_header_by_default() -> None:
    req = _request({"X-Forwarded-For": "203.0.113.7"})
    assert _rate_limit_key(req) == "ip:10.0.0.1"


def test_key_uses_hop_added_by_trusted_proxy() -> None:
    # client spoofs the first entry; the proxy appends the real peer
    req = _request({"X-Forwarded-For": "1.2.3.4, 203.0.113.7"})
    assert _rate_limit_key(req, trusted_proxy_hops=1) == "ip:203.0.113.7"
    assert _rate_limit_key(req, trusted_proxy_hops=2) == "ip:1.2.3.4"
    assert _rate_limit_key(req, trusted_proxy_hops=3) == "ip:10.0.0.1"


@pytest.mark.asyncio
async def test_rotating_forwarded_header_shares_one_key(client) -> None:
    settings = get_settings().model_copy(update={"redis_url": "redis://localhost:6379/0"})
    check = AsyncMock(return_value=True)
    with patch("app.middleware.rate_limit.get_settings", return_value=settings), patch(
        "app.middleware.rate_limit._check_sliding_window", check
    ):
        for i in range(3):
            await client.get("/api/companies", headers={"X-Forwarded-For": f"198.51.100.{i}"})
    keys = {call.args[1] for call in check.await_args_list}
    assert len(keys) == 1


def test_key_none_without_client() -> None:
    assert _rate_limit_key(_request(client=None)) is None


@pytest.mark.asyncio
async def test_sliding_window_fails_open_when_redis_unreachable() -> None:
    assert await _check_sliding_window("redis://127.0.0.1:1/0", "ip:x", 1, 60) is True


@pytest.mark.asyncio
async def test_over_limit_returns_429(client) -> None:
    settings = get_settings().model_copy(update={"redis_url": "redis://localhost:6379/0"})
    with patch("app.middleware.rate_limit.get_settings", return_value=settings), patch(
        "app.middleware.rate_limit._check_sliding_window", AsyncMock(return_value=False)
    ):
        resp = await client.get("/api/companies")
        health = await client.get("/api/health")
    assert resp.status_code == 429
    assert resp.json() == {"success": False, "message": "Too many requests, please try again later."}
    assert health.status_code == 200


@pytest.mark.asyncio
async def test_no_redis_url_never_limits(client) -> None:
    with patch("app.middleware.rate_limit._check_sliding_window", AsyncMock(return_value=False)) as check:
        resp = await client.get("/api/companies")
    assert resp.status_code == 200
    check.assert_not_called()
