"""Tests for the bounded fetch helpers."""

from __future__ import annotations

import httpx
import pytest

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.errors import NetworkError
from aeo_audit.core.fetch import (
    Found,
    Missing,
    TransportFailure,
    describe_failure,
    fetch_resource,
    fetch_text,
)


def _client(
    resp: httpx.Response | None = None,
    exc: Exception | None = None,
    seen: list[httpx.Request] | None = None,
) -> httpx.AsyncClient:
    """AsyncClient backed by a MockTransport that answers every request with *resp*."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if exc is not None:
            raise exc
        return resp

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_found():
    seen: list[httpx.Request] = []
    resp = httpx.Response(200, text="hello", headers={"X-Test": "1"})
    async with _client(resp, seen=seen) as client:
        outcome = await fetch_text("https://example.com/", client, timeout=5)

    assert isinstance(outcome, Found)
    assert outcome.content == "hello"
    assert outcome.headers["x-test"] == "1"

    request = seen[0]
    assert request.method == "GET"
    assert request.headers["User-Agent"] == AuditConfig().user_agent
    assert request.extensions["timeout"] == httpx.Timeout(5).as_dict()


async def test_redirect_is_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="moved here")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await fetch_text("https://example.com/old", client, timeout=5)

    assert isinstance(outcome, Found)
    assert outcome.content == "moved here"
    assert outcome.status_code == 200


@pytest.mark.parametrize("status", [301, 404, 500])
async def test_non_2xx_is_missing(status):
    async with _client(httpx.Response(status)) as client:
        outcome = await fetch_text("https://example.com/x", client, timeout=5)
    assert outcome == Missing(status)


async def test_transport_failure():
    async with _client(exc=httpx.ConnectError("refused")) as client:
        outcome = await fetch_text("https://example.com/", client, timeout=5)
    assert isinstance(outcome, TransportFailure)
    assert describe_failure(outcome) == "refused"


def test_describe_failure_without_message():
    assert describe_failure(TransportFailure(httpx.ReadTimeout(""))) == "ReadTimeout"


async def test_body_is_truncated():
    config = AuditConfig(max_content_size=4)
    async with _client(httpx.Response(200, text="abcdefgh")) as client:
        outcome = await fetch_text("https://example.com/", client, timeout=5, config=config)
    assert outcome.content == "abcd"


async def test_body_at_cap_is_kept_whole():
    config = AuditConfig(max_content_size=8)
    async with _client(httpx.Response(200, text="abcdefgh")) as client:
        outcome = await fetch_text("https://example.com/", client, timeout=5, config=config)
    assert outcome.content == "abcdefgh"


async def test_oversized_body_stops_streaming_at_cap():
    pulled: list[int] = []

    async def body():
        for i in range(100):
            pulled.append(i)
            yield b"x" * 10

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body())

    config = AuditConfig(max_content_size=25)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await fetch_text("https://example.com/", client, timeout=5, config=config)

    assert outcome.content == "x" * 25
    assert len(pulled) < 100


async def test_fetch_resource_builds_https_url():
    seen: list[httpx.Request] = []
    async with _client(httpx.Response(200, text="User-agent: *"), seen=seen) as client:
        content = await fetch_resource("example.com", "/robots.txt", client, timeout=5)

    assert content == "User-agent: *"
    assert str(seen[0].url) == "https://example.com/robots.txt"


async def test_fetch_resource_missing_is_none():
    async with _client(httpx.Response(404)) as client:
        assert await fetch_resource("example.com", "/llms.txt", client, timeout=5) is None


async def test_fetch_resource_transport_failure_raises():
    async with _client(exc=httpx.ConnectError("Name or service not known")) as client:
        with pytest.raises(NetworkError) as exc_info:
            await fetch_resource("example.com", "/", client, timeout=5)
    assert exc_info.value.message == "Failed to fetch example.com: Name or service not known"
