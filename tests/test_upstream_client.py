"""Tests for the translation engine transport."""

import asyncio
import json
from collections.abc import AsyncGenerator

import httpx
import pytest
from conftest import ENGINE_URL, FakeEngine, engine_body

from translation_bridge.errors import UpstreamError
from translation_bridge.upstream.client import (
    GENERIC_UPSTREAM_MESSAGE,
    UpstreamClient,
    extract_error_message,
)

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
async def client(engine: FakeEngine) -> AsyncGenerator[UpstreamClient, None]:
    """Upstream client wired to the fake engine."""
    async with engine.client() as client:
        yield client


async def _send(client: UpstreamClient, payload=None, *, stream=False):
    response = await client.send(payload or {"model": "m"}, "Bearer sk-test", stream=stream)
    body = await response.aread()
    await response.aclose()
    return response, body


async def _trickle(chunks: int, delay: float):
    """A body that arrives one byte at a time, ``delay`` seconds apart."""
    for _ in range(chunks):
        yield b" "
        await asyncio.sleep(delay)


# =============================================================================
# ERROR MESSAGE EXTRACTION
# =============================================================================


@pytest.mark.unit
class TestExtractErrorMessage:
    def test_json_error_message(self):
        assert extract_error_message(b'{"error": {"message": "quota exceeded"}}') == "quota exceeded"

    def test_raw_text(self):
        assert extract_error_message(b"  Bad gateway from proxy \n") == "Bad gateway from proxy"

    def test_json_without_message_falls_back_to_text(self):
        assert extract_error_message(b'{"error": "nope"}') == '{"error": "nope"}'

    def test_reason_phrase_then_generic(self):
        assert extract_error_message(b"", "Service Unavailable") == "Service Unavailable"
        assert extract_error_message(b"") == GENERIC_UPSTREAM_MESSAGE


# =============================================================================
# SEND
# =============================================================================


@pytest.mark.unit
class TestUpstreamClientSend:
    @pytest.mark.asyncio
    async def test_posts_payload_with_forwarded_credential(self, client, engine):
        engine.reply = lambda request: httpx.Response(200, json=engine_body("ok"))

        response, body = await _send(client, {"model": "m", "input": []})

        assert response.status_code == 200
        assert json.loads(body)["output"][0]["content"][0]["text"] == "ok"
        request = engine.requests[0]
        assert request.method == "POST"
        assert str(request.url) == ENGINE_URL
        assert request.headers["authorization"] == "Bearer sk-test"
        assert json.loads(request.content) == {"model": "m", "input": []}

    @pytest.mark.asyncio
    async def test_streaming_response_is_returned_unread(self, client, engine):
        engine.reply = lambda request: httpx.Response(
            200, headers={"content-type": "text/event-stream"}, content=b"data: [DONE]\n\n"
        )

        response, body = await _send(client, stream=True)
        assert response.headers["content-type"] == "text/event-stream"
        assert body == b"data: [DONE]\n\n"

    @pytest.mark.asyncio
    async def test_non_2xx_keeps_status_and_engine_message(self, client, engine):
        engine.reply = lambda request: httpx.Response(
            429, json={"error": {"message": "quota exceeded"}}
        )

        with pytest.raises(UpstreamError) as exc_info:
            await _send(client)
        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "Upstream API error: quota exceeded"

    @pytest.mark.asyncio
    async def test_non_2xx_with_empty_body_uses_reason_phrase(self, client, engine):
        engine.reply = lambda request: httpx.Response(503)

        with pytest.raises(UpstreamError) as exc_info:
            await _send(client)
        assert exc_info.value.status_code == 503
        assert exc_info.value.detail == "Service Unavailable"

    @pytest.mark.asyncio
    async def test_connection_failure(self, client, engine):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        engine.reply = refuse

        with pytest.raises(UpstreamError) as exc_info:
            await _send(client)
        assert exc_info.value.status_code == 500
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_open_and_close_are_idempotent(self, engine):
        upstream = engine.client()
        first = await upstream.open()
        assert await upstream.open() is first
        await upstream.aclose()
        await upstream.aclose()


# =============================================================================
# TIMEOUTS
# =============================================================================


@pytest.mark.unit
class TestUpstreamClientTimeout:
    @pytest.mark.asyncio
    async def test_transport_timeout_is_a_single_attempt(self, engine):
        def time_out(request):
            raise httpx.ReadTimeout("timed out", request=request)

        engine.reply = time_out

        async with engine.client(timeout_seconds=2.5) as upstream:
            with pytest.raises(UpstreamError) as exc_info:
                await _send(upstream)
        assert len(engine.requests) == 1
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "request timed out after 2.5s"

    @pytest.mark.asyncio
    async def test_slow_headers_hit_the_deadline(self, engine):
        async def stall(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json=engine_body("late"))

        engine.reply = stall

        async with engine.client(timeout_seconds=0.05) as upstream:
            with pytest.raises(UpstreamError) as exc_info:
                await _send(upstream)
        assert exc_info.value.detail == "request timed out after 0.05s"

    @pytest.mark.asyncio
    async def test_trickling_body_hits_the_overall_deadline(self, engine):
        # Every chunk arrives well inside the limit; the whole body does not.
        engine.reply = lambda request: httpx.Response(200, content=_trickle(20, 0.02))

        async with engine.client(timeout_seconds=0.1) as upstream:
            with pytest.raises(UpstreamError) as exc_info:
                await _send(upstream)
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "request timed out after 0.1s"
        assert len(engine.requests) == 1

    @pytest.mark.asyncio
    async def test_trickling_error_body_hits_the_overall_deadline(self, engine):
        engine.reply = lambda request: httpx.Response(502, content=_trickle(20, 0.02))

        async with engine.client(timeout_seconds=0.1) as upstream:
            with pytest.raises(UpstreamError) as exc_info:
                await _send(upstream)
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "request timed out after 0.1s"

    @pytest.mark.asyncio
    async def test_streamed_body_is_not_cut_by_the_deadline(self, engine):
        engine.reply = lambda request: httpx.Response(
            200, headers={"content-type": "text/event-stream"}, content=_trickle(10, 0.02)
        )

        async with engine.client(timeout_seconds=0.1) as upstream:
            response, body = await _send(upstream, stream=True)
        assert response.status_code == 200
        assert body == b" " * 10
