"""Request orchestration for both inbound protocols.

``TranslationBridgeService`` is the single entry-point the HTTP routes
call. It composes the request side (turn extraction, directive
resolution, payload assembly), the upstream call, and the response side
(non-streaming transforms, SSE re-encoding or relay).

Caller contract
---------------
``chat_completions()`` and ``responses()`` return either:

- A ``dict`` - the complete JSON body for a non-streaming reply.
- A ``StreamResult`` - an async byte iterator plus response headers. Each
  item is one write group and must be flushed before the next is pulled.

Anything else surfaces as a ``BridgeError``. Malformed requests fail
before the upstream call; there is exactly one upstream attempt.

Stream lifetime
---------------
The upstream response is closed in a ``finally`` block of the stream
generator, so it is released when the stream completes, when upstream
fails mid-stream, and when the client disconnects (the server closes the
generator). A disconnect is expected cancellation and is not logged.

Non-event-stream replies to streaming requests
----------------------------------------------
If the engine answers a streaming request with anything other than
``text/event-stream``, the reply is handled by the non-streaming
transformer for that protocol.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

import httpx

from translation_bridge.api.models import ChatCompletionRequest, ResponsesRequest
from translation_bridge.errors import InternalError, InvalidRequestError, UpstreamError
from translation_bridge.ids import IdFactory
from translation_bridge.responses import to_chat_completion, to_responses_body
from translation_bridge.streaming.encoder import StreamingSession, encode_events
from translation_bridge.streaming.sse import iter_events
from translation_bridge.translation.directive import resolve_directive
from translation_bridge.translation.inputs import (
    ExtractedTurns,
    from_messages,
    from_responses_input,
)
from translation_bridge.translation.payload import build_upstream_payload, parse_stream_flag
from translation_bridge.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

EVENT_STREAM = "text/event-stream"

SSE_HEADERS = {
    "Content-Type": EVENT_STREAM,
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@dataclass
class StreamResult:
    chunks: AsyncIterator[bytes]
    headers: dict[str, str]


def _is_event_stream(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == EVENT_STREAM


def _relay_headers(response: httpx.Response) -> dict[str, str]:
    return {
        name: response.headers.get(name) or default for name, default in SSE_HEADERS.items()
    }


async def _upstream_bytes(response: httpx.Response) -> AsyncIterator[bytes]:
    """Upstream body chunks; a mid-stream read failure ends the stream."""
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as exc:
        logger.warning("Upstream stream read failed: %s", exc)


class TranslationBridgeService:
    """Adapts chat-completion requests to the translation engine.

    Args:
        upstream:                Engine transport.
        ids:                     Identifier and timestamp source.
        default_target_language: Target used when no directive supplies one.
    """

    def __init__(
        self,
        *,
        upstream: UpstreamClient,
        ids: IdFactory,
        default_target_language: str,
    ) -> None:
        self._upstream = upstream
        self._ids = ids
        self._default_target = default_target_language

    # ── Entry points ──────────────────────────────────────────────────────────

    async def chat_completions(
        self, request: ChatCompletionRequest, authorization: str
    ) -> dict[str, Any] | StreamResult:
        model = _require_model(request.model)
        turns = from_messages(request.messages)
        stream = parse_stream_flag(request.stream)
        response = await self._send(model, turns, request, authorization, stream)

        if stream and _is_event_stream(response):
            return StreamResult(self._encode_chat_stream(response, model), dict(SSE_HEADERS))
        body = await _read_json(response)
        return to_chat_completion(body, model, self._ids)

    async def responses(
        self, request: ResponsesRequest, authorization: str
    ) -> dict[str, Any] | StreamResult:
        model = _require_model(request.model)
        turns = from_responses_input(request.input)
        stream = parse_stream_flag(request.stream)
        response = await self._send(model, turns, request, authorization, stream)

        if stream and _is_event_stream(response):
            return StreamResult(self._relay(response), _relay_headers(response))
        body = await _read_json(response)
        return to_responses_body(body, model, self._ids)

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _send(
        self,
        model: str,
        turns: ExtractedTurns,
        request: ChatCompletionRequest | ResponsesRequest,
        authorization: str,
        stream: bool,
    ) -> httpx.Response:
        if not turns.user_text:
            raise InvalidRequestError("No user message")

        directive = resolve_directive(
            turns.instruction,
            request.translation_options,
            request.metadata,
            default_target=self._default_target,
        )
        payload = build_upstream_payload(model, directive, turns.user_text, stream)
        logger.debug(
            "Forwarding translation request (model=%s, stream=%s, directive=%s)",
            model,
            stream,
            directive.to_payload(),
        )
        return await self._upstream.send(payload, authorization, stream=stream)

    async def _encode_chat_stream(
        self, response: httpx.Response, model: str
    ) -> AsyncIterator[bytes]:
        session = StreamingSession.start(model, self._ids)
        try:
            async for group in encode_events(session, iter_events(_upstream_bytes(response))):
                yield group.encode("utf-8")
        finally:
            await response.aclose()

    async def _relay(self, response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in _upstream_bytes(response):
                yield chunk
        finally:
            await response.aclose()


def _require_model(model: Any) -> str:
    if not isinstance(model, str) or not model:
        raise InvalidRequestError("Missing model")
    return model


async def _read_json(response: httpx.Response) -> dict[str, Any]:
    """Read and close a 2xx response, returning its JSON object body."""
    try:
        raw = await response.aread()
    except httpx.HTTPError as exc:
        logger.warning("Upstream body read failed: %s", exc)
        raise UpstreamError(str(exc)) from exc
    finally:
        await response.aclose()

    try:
        body = json.loads(raw)
    except ValueError as exc:
        logger.error("Upstream returned a non-JSON body: %.200s", raw)
        raise InternalError() from exc
    if not isinstance(body, dict):
        logger.error("Upstream returned a non-object JSON body: %.200s", raw)
        raise InternalError()
    return body
