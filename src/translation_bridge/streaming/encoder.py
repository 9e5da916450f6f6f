"""Chat-completion chunk encoding for the engine's SSE events.

The engine streams ``response.*`` events; chat clients expect
``chat.completion.chunk`` frames terminated by ``data: [DONE]``. The
encoder is a small state machine over a ``StreamingSession``:

    IDLE ──first delta──▶ STREAMING ──completed / [DONE] / EOF──▶ COMPLETED

Event handling
--------------
``response.created``
    Adopts ``response.created_at`` as the session timestamp. Emits nothing.
``response.output_text.delta``
    The first non-empty delta announces ``{"role": "assistant"}``; every
    delta then goes through ``reshape_delta`` and emits a content chunk
    when the reshaper releases text.
``response.completed``
    Discards the pending newline run, emits the ``finish_reason: "stop"``
    chunk (with usage when the engine reported it), then the terminator.
``[DONE]``
    Emits the terminator directly, without a usage chunk.
anything else
    Ignored.

Nothing is emitted once the session is completed. Each call returns the
frames for one upstream event, ready to be written and flushed together.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from translation_bridge.ids import IdFactory
from translation_bridge.responses import Usage
from translation_bridge.streaming.reshaper import reshape_delta
from translation_bridge.streaming.sse import UpstreamEvent

CREATED_EVENT = "response.created"
DELTA_EVENT = "response.output_text.delta"
COMPLETED_EVENT = "response.completed"

CHUNK_OBJECT = "chat.completion.chunk"
TERMINATOR = "data: [DONE]\n\n"


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"


@dataclass
class StreamingSession:
    """Per-request streaming state. Never shared between requests."""

    stream_id: str
    model: str
    created_at: int
    role_announced: bool = False
    pending_whitespace: str = ""
    closed: bool = False

    @classmethod
    def start(cls, model: str, ids: IdFactory) -> StreamingSession:
        return cls(stream_id=ids.new_id("chatcmpl"), model=model, created_at=ids.now())

    @property
    def state(self) -> StreamState:
        if self.closed:
            return StreamState.COMPLETED
        if self.role_announced:
            return StreamState.STREAMING
        return StreamState.IDLE


def format_sse_data(payload: Any) -> str:
    """Return one ``data: {json}`` frame."""
    return f"data: {json.dumps(payload, ensure_ascii=False, separators=(',', ':'))}\n\n"


def _chunk(
    session: StreamingSession,
    delta: dict[str, Any],
    finish_reason: str | None = None,
    usage: Usage | None = None,
) -> str:
    payload: dict[str, Any] = {
        "id": session.stream_id,
        "object": CHUNK_OBJECT,
        "created": session.created_at,
        "model": session.model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    if usage is not None:
        payload["usage"] = usage.to_dict()
    return format_sse_data(payload)


def _close(session: StreamingSession) -> list[str]:
    session.pending_whitespace = ""
    session.closed = True
    return [TERMINATOR]


def _on_created(session: StreamingSession, payload: Any) -> list[str]:
    response = payload.get("response") if isinstance(payload, dict) else None
    created_at = response.get("created_at") if isinstance(response, dict) else None
    if isinstance(created_at, int | float) and not isinstance(created_at, bool):
        session.created_at = int(created_at)
    return []


def _on_delta(session: StreamingSession, payload: Any) -> list[str]:
    delta = payload.get("delta") if isinstance(payload, dict) else None
    if not isinstance(delta, str):
        return []
    delta = delta.replace("\r", "")
    if not delta:
        return []

    frames = []
    if not session.role_announced:
        frames.append(_chunk(session, {"role": "assistant"}))
        session.role_announced = True

    text, session.pending_whitespace = reshape_delta(session.pending_whitespace, delta)
    if text:
        frames.append(_chunk(session, {"content": text}))
    return frames


def _on_completed(session: StreamingSession, payload: Any) -> list[str]:
    response = payload.get("response") if isinstance(payload, dict) else None
    raw_usage = response.get("usage") if isinstance(response, dict) else None
    usage = Usage.from_upstream(raw_usage) if isinstance(raw_usage, dict) else None
    # The held-back newline run is dropped, never flushed.
    session.pending_whitespace = ""
    terminal = _chunk(session, {}, finish_reason="stop", usage=usage)
    return [terminal, *_close(session)]


_HANDLERS = {
    CREATED_EVENT: _on_created,
    DELTA_EVENT: _on_delta,
    COMPLETED_EVENT: _on_completed,
}


def encode_event(session: StreamingSession, event: UpstreamEvent) -> list[str]:
    """Advance the session by one upstream event and return its frames."""
    if session.closed:
        return []
    if event.is_done:
        return _close(session)
    handler = _HANDLERS.get(event.name)
    if handler is None:
        return []
    return handler(session, event.payload)


def finish_stream(session: StreamingSession) -> list[str]:
    """Close a session whose upstream ended without a terminal event."""
    if session.closed:
        return []
    return _close(session)


async def encode_events(
    session: StreamingSession, events: AsyncIterable[UpstreamEvent]
) -> AsyncIterator[str]:
    """Fold ``events`` through the session, yielding one write group per event.

    A write group is the concatenation of the frames produced by one event;
    events that produce nothing yield nothing.
    """
    async for event in events:
        frames = encode_event(session, event)
        if frames:
            yield "".join(frames)
        if session.closed:
            return
    frames = finish_stream(session)
    if frames:
        yield "".join(frames)
