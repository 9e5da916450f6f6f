"""Streaming protocol adapter.

Pipeline, one frame at a time:

    upstream bytes ──▶ sse.SSEFrameParser ──▶ sse.decode_event
                   ──▶ encoder.encode_event (reshaper.reshape_delta inside)
                   ──▶ chat.completion.chunk frames

sse.py       SSE framing and event decoding.
reshaper.py  Whitespace-only delta regrouping.
encoder.py   StreamingSession and the chunk-encoding state machine.
"""

from translation_bridge.streaming.encoder import (
    StreamingSession,
    StreamState,
    encode_event,
    encode_events,
    finish_stream,
)
from translation_bridge.streaming.reshaper import reshape_delta
from translation_bridge.streaming.sse import (
    DONE,
    SSEFrame,
    SSEFrameParser,
    UpstreamEvent,
    decode_event,
    iter_events,
    iter_frames,
)

__all__ = [
    "DONE",
    "SSEFrame",
    "SSEFrameParser",
    "StreamState",
    "StreamingSession",
    "UpstreamEvent",
    "decode_event",
    "encode_event",
    "encode_events",
    "finish_stream",
    "iter_events",
    "iter_frames",
    "reshape_delta",
]
