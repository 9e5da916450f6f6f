"""Server-Sent-Events frame parsing.

``SSEFrameParser`` turns an arbitrarily chunked byte stream into discrete
``SSEFrame`` records. It keeps one growing text buffer across reads, so a
frame (or a multi-byte UTF-8 character) split between reads is only
emitted once it is complete. Feeding a stream whole or split at any
boundary yields the same frames.

Framing rules:
    - ``\\r\\n`` is normalised to ``\\n``; a blank line (``\\n\\n``) ends a frame.
    - ``event:`` sets the event name (default ``""``); ``data:`` lines are
      collected in order and joined with ``\\n``. Both values are trimmed.
    - Whitespace-only segments produce no frame.
    - Bytes left in the buffer when the stream ends are discarded.

``decode_event`` then turns a frame into an ``UpstreamEvent``: the literal
payload ``[DONE]`` becomes the ``DONE`` sentinel and everything else is
parsed as JSON. Frames with empty or non-JSON data yield ``None``.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DONE_LITERAL = "[DONE]"


class _Done:
    """Sentinel payload for the ``[DONE]`` terminal literal."""

    def __repr__(self) -> str:
        return "DONE"


DONE = _Done()


@dataclass(frozen=True)
class SSEFrame:
    event: str
    data: str


@dataclass(frozen=True)
class UpstreamEvent:
    name: str
    payload: Any

    @property
    def is_done(self) -> bool:
        return self.payload is DONE


class SSEFrameParser:
    """Incremental SSE frame splitter. One instance per stream."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[SSEFrame]:
        """Append ``chunk`` and return every frame it completed."""
        self._buffer = (self._buffer + self._decoder.decode(chunk)).replace("\r\n", "\n")

        frames = []
        while (index := self._buffer.find("\n\n")) != -1:
            segment = self._buffer[:index]
            self._buffer = self._buffer[index + 2 :]
            frame = _parse_segment(segment)
            if frame is not None:
                frames.append(frame)
        return frames


def _parse_segment(segment: str) -> SSEFrame | None:
    segment = segment.replace("\r", "")
    if not segment.strip():
        return None

    event = ""
    data_lines = []
    for line in segment.split("\n"):
        if line.startswith("event:"):
            event = line[len("event:") :].strip()
        elif line.startswith("data:"):
            data_lines.append(line[len("data:") :].strip())
    return SSEFrame(event=event, data="\n".join(data_lines))


async def iter_frames(chunks: AsyncIterable[bytes]) -> AsyncIterator[SSEFrame]:
    """Yield frames from an async byte stream as soon as each completes."""
    parser = SSEFrameParser()
    async for chunk in chunks:
        for frame in parser.feed(chunk):
            yield frame


def decode_event(frame: SSEFrame) -> UpstreamEvent | None:
    """Parse a frame's payload; drop (and log) frames that are not JSON."""
    if not frame.data:
        return None
    if frame.data == DONE_LITERAL:
        return UpstreamEvent(name=frame.event, payload=DONE)
    try:
        payload = json.loads(frame.data)
    except ValueError:
        logger.warning(
            "Dropping SSE frame with non-JSON data (event=%r): %.200s", frame.event, frame.data
        )
        return None
    return UpstreamEvent(name=frame.event, payload=payload)


async def iter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[UpstreamEvent]:
    """Yield decoded events, skipping frames ``decode_event`` drops."""
    async for frame in iter_frames(chunks):
        event = decode_event(frame)
        if event is not None:
            yield event
