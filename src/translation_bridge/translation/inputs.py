"""Instruction and user-text extraction for the two inbound protocols.

Both protocols answer the same two questions: which text is the
instruction (the system turn) and which text should be translated (the
user turn).

Message-list protocol (``/v1/chat/completions``)
    The first ``system`` message with non-empty text is the instruction;
    the last ``user`` message supplies the text. Roles compare
    case-insensitively.

Structured-input protocol (``/v1/responses``)
    ``input`` is a string, a list of strings and/or segment objects, or a
    single segment object. A segment's content is the first non-null of
    ``content``, ``input``, ``text`` and ``value``. The first non-empty
    ``system`` segment is the instruction; the last non-empty user segment
    (role ``user`` or no role) or bare string supplies the text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from translation_bridge.translation.content import content_text

_SEGMENT_CONTENT_KEYS = ("content", "input", "text", "value")


@dataclass(frozen=True)
class ExtractedTurns:
    instruction: str | None
    user_text: str


def _role(turn: Any) -> str:
    role = turn.get("role") if isinstance(turn, dict) else None
    return role.lower() if isinstance(role, str) else ""


def from_messages(messages: list[Any] | None) -> ExtractedTurns:
    """Extract turns from a chat-completions ``messages`` list."""
    messages = messages or []

    instruction = None
    for message in messages:
        if _role(message) == "system":
            text = content_text(message.get("content"))
            if text:
                instruction = text
                break

    user_text = ""
    for message in reversed(messages):
        if _role(message) == "user":
            user_text = content_text(message.get("content"))
            break

    return ExtractedTurns(instruction=instruction, user_text=user_text)


def _segment_content(segment: dict[str, Any]) -> Any:
    for key in _SEGMENT_CONTENT_KEYS:
        if segment.get(key) is not None:
            return segment[key]
    return None


def from_responses_input(raw_input: Any) -> ExtractedTurns:
    """Extract turns from a responses-style ``input`` value."""
    if isinstance(raw_input, str):
        return ExtractedTurns(instruction=None, user_text=raw_input)

    if isinstance(raw_input, dict):
        segments: list[Any] = [raw_input]
    elif isinstance(raw_input, list):
        segments = raw_input
    else:
        segments = []

    instruction = None
    user_text = ""
    for segment in segments:
        if isinstance(segment, str):
            if segment:
                user_text = segment
            continue
        if not isinstance(segment, dict):
            continue
        text = content_text(_segment_content(segment))
        if not text:
            continue
        role = _role(segment)
        if role == "system":
            if instruction is None:
                instruction = text
        elif role in ("", "user"):
            user_text = text

    return ExtractedTurns(instruction=instruction, user_text=user_text)
