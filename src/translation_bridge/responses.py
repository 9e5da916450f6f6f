"""Non-streaming response transformation and usage mapping.

The engine returns a responses-style body: an ``output`` array of items,
where the assistant's translation is the first ``output_text`` part of the
first assistant ``message`` item, plus a ``usage`` object. Two transforms
reshape it for callers:

``to_chat_completion``
    Flattens the body into a single ``chat.completion`` object with one
    assistant message and recomputed usage.

``to_responses_body``
    Passes the body through, guaranteeing ``id``, ``object``, ``created``,
    ``model``, ``usage`` and a non-empty ``output``. Missing scalar fields
    are synthesised, usage is always recomputed and every other field is
    preserved.

Both raise ``UpstreamError`` when the body carries an ``error`` object or
no assistant text can be found.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from translation_bridge.errors import UpstreamError
from translation_bridge.ids import IdFactory

NO_RESULT_MESSAGE = "no valid translation result found"


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_upstream(cls, usage: Any) -> Usage:
        """Map either upstream naming scheme onto prompt/completion/total.

        ``prompt_tokens``/``completion_tokens`` win over
        ``input_tokens``/``output_tokens`` when both are present. Zero counts
        as missing, so a zero field falls back to the other scheme and a zero
        total to the sum of the other two.
        """
        if not isinstance(usage, dict):
            return cls()
        prompt = _first_int(usage, "prompt_tokens", "input_tokens")
        completion = _first_int(usage, "completion_tokens", "output_tokens")
        total = _first_int(usage, "total_tokens")
        if total is None:
            total = (prompt or 0) + (completion or 0)
        return cls(prompt or 0, completion or 0, total)

    def to_dict(self) -> dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


def _first_int(mapping: dict[str, Any], *keys: str) -> int | None:
    """First non-zero numeric value among ``keys``; zero counts as absent."""
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, int | float) and not isinstance(value, bool) and int(value):
            return int(value)
    return None


def find_assistant_text(body: dict[str, Any]) -> str:
    """Return the first non-empty assistant ``output_text``, or ``""``."""
    output = body.get("output")
    if not isinstance(output, list):
        return ""
    for item in output:
        if not isinstance(item, dict):
            continue
        if item.get("type") != "message" or item.get("role") != "assistant":
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and part.get("type") == "output_text":
                text = part.get("text")
                if isinstance(text, str) and text:
                    return text
    return ""


def raise_for_body_error(body: dict[str, Any]) -> None:
    """Raise ``UpstreamError`` when a 2xx body still reports an error."""
    error = body.get("error")
    if not error:
        return
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str) or not message:
        message = json.dumps(error, ensure_ascii=False)
    raise UpstreamError(message)


def _require_assistant_text(body: dict[str, Any]) -> str:
    raise_for_body_error(body)
    text = find_assistant_text(body)
    if not text:
        raise UpstreamError(NO_RESULT_MESSAGE)
    return text


def to_chat_completion(body: dict[str, Any], model: str, ids: IdFactory) -> dict[str, Any]:
    """Flatten an engine body into a ``chat.completion`` object."""
    text = _require_assistant_text(body)
    return {
        "id": ids.new_id("chatcmpl"),
        "object": "chat.completion",
        "created": ids.now(),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
        "usage": Usage.from_upstream(body.get("usage")).to_dict(),
    }


def to_responses_body(body: dict[str, Any], model: str, ids: IdFactory) -> dict[str, Any]:
    """Pass an engine body through with the guaranteed top-level fields.

    ``output`` needs no synthesis: a body without an assistant message in
    its ``output`` array is rejected before any field is touched.
    """
    _require_assistant_text(body)

    result = dict(body)
    if not isinstance(result.get("id"), str) or not result["id"]:
        result["id"] = ids.new_id("resp")
    if not isinstance(result.get("object"), str) or not result["object"]:
        result["object"] = "response"
    created = result.get("created")
    if not isinstance(created, int | float) or isinstance(created, bool):
        result["created"] = ids.now()
    if not isinstance(result.get("model"), str) or not result["model"]:
        result["model"] = model
    result["usage"] = Usage.from_upstream(body.get("usage")).to_dict()
    return result
