"""
Pydantic models for inbound request bodies.

Both protocols are deliberately loose: clients send ``stream`` as a boolean
or a string, content in several shapes, and override objects of any shape.
Fields are therefore typed ``Any`` where the core accepts more than one
shape and normalises it itself; unknown fields are accepted and ignored.

Models:
1. ChatCompletionRequest: message-list protocol (``/v1/chat/completions``)
2. ResponsesRequest: structured-input protocol (``/v1/responses``)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ChatCompletionRequest(BaseModel):
    """
    Message-list request.

    Attributes:
        model: Opaque model identifier, passed through to the engine (required)
        messages: Role/content turns; the system turn carries the instruction
        stream: ``true``/``false`` as boolean or string (default false)
        translation_options: Directive override object
        metadata: Free-form bag that may nest ``translation_options``
    """

    model_config = ConfigDict(extra="allow")

    model: Any = None
    messages: list[Any] | None = None
    stream: Any = False
    translation_options: Any = None
    metadata: Any = None


class ResponsesRequest(BaseModel):
    """
    Structured-input request.

    Attributes:
        model: Opaque model identifier, passed through to the engine (required)
        input: A string, a list of strings/turn segments, or one segment
        stream: ``true``/``false`` as boolean or string (default false)
        translation_options: Directive override object
        metadata: Free-form bag that may nest ``translation_options``
    """

    model_config = ConfigDict(extra="allow")

    model: Any = None
    input: Any = None
    stream: Any = False
    translation_options: Any = None
    metadata: Any = None
