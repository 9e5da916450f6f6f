"""Shared helpers for API route modules."""

import json
from typing import Any, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ValidationError

from translation_bridge.errors import InvalidRequestError
from translation_bridge.service import StreamResult

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request, max_bytes: int) -> dict[str, Any]:
    """
    Read the request body as a JSON object, enforcing the size limit.

    The declared ``Content-Length`` is checked before reading so oversized
    bodies are rejected without buffering them.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise InvalidRequestError("Request too large")

    raw = await request.body()
    if len(raw) > max_bytes:
        raise InvalidRequestError("Request too large")

    try:
        data = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("Invalid JSON") from None
    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid JSON")
    return data


def parse_body(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate a parsed body against a request model."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise InvalidRequestError(f"Invalid request body: {fields}") from None


def to_response(result: dict[str, Any] | StreamResult) -> JSONResponse | StreamingResponse:
    """Wrap a service result in the matching Starlette response."""
    if isinstance(result, StreamResult):
        return StreamingResponse(result.chunks, headers=result.headers)
    return JSONResponse(result)
