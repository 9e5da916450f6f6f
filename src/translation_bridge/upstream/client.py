"""Async HTTP client for the translation engine.

``UpstreamClient`` is the only place in the bridge that makes a network
call. It wraps one ``httpx.AsyncClient`` that is opened when the app
starts and closed when it stops.

Failure handling
----------------
Every request is attempted exactly once; there is no retry on timeout or
on any other failure.

- One deadline of ``timeout_seconds`` covers the whole exchange: connect,
  send, response headers and, for non-streaming calls and error replies,
  the full body. A streamed 2xx body is read after ``send`` returns and is
  bounded per read by the client's ``httpx.Timeout`` instead.
- Network errors and timeouts raise ``UpstreamError`` with status 500.
- Non-2xx responses are read in full, closed, and raise ``UpstreamError``
  with the upstream status and a message extracted by
  ``extract_error_message``.
- 2xx responses are returned *open* so the caller can either read the body
  or stream it. The caller must close them (``response.aclose()``).
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from translation_bridge.errors import UpstreamError

logger = logging.getLogger(__name__)

GENERIC_UPSTREAM_MESSAGE = "upstream request failed"


def extract_error_message(body: bytes, reason: str = "") -> str:
    """Best human-readable message from an error response body.

    Order: JSON ``error.message`` → trimmed raw text → HTTP reason phrase →
    a generic phrase.
    """
    try:
        parsed = json.loads(body)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message

    text = body.decode("utf-8", errors="replace").strip()
    if text:
        return text
    return reason or GENERIC_UPSTREAM_MESSAGE


class UpstreamClient:
    """Sends translation requests to the engine.

    Args:
        base_url:        Full engine endpoint URL.
        timeout_seconds: The single, generous timeout applied to the call.
        transport:       Optional httpx transport (tests pass a
                         ``httpx.MockTransport``).
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout), transport=self._transport
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> UpstreamClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def send(
        self, payload: dict[str, Any], authorization: str, *, stream: bool = False
    ) -> httpx.Response:
        """POST ``payload`` with the caller's credential forwarded unmodified.

        Returns the open 2xx response. The body has not been read when
        ``stream`` is true.
        """
        client = await self.open()
        request = client.build_request(
            "POST",
            self._base_url,
            json=payload,
            headers={"Authorization": authorization},
        )
        try:
            async with asyncio.timeout(self._timeout):
                response = await client.send(request, stream=True)
                if response.is_success:
                    if not stream:
                        await _read_and_close(response)
                    return response
                body = await _read_error_body(response)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Upstream request timed out after %.1fs (%s)", self._timeout, exc)
            raise UpstreamError(f"request timed out after {self._timeout:g}s") from exc
        except httpx.HTTPError as exc:
            logger.warning("Upstream request failed: %s", exc)
            raise UpstreamError(str(exc) or GENERIC_UPSTREAM_MESSAGE) from exc

        message = extract_error_message(body, response.reason_phrase)
        logger.warning("Upstream returned HTTP %d: %.200s", response.status_code, message)
        raise UpstreamError(message, status_code=response.status_code)


async def _read_and_close(response: httpx.Response) -> None:
    try:
        await response.aread()
    finally:
        await response.aclose()


async def _read_error_body(response: httpx.Response) -> bytes:
    try:
        return await response.aread()
    except httpx.HTTPError:
        return b""
    finally:
        await response.aclose()
