"""
Shared pytest fixtures for the translation bridge test suite.

This module provides fixtures that are automatically available to all test files:
- A deterministic ``IdFactory`` (seeded random source, frozen clock)
- A fake translation engine served through ``httpx.MockTransport``
- FastAPI TestClient instances wired to the fake engine
- Builders for engine response bodies and SSE streams

No test reaches the network: every upstream call lands in ``FakeEngine``.
"""

import json
import random
from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from translation_bridge.api.server import create_app
from translation_bridge.config import BridgeConfig
from translation_bridge.ids import IdFactory
from translation_bridge.upstream.client import UpstreamClient

ENGINE_URL = "https://engine.test/api/v3/responses"
FROZEN_TIME = 1_700_000_000.0
AUTH = {"Authorization": "Bearer sk-test"}


# ============================================================================
# FAKE ENGINE
# ============================================================================


class FakeEngine:
    """
    Stand-in for the translation engine.

    Each call is recorded in ``requests``; the reply is built by ``reply``,
    which tests replace with whatever the scenario needs.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json=engine_body("你好")
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def client(self, timeout_seconds: float = 5.0) -> UpstreamClient:
        return UpstreamClient(
            base_url=ENGINE_URL,
            timeout_seconds=timeout_seconds,
            transport=httpx.MockTransport(self.handle),
        )


def engine_body(text: str, usage: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """Build a non-streaming engine reply carrying one assistant message."""
    body: dict[str, Any] = {
        "id": "resp_0001",
        "object": "response",
        "created_at": 1_699_999_999,
        "model": "engine-model",
        "output": [
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text}],
            }
        ],
        "usage": usage if usage is not None else {"input_tokens": 11, "output_tokens": 7},
    }
    body.update(extra)
    return body


def sse(event: str, data: Any) -> str:
    """One engine SSE frame; ``data`` is JSON-encoded unless already a string."""
    payload = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    return f"event: {event}\ndata: {payload}\n\n"


def delta_stream(*deltas: str, usage: dict[str, Any] | None = None) -> bytes:
    """A complete engine stream: created, one frame per delta, completed."""
    frames = [sse("response.created", {"response": {"id": "resp_1", "created_at": 1_690_000_000}})]
    frames += [sse("response.output_text.delta", {"delta": d}) for d in deltas]
    response: dict[str, Any] = {"id": "resp_1"}
    if usage is not None:
        response["usage"] = usage
    frames.append(sse("response.completed", {"response": response}))
    return "".join(frames).encode("utf-8")


def data_frames(raw: str) -> list[Any]:
    """Split an encoded stream into decoded ``data:`` payloads ("[DONE]" kept as-is)."""
    payloads = []
    for block in raw.split("\n\n"):
        if not block.startswith("data: "):
            continue
        data = block[len("data: ") :]
        payloads.append(data if data == "[DONE]" else json.loads(data))
    return payloads


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def ids() -> IdFactory:
    """Identifier source with a seeded random generator and a frozen clock."""
    return IdFactory(rng=random.Random(0), clock=lambda: FROZEN_TIME)


@pytest.fixture
def settings() -> BridgeConfig:
    """Default configuration, independent of any local server.ini."""
    return BridgeConfig()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_client(
    engine: FakeEngine, ids: IdFactory
) -> Generator[Callable[[BridgeConfig], TestClient], None, None]:
    """
    Build TestClients for custom settings.

    Clients are entered (so the app lifespan runs) and closed on teardown.
    """
    opened: list[TestClient] = []

    def _make(cfg: BridgeConfig, **client_kwargs: Any) -> TestClient:
        app = create_app(cfg, upstream=engine.client(cfg.upstream.timeout_seconds), ids=ids)
        client = TestClient(app, **client_kwargs)
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_client, settings: BridgeConfig) -> TestClient:
    """TestClient for the default configuration."""
    return make_client(settings)
