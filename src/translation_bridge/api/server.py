"""
FastAPI application for the translation bridge.

This module builds the ASGI application that fronts the translation engine
with a chat-completion compatible API. ``create_app`` wires together:
- CORS middleware for browser-based chat clients
- The upstream client, opened and closed with the application lifespan
- The translation service shared by every route
- Exception handlers that render every failure as the shared error envelope

A module-level ``app`` built from the loaded configuration is provided for
``uvicorn translation_bridge.api.server:app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from translation_bridge import __version__
from translation_bridge.api.routes import register_routes
from translation_bridge.config import BridgeConfig, config, configure_logging
from translation_bridge.errors import (
    BridgeError,
    InternalError,
    InvalidRequestError,
    NotFoundError,
)
from translation_bridge.ids import IdFactory
from translation_bridge.service import TranslationBridgeService
from translation_bridge.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)


# ============================================================================
# ERROR ENVELOPE HANDLERS
# ============================================================================


def _envelope_response(error: BridgeError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_envelope())


async def _bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return _envelope_response(exc)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods both answer 404.
    if exc.status_code in (404, 405):
        return _envelope_response(NotFoundError())
    error = BridgeError(str(exc.detail), exc.status_code, "invalid_request_error")
    return _envelope_response(error)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _envelope_response(InvalidRequestError("Invalid request"))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope_response(InternalError())


# ============================================================================
# APPLICATION FACTORY
# ============================================================================


def create_app(
    settings: BridgeConfig | None = None,
    upstream: UpstreamClient | None = None,
    ids: IdFactory | None = None,
) -> FastAPI:
    """
    Build the bridge application.

    Args:
        settings: Configuration to use. Defaults to the loaded ``config``.
        upstream: Engine transport. Defaults to a client for
                  ``settings.upstream.base_url``; tests pass one backed by
                  ``httpx.MockTransport``.
        ids: Identifier and timestamp source. Defaults to a fresh
             ``IdFactory``.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or config
    upstream = upstream or UpstreamClient(
        base_url=settings.upstream.base_url,
        timeout_seconds=settings.upstream.timeout_seconds,
    )
    service = TranslationBridgeService(
        upstream=upstream,
        ids=ids or IdFactory(),
        default_target_language=settings.translation.default_target_language,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await upstream.open()
        logger.info("Forwarding translation requests to %s", settings.upstream.base_url)
        try:
            yield
        finally:
            await upstream.aclose()

    app = FastAPI(title="Translation Bridge", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BridgeError, _bridge_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    register_routes(app, service, settings)
    return app


app = create_app()


# ============================================================================
# SERVER STARTUP
# ============================================================================


def start_server(host: str | None = None, port: int | None = None) -> None:
    """
    Run the bridge under uvicorn.

    Args:
        host: Interface to bind. Defaults to ``config.server.host``.
        port: Port to listen on. Defaults to ``config.server.port``.
    """
    import uvicorn

    configure_logging(config.logging)
    host = host or config.server.host
    port = port or config.server.port
    logger.info("Starting translation bridge %s on %s:%d", __version__, host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    start_server()
