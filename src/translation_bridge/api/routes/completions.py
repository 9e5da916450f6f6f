"""Chat-completion compatible translation endpoints.

``POST /v1/chat/completions``  message-list protocol; streams re-encoded
                               ``chat.completion.chunk`` frames.
``POST /v1/responses``         structured-input protocol; streams a relay of
                               the engine's own events.

Checks run in order: HTTPS (when enabled), bearer credential, body size,
JSON, body shape. All of them fail before the engine is contacted.
"""

from fastapi import APIRouter, Depends, Request

from translation_bridge.api.auth import https_guard, require_bearer
from translation_bridge.api.models import ChatCompletionRequest, ResponsesRequest
from translation_bridge.api.routes.utils import parse_body, read_json_body, to_response
from translation_bridge.config import BridgeConfig
from translation_bridge.service import TranslationBridgeService


def router(service: TranslationBridgeService, settings: BridgeConfig) -> APIRouter:
    """Build the translation router around one service instance."""
    api = APIRouter(dependencies=[Depends(https_guard(settings.security.require_https))])
    max_bytes = settings.security.max_request_bytes

    @api.post("/v1/chat/completions")
    async def chat_completions(request: Request, authorization: str = Depends(require_bearer)):
        """Translate the last user message of a chat-completions request."""
        data = await read_json_body(request, max_bytes)
        body = parse_body(ChatCompletionRequest, data)
        return to_response(await service.chat_completions(body, authorization))

    @api.post("/v1/responses")
    async def responses(request: Request, authorization: str = Depends(require_bearer)):
        """Translate the user input of a responses-style request."""
        data = await read_json_body(request, max_bytes)
        body = parse_body(ResponsesRequest, data)
        return to_response(await service.responses(body, authorization))

    return api
