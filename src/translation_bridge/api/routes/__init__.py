"""API route registration."""

from fastapi import FastAPI

from translation_bridge.api.routes import completions, health
from translation_bridge.config import BridgeConfig
from translation_bridge.service import TranslationBridgeService


def register_routes(app: FastAPI, service: TranslationBridgeService, settings: BridgeConfig):
    """Register all API routes with the FastAPI app."""
    app.include_router(health.router)
    app.include_router(completions.router(service, settings))
