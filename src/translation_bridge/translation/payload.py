"""Outbound request assembly for the translation engine."""

from __future__ import annotations

from typing import Any

from translation_bridge.translation.directive import TranslationDirective


def parse_stream_flag(value: Any) -> bool:
    """Accept ``true``/``false`` as booleans or (case-insensitive) strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def build_upstream_payload(
    model: str,
    directive: TranslationDirective,
    text: str,
    stream: bool,
) -> dict[str, Any]:
    """Build the engine request body.

    ``stream`` is only included when true; the engine treats its absence
    as a non-streaming call.
    """
    payload: dict[str, Any] = {
        "model": model,
        "input": [
            {
                "role": "user",
                "content": [
                    {
                        "type": "input_text",
                        "text": text,
                        "translation_options": directive.to_payload(),
                    }
                ],
            }
        ],
    }
    if stream:
        payload["stream"] = True
    return payload
