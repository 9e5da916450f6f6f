"""Translation directive resolution.

A directive is the ``{source_language?, target_language}`` pair sent with
every translation call. It is assembled from several loosely-typed inputs:

1. The instruction text (the system turn). It is parsed by
   ``parse_instruction``, which tries JSON first and only falls back to a
   ``key: value`` scan when the text is not a JSON object. A successful
   JSON parse always skips the scan, even when the object has neither key.
2. Override sources (the request's ``translation_options`` and
   ``metadata``), applied in order. Each source either nests the directive
   under ``translation_options`` or is directive-shaped itself.

Every raw value passes through ``get_language_code`` and may only overwrite
a field when it normalises to a non-empty code. Later sources overwrite
earlier ones field by field. Resolution never fails: with no usable input
the result is the configured default target and no source language.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from translation_bridge.translation.languages import get_language_code

SOURCE_KEY = "source_language"
TARGET_KEY = "target_language"
OVERRIDE_KEY = "translation_options"

_SOURCE_RE = re.compile(r"source_language\s*:\s*['\"]?([^'\"]+)['\"]?")
_TARGET_RE = re.compile(r"target_language\s*:\s*['\"]?([^'\"]+)['\"]?")


@dataclass
class TranslationDirective:
    target_language: str
    source_language: str | None = None

    def apply(self, raw: Mapping[str, Any]) -> None:
        """Overwrite fields from ``raw`` where the value normalises to a code."""
        source = _normalise(raw.get(SOURCE_KEY))
        if source:
            self.source_language = source
        target = _normalise(raw.get(TARGET_KEY))
        if target:
            self.target_language = target

    def to_payload(self) -> dict[str, str]:
        """Wire form for the engine's ``translation_options`` field."""
        payload = {}
        if self.source_language:
            payload[SOURCE_KEY] = self.source_language
        payload[TARGET_KEY] = self.target_language
        return payload


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def _normalise(value: Any) -> str:
    text = _as_text(value)
    if not text:
        return ""
    return get_language_code(text)


def parse_instruction(instruction: str | None) -> dict[str, Any]:
    """Pull raw language values out of free-text or JSON instruction text.

    Returns a dict with whichever of ``source_language`` / ``target_language``
    were found; values are not yet normalised.
    """
    if not instruction:
        return {}

    try:
        parsed = json.loads(instruction)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return {key: parsed[key] for key in (SOURCE_KEY, TARGET_KEY) if key in parsed}

    found: dict[str, Any] = {}
    if match := _SOURCE_RE.search(instruction):
        found[SOURCE_KEY] = match.group(1)
    if match := _TARGET_RE.search(instruction):
        found[TARGET_KEY] = match.group(1)
    return found


def _override_candidate(source: Any) -> Mapping[str, Any] | None:
    if not isinstance(source, Mapping):
        return None
    nested = source.get(OVERRIDE_KEY)
    if isinstance(nested, Mapping):
        return nested
    return source


def resolve_directive(
    instruction: str | None,
    *overrides: Any,
    default_target: str = "zh",
) -> TranslationDirective:
    """Build the final directive from the instruction and override sources.

    Args:
        instruction:    System-turn text, JSON or free text. May be ``None``.
        *overrides:     Override sources in increasing priority. Non-mapping
                        values are skipped.
        default_target: Target language used when nothing else supplies one.
    """
    directive = TranslationDirective(target_language=default_target)
    directive.apply(parse_instruction(instruction))
    for source in overrides:
        candidate = _override_candidate(source)
        if candidate is not None:
            directive.apply(candidate)
    return directive
