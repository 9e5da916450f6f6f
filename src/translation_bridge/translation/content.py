"""Message content model and text extraction.

Chat clients send message content in several shapes: a plain string, an
ordered list of parts, or a part object such as ``{"type": "text",
"text": "..."}``. ``parse_content`` turns the raw JSON value into one of
three explicit variants and ``extract_text`` walks that variant to the
first non-empty text.

Extraction rules
----------------
- ``TextContent``        → the string itself.
- ``PartsContent``       → the first part that extracts to non-empty text.
- ``StructuredContent``  → ``text`` if non-empty, else ``content`` if it is a
                           non-empty string, else the parts nested under
                           ``content``, else empty.

Anything else (numbers, ``None``, booleans) parses to ``None`` and
extracts to the empty string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class PartsContent:
    parts: tuple[ContentValue, ...]


@dataclass(frozen=True)
class StructuredContent:
    """A mapping that may carry ``text`` and/or ``content``.

    ``content`` keeps its string form when it was a string, and becomes a
    ``PartsContent`` when it was a list. Other shapes are dropped.
    """

    text: str | None = None
    content: str | PartsContent | None = None


ContentValue = TextContent | PartsContent | StructuredContent


def parse_content(raw: Any) -> ContentValue | None:
    """Convert a raw JSON value into a ``ContentValue`` (or ``None``)."""
    if isinstance(raw, str):
        return TextContent(raw)
    if isinstance(raw, list):
        return PartsContent(tuple(part for part in map(parse_content, raw) if part is not None))
    if isinstance(raw, dict):
        text = raw.get("text")
        content = raw.get("content")
        if isinstance(content, list):
            nested: str | PartsContent | None = parse_content(content)  # type: ignore[assignment]
        elif isinstance(content, str):
            nested = content
        else:
            nested = None
        return StructuredContent(text=text if isinstance(text, str) else None, content=nested)
    return None


def extract_text(value: ContentValue | None) -> str:
    """Return the first non-empty text found depth-first, or ``""``."""
    if value is None:
        return ""
    if isinstance(value, TextContent):
        return value.text
    if isinstance(value, PartsContent):
        for part in value.parts:
            text = extract_text(part)
            if text:
                return text
        return ""
    if isinstance(value, StructuredContent):
        if value.text:
            return value.text
        if isinstance(value.content, str):
            return value.content
        if isinstance(value.content, PartsContent):
            return extract_text(value.content)
        return ""
    raise TypeError(f"unsupported content variant: {type(value).__name__}")


def content_text(raw: Any) -> str:
    """Shortcut: parse a raw JSON value and extract its text."""
    return extract_text(parse_content(raw))
