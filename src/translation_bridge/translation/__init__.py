"""Request-side translation logic.

Package structure
-----------------
languages.py  get_language_code - multi-script language name → code table.
content.py    parse_content / extract_text - message content variants and
              depth-first text extraction.
inputs.py     from_messages / from_responses_input - instruction and user
              text for the two inbound protocols.
directive.py  resolve_directive - JSON-then-regex instruction parsing plus
              ordered override sources.
payload.py    build_upstream_payload - the engine request body.
"""

from translation_bridge.translation.directive import TranslationDirective, resolve_directive
from translation_bridge.translation.languages import get_language_code

__all__ = ["TranslationDirective", "get_language_code", "resolve_directive"]
